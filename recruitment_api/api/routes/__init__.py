"""
API route modules. Each module exposes a ``router`` mounted under /api/v1.
"""
