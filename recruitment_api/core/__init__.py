"""
Core application utilities.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with request/tenant context
- The application error hierarchy
- Per-request context and FastAPI dependency helpers
- Token and password helpers
"""
