"""
Recruitment API: multi-tenant backend for recruitment and gym management.

Layers (bottom-up): query generator -> query executor -> repository ->
unit of work -> services -> FastAPI routes.
"""
