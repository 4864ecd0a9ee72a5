"""HTTP layer: FastAPI application factory and routers."""
