from __future__ import annotations

import asyncio
import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.exceptions import HTTPException as StarletteHTTPException

from recruitment_api.core.deps import get_unit_of_work
from recruitment_api.core.errors import ERROR_MESSAGES, AppError, ErrorCode
from recruitment_api.core.logging import configure_logging, request_id_var, tenant_id_var, user_id_var
from recruitment_api.core.settings import AppSettings, get_app_settings
from recruitment_api.db.config import get_settings
from recruitment_api.db.run_migrations import main as run_alembic
from recruitment_api.db.seed import SeederManager, default_seeders
from recruitment_api.db.session import create_engine_from_settings, create_schema
from recruitment_api.repositories.unit_of_work import UnitOfWork
from recruitment_api.schemas.common import ErrorInfo, ErrorResponse, MessageResponse

# Routers
from recruitment_api.api.routes.auth import router as auth_router
from recruitment_api.api.routes.email_templates import router as email_templates_router
from recruitment_api.api.routes.forms import (
    form_field_batch_router,
    form_fields_router,
    form_sections_router,
    form_templates_router,
    option_groups_router,
)
from recruitment_api.api.routes.gyms import router as gyms_router
from recruitment_api.api.routes.organization import router as organizations_router
from recruitment_api.api.routes.recruitment import (
    applications_router,
    departments_router,
    positions_router,
    public_router,
)
from recruitment_api.api.routes.tasks import router as tasks_router
from recruitment_api.api.routes.user_info import me_router as userinfo_me_router
from recruitment_api.api.routes.user_info import router as userinfo_router
from recruitment_api.api.routes.users import router as users_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness and readiness probes."},
    {"name": "Auth", "description": "Registration, login and token endpoints."},
    {"name": "Organizations", "description": "The caller's organization profile."},
    {"name": "Users", "description": "User administration (organization admins)."},
    {"name": "User Info", "description": "User profiles."},
    {"name": "Gyms", "description": "Gym locations."},
    {"name": "Departments", "description": "Departments that own positions."},
    {"name": "Positions", "description": "Job openings."},
    {"name": "Applications", "description": "Candidate applications."},
    {"name": "Tasks", "description": "Team tasks."},
    {"name": "Forms", "description": "Form templates, sections, fields and option groups."},
    {"name": "Email Templates", "description": "Stored email bodies per event type."},
    {"name": "Public", "description": "Unauthenticated careers page and public form endpoints."},
]

_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.RECORD_NOT_FOUND,
    409: ErrorCode.CONFLICT,
}


def _build_error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    """Build the standardized error envelope."""
    settings: AppSettings = request.app.state.settings
    stack = None
    if exc is not None and settings.is_development:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    err = ErrorResponse(
        error=ErrorInfo(
            code=code,
            message=message,
            details=details,
            timestamp=datetime.now(tz=timezone.utc),
            request_id=getattr(request.state, "request_id", None)
            or request.headers.get("X-Request-ID")
            or str(uuid4()),
            stack=stack,
        )
    )
    return JSONResponse(
        status_code=status_code,
        content=err.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


async def app_error_handler(request: Request, exc: AppError):
    """Render AppError subclasses with their own code and status."""
    if exc.status_code >= 500:
        logger.error("Request failed: %r", exc, exc_info=exc.__cause__ or exc)
    return _build_error_response(
        request,
        status_code=exc.status_code,
        code=exc.code.value,
        message=exc.message,
        details=exc.details,
        exc=exc,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Global handler for HTTPException to produce a standardized error envelope.
    """
    code = _STATUS_CODES.get(exc.status_code)
    detail = exc.detail if isinstance(exc.detail, str) else None
    return _build_error_response(
        request,
        status_code=exc.status_code,
        code=code.value if code else "HTTP_ERROR",
        message=detail or (ERROR_MESSAGES[code] if code else "HTTP Error"),
        details=None if isinstance(exc.detail, str) else exc.detail,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Global handler for request validation errors with a standard structure.
    """
    return _build_error_response(
        request,
        status_code=400,
        code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        details=jsonable_encoder(exc.errors()),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking internals and to return a structured error.
    """
    logger.exception("Unhandled error processing request")
    return _build_error_response(
        request,
        status_code=500,
        code=ErrorCode.INTERNAL_SERVER_ERROR.value,
        message=ERROR_MESSAGES[ErrorCode.INTERNAL_SERVER_ERROR],
        exc=exc,
    )


async def request_context_middleware(request: Request, call_next):
    """
    Assign a request id (honoring an incoming X-Request-ID), bind it for
    logging, and echo it on every response.
    """
    rid = request.headers.get("X-Request-ID") or str(uuid4())
    token_rid = request_id_var.set(rid)
    token_tenant = tenant_id_var.set(None)
    token_user = user_id_var.set(None)
    request.state.request_id = rid
    request.state.tenant_id = None

    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token_rid)
        tenant_id_var.reset(token_tenant)
        user_id_var.reset(token_user)

    response.headers["X-Request-ID"] = rid
    return response


def _lifespan(engine_override: Optional[AsyncEngine]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Open the connection pool, bring the schema up to date, optionally seed,
        and dispose the pool at shutdown (unless the caller supplied the engine).
        """
        settings: AppSettings = app.state.settings
        engine = engine_override or create_engine_from_settings(get_settings())
        app.state.engine = engine

        if settings.RUN_MIGRATIONS_ON_STARTUP:
            try:
                logger.info("Running Alembic migrations: upgrade head")
                await asyncio.to_thread(run_alembic, ["upgrade", "head"])
                logger.info("Migrations completed.")
            except Exception as exc:
                logger.exception("Migration step failed: %s", exc)
                # Keep serving; readiness probes report the database state.

        if settings.CREATE_SCHEMA_ON_STARTUP:
            await create_schema(engine)

        if settings.AUTO_SEED:
            try:
                logger.info("Running database seeders...")
                summary = await SeederManager(engine, default_seeders()).run()
                logger.info("Seeding completed: %s", summary)
            except Exception as exc:
                logger.exception("Seeding step failed: %s", exc)

        try:
            yield
        finally:
            if engine_override is None:
                await engine.dispose()
                logger.info("Database engine disposed.")

    return lifespan


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[AppSettings] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters:
        settings: application settings (read from the environment when omitted)
        engine: an existing AsyncEngine to use instead of creating one; the
            caller keeps ownership and disposes it.
    """
    settings = settings or get_app_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_tags=openapi_tags,
        lifespan=_lifespan(engine),
    )
    app.state.settings = settings

    # CORS - avoid wildcard with credentials
    cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
    if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
        logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
        cors_allow_credentials = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=cors_allow_credentials,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    app.middleware("http")(request_context_middleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(_build_api_v1())
    return app


def _build_api_v1() -> APIRouter:
    api_v1 = APIRouter(prefix="/api/v1")

    # PUBLIC_INTERFACE
    @api_v1.get(
        "/health",
        response_model=MessageResponse,
        summary="Health Check",
        tags=["Health"],
    )
    def health_check() -> MessageResponse:
        """Basic liveness health check endpoint."""
        return MessageResponse(message="Healthy")

    # PUBLIC_INTERFACE
    @api_v1.get(
        "/health/db",
        response_model=MessageResponse,
        summary="Database Health Check",
        description="Runs a trivial query through the unit of work to verify connectivity.",
        tags=["Health"],
    )
    async def database_health_check(uow: UnitOfWork = Depends(get_unit_of_work)) -> MessageResponse:
        rows = await uow.raw("SELECT 1 AS ok")
        return MessageResponse(message="Healthy", details={"dialect": uow.dialect, "ok": bool(rows)})

    api_v1.include_router(auth_router)
    api_v1.include_router(organizations_router)
    api_v1.include_router(users_router)
    api_v1.include_router(userinfo_me_router)
    api_v1.include_router(userinfo_router)
    api_v1.include_router(gyms_router)
    api_v1.include_router(departments_router)
    api_v1.include_router(positions_router)
    api_v1.include_router(applications_router)
    api_v1.include_router(tasks_router)
    api_v1.include_router(form_templates_router)
    api_v1.include_router(form_sections_router)
    api_v1.include_router(form_field_batch_router)
    api_v1.include_router(form_fields_router)
    api_v1.include_router(option_groups_router)
    api_v1.include_router(email_templates_router)
    api_v1.include_router(public_router)
    return api_v1


app = create_app()
