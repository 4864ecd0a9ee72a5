from __future__ import annotations

import logging
from typing import Callable, Optional, Type, TypeVar
from uuid import uuid4

from fastapi import Depends, Path, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncEngine

from recruitment_api.core.context import RequestContext, bind_request_context
from recruitment_api.core.errors import ForbiddenError, UnauthorizedError
from recruitment_api.core.security import ACCESS_TOKEN_TYPE, read_claims
from recruitment_api.db.query_executor import QueryExecutor
from recruitment_api.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

S = TypeVar("S")

# OAuth2 bearer (used by docs); errors are raised by get_current_context instead.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid4())


# PUBLIC_INTERFACE
def get_engine(request: Request) -> AsyncEngine:
    """Return the application's engine (created in the lifespan handler)."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise RuntimeError("Database engine is not initialized; is the lifespan handler running?")
    return engine


# PUBLIC_INTERFACE
def get_unit_of_work(engine: AsyncEngine = Depends(get_engine)) -> UnitOfWork:
    """A fresh UnitOfWork per request, sharing the application's connection pool."""
    return UnitOfWork(QueryExecutor(engine))


# PUBLIC_INTERFACE
async def get_current_context(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
) -> RequestContext:
    """
    Resolve the caller from the Authorization bearer token.

    Raises:
        UnauthorizedError: token missing, invalid, expired or not an access token.
    """
    if not token:
        raise UnauthorizedError()
    try:
        claims = read_claims(token, ACCESS_TOKEN_TYPE)
    except JWTError:
        raise UnauthorizedError("Invalid token")

    context = RequestContext(
        tenant_id=claims.tenant_id,
        user_id=claims.user_id,
        request_id=_request_id(request),
        email=claims.email,
        role=claims.role,
    )
    return bind_request_context(request, context)


# PUBLIC_INTERFACE
async def get_public_context(
    request: Request,
    org_id: str = Path(..., description="Target organization ID"),
) -> RequestContext:
    """Anonymous context scoped to the organization named in the path."""
    context = RequestContext.anonymous(_request_id(request), tenant_id=org_id)
    return bind_request_context(request, context)


# PUBLIC_INTERFACE
async def get_anonymous_context(request: Request) -> RequestContext:
    """Anonymous context without an organization (sign-up, login, refresh)."""
    return bind_request_context(request, RequestContext.anonymous(_request_id(request)))


# PUBLIC_INTERFACE
def require_roles(*required: str):
    """
    Create a dependency that requires the current user to hold one of the given roles.
    """

    async def _dep(context: RequestContext = Depends(get_current_context)) -> RequestContext:
        if context.role not in required:
            raise ForbiddenError("Insufficient role")
        return context

    return _dep


# PUBLIC_INTERFACE
def provide_service(
    service_cls: Type[S],
    context_dependency: Callable[..., RequestContext] = get_current_context,
) -> Callable[..., S]:
    """
    Create a dependency building ``service_cls(uow, context)`` for the current request.

    By default the context comes from the bearer token; pass
    ``get_public_context`` or ``get_anonymous_context`` for unauthenticated routes.
    """

    async def _dep(
        uow: UnitOfWork = Depends(get_unit_of_work),
        context: RequestContext = Depends(context_dependency),
    ) -> S:
        return service_cls(uow, context)

    return _dep
