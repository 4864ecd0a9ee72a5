"""
Per-request identity.

A RequestContext is built once per request (from the bearer token, or as an
anonymous context for public endpoints) and passed explicitly to every
service. Logging context variables are updated alongside so log lines carry
the tenant, but no business code reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional
from uuid import uuid4

from starlette.requests import Request

from .errors import MissingContextError
from .logging import tenant_id_var, user_id_var

# Stamped as CreatedBy/UpdatedBy when an anonymous caller writes.
SYSTEM_USER_ID = "00000000-0000-0000-0000-000000000000"

_STATE_KEY = "request_context"


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class RequestContext:
    """Immutable caller identity for one request."""

    tenant_id: Optional[str]
    user_id: Optional[str]
    request_id: str = field(default_factory=lambda: str(uuid4()))
    email: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    @property
    def actor_id(self) -> str:
        """User id to stamp on audit columns."""
        return self.user_id or SYSTEM_USER_ID

    @classmethod
    def anonymous(cls, request_id: Optional[str] = None, tenant_id: Optional[str] = None) -> "RequestContext":
        return cls(tenant_id=tenant_id, user_id=None, request_id=request_id or str(uuid4()))

    def with_tenant(self, tenant_id: str) -> "RequestContext":
        return replace(self, tenant_id=tenant_id)


# PUBLIC_INTERFACE
def bind_request_context(request: Request, context: RequestContext) -> RequestContext:
    """Attach the context to the request and expose its tenant and user to log records."""
    setattr(request.state, _STATE_KEY, context)
    request.state.tenant_id = context.tenant_id
    tenant_id_var.set(context.tenant_id)
    user_id_var.set(context.user_id)
    return context


# PUBLIC_INTERFACE
def get_request_context(request: Request) -> RequestContext:
    """
    Return the context bound to this request.

    Raises:
        MissingContextError: when called before authentication bound one.
    """
    context = getattr(request.state, _STATE_KEY, None)
    if context is None:
        raise MissingContextError(
            "No request context available. Ensure this runs within an authenticated request."
        )
    return context
