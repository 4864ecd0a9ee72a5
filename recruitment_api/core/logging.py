from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional

# Only log records read these; services get identity from RequestContext.
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
tenant_id_var: ContextVar[Optional[str]] = ContextVar("tenant_id", default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar("user_id", default=None)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | rid=%(request_id)s | tenant=%(tenant_id)s | "
    "user=%(user_id)s | %(message)s"
)

# Third-party loggers that are too chatty at INFO.
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "passlib")


class RequestContextFilter(logging.Filter):
    """Copy request_id, tenant_id and user_id from contextvars onto every record ("-" when unset)."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.request_id = request_id_var.get() or "-"
        record.tenant_id = tenant_id_var.get() or "-"
        record.user_id = user_id_var.get() or "-"
        return True


# PUBLIC_INTERFACE
def configure_logging(level: int = logging.INFO) -> None:
    """
    Install a single stdout handler on the root logger with the context filter.

    Safe to call repeatedly (each app instance calls it): existing root
    handlers are replaced rather than stacked.
    """
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
