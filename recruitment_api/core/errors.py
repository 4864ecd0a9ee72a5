"""
Application error hierarchy.

Every failure that crosses a layer boundary is an AppError carrying a
machine-readable code, an HTTP status and a user-facing message. The API
layer renders them into the standard error envelope; nothing below the
API layer knows about HTTP beyond the status number.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes used in the error envelope."""

    DATABASE_ERROR = "DATABASE_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    FOREIGN_KEY_CONSTRAINT = "FOREIGN_KEY_CONSTRAINT"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EMPTY_BATCH = "EMPTY_BATCH"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    MISSING_CONTEXT = "MISSING_CONTEXT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.DATABASE_ERROR: "A database error occurred. Please try again later.",
    ErrorCode.DUPLICATE_ENTRY: "This record already exists. Please use unique values.",
    ErrorCode.FOREIGN_KEY_CONSTRAINT: "Cannot perform this action due to related data constraints.",
    ErrorCode.RECORD_NOT_FOUND: "The requested record was not found.",
    ErrorCode.VALIDATION_ERROR: "The provided data is invalid. Please check your input.",
    ErrorCode.EMPTY_BATCH: "At least one record is required for a batch operation.",
    ErrorCode.UNAUTHORIZED: "Authentication required. Please provide valid credentials.",
    ErrorCode.FORBIDDEN: "Access denied. You do not have permission to perform this action.",
    ErrorCode.CONFLICT: "The request conflicts with the current state of the resource.",
    ErrorCode.MISSING_CONTEXT: "No request context available.",
    ErrorCode.INTERNAL_SERVER_ERROR: "An internal server error occurred. Our team has been notified.",
}


class AppError(Exception):
    """Base class for all application errors."""

    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    status_code: int = 500

    def __init__(
        self,
        message: Optional[str] = None,
        details: Any = None,
        *,
        code: Optional[ErrorCode] = None,
        status_code: Optional[int] = None,
    ) -> None:
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.message = message or ERROR_MESSAGES[self.code]
        self.details = details
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, status={self.status_code}, message={self.message!r})"


class ValidationError(AppError):
    """Caller input failed validation (unknown column, bad JSON, ...)."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class EmptyBatchError(ValidationError):
    """A batch builder received no entities."""

    code = ErrorCode.EMPTY_BATCH


class NotFoundError(AppError):
    code = ErrorCode.RECORD_NOT_FOUND
    status_code = 404


class UnauthorizedError(AppError):
    code = ErrorCode.UNAUTHORIZED
    status_code = 401


class ForbiddenError(AppError):
    code = ErrorCode.FORBIDDEN
    status_code = 403


class ConflictError(AppError):
    code = ErrorCode.CONFLICT
    status_code = 409


class DuplicateEntryError(ConflictError):
    """A unique key was violated."""

    code = ErrorCode.DUPLICATE_ENTRY


class ForeignKeyConstraintError(AppError):
    """
    A foreign key was violated.

    status 400: the row references a parent that does not exist.
    status 409: the row is still referenced by children.
    """

    code = ErrorCode.FOREIGN_KEY_CONSTRAINT
    status_code = 400


class DatabaseError(AppError):
    """Any other driver failure. The original exception is chained, never exposed."""

    code = ErrorCode.DATABASE_ERROR
    status_code = 500


class MissingContextError(AppError):
    """Request context was requested where none exists (a programming error)."""

    code = ErrorCode.MISSING_CONTEXT
    status_code = 500
