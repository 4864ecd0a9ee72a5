from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


# PUBLIC_INTERFACE
class Filter(BaseModel):
    """
    Listing parameters supplied by callers.

    All fields are optional; the effective values are exposed as properties:
      - page_or_default: 1-indexed page, defaults to 1
      - page_size_or_default: defaults to 20, clamped to [1, 100]
      - offset: (page - 1) * page size
      - is_paginated: true only when both page and page_size were supplied
    """

    model_config = ConfigDict(frozen=True)

    page: Optional[int] = Field(default=None, description="1-indexed page number")
    page_size: Optional[int] = Field(default=None, description="Rows per page (max 100)")
    sort_by: Optional[str] = Field(default=None, description="Column to sort on")
    sort_order: Optional[str] = Field(default=None, description="ASC or DESC")
    search_keyword: Optional[str] = Field(default=None, description="Substring matched against search fields")

    @property
    def page_or_default(self) -> int:
        return self.page if self.page and self.page > 0 else 1

    @property
    def page_size_or_default(self) -> int:
        if not self.page_size or self.page_size <= 0:
            return DEFAULT_PAGE_SIZE
        return min(self.page_size, MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page_or_default - 1) * self.page_size_or_default

    @property
    def is_paginated(self) -> bool:
        return self.page is not None and self.page_size is not None


class PaginationMeta(BaseModel):
    """Pagination block attached to listing responses."""
    total: int = Field(..., description="Total matching records")
    page: int = Field(..., description="Current page (1-indexed)")
    limit: int = Field(..., description="Page size used")
    total_pages: int = Field(..., description="ceil(total / limit)")
    has_next: bool = Field(..., description="True when page < total_pages")
    has_prev: bool = Field(..., description="True when page > 1")


class MessageResponse(BaseModel):
    """Standard message response."""
    message: str = Field(..., description="Human readable message")
    details: Optional[dict] = Field(default=None, description="Optional extra data")


# PUBLIC_INTERFACE
class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope returned by every JSON endpoint."""
    success: bool = Field(default=True)
    message: Optional[str] = Field(default=None, description="Human readable message")
    data: Optional[T] = Field(default=None, description="Response payload")
    pagination: Optional[PaginationMeta] = Field(default=None, description="Present on paginated listings")


class ErrorInfo(BaseModel):
    """Structured error description."""
    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Optional error details (e.g., validation issues)")
    timestamp: datetime = Field(..., description="Error timestamp (UTC)")
    request_id: Optional[str] = Field(default=None, alias="requestId", description="Request correlation ID")
    stack: Optional[str] = Field(default=None, description="Traceback (development only)")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Standardized API error envelope returned by exception handlers."""
    success: bool = Field(default=False)
    error: ErrorInfo = Field(..., description="Error details")
