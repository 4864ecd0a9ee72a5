"""
Result wrappers returned by services and repositories.

- PagedResult: a page of records plus the totals needed to page through them.
- Result: exactly one of a single entity or a PagedResult.
- PaginatedResult: rows plus a PaginationMeta block (listing endpoints).
"""

from __future__ import annotations

import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, model_validator

from .common import PaginationMeta

T = TypeVar("T")


# PUBLIC_INTERFACE
def build_pagination(total: int, page: int, limit: int) -> PaginationMeta:
    """Compute the pagination block for ``total`` rows viewed ``limit`` at a time."""
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return PaginationMeta(
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


class PagedResult(BaseModel, Generic[T]):
    """A page of records with its position in the full result set."""
    page_index: int = Field(..., description="1-indexed page")
    page_size: int = Field(..., description="Requested page size")
    total_records: int = Field(..., description="Total records across all pages")
    records: Optional[List[T]] = Field(default=None)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_records / self.page_size) if self.page_size > 0 else 0

    @property
    def has_next_page(self) -> bool:
        return self.page_index < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page_index > 1


# PUBLIC_INTERFACE
class Result(BaseModel, Generic[T]):
    """
    Either a single entity or a paged collection, never both and never neither.

    Build through the factories:
        Result.to_entity_result(entity)
        Result.to_paged_result(page_index, page_size, total_records, records)
    """
    entity: Optional[T] = Field(default=None)
    result: Optional[PagedResult[T]] = Field(default=None)

    @model_validator(mode="after")
    def _exactly_one(self):
        if (self.entity is None) == (self.result is None):
            raise ValueError("Result must hold exactly one of 'entity' or 'result'")
        return self

    @classmethod
    def to_entity_result(cls, entity: T) -> "Result[T]":
        return cls(entity=entity)

    @classmethod
    def to_paged_result(
        cls,
        page_index: int,
        page_size: int,
        total_records: int,
        records: Optional[List[T]],
    ) -> "Result[T]":
        return cls(
            result={
                "page_index": page_index,
                "page_size": page_size,
                "total_records": total_records,
                "records": records,
            }
        )


# PUBLIC_INTERFACE
class PaginatedResult(BaseModel, Generic[T]):
    """Rows of one page and the pagination block describing it."""
    data: List[T] = Field(default_factory=list)
    pagination: PaginationMeta
