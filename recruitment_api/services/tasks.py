from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from recruitment_api.core.errors import ValidationError
from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.entities import Task

from .base import BaseService


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _check_dates(start: Optional[datetime], end: Optional[datetime]) -> None:
    start, end = _naive_utc(start), _naive_utc(end)
    if start is not None and end is not None and end < start:
        raise ValidationError("EndDate must not be earlier than StartDate")


class TaskService(BaseService[Task]):
    """CRUD for tasks; the end date may never precede the start date."""

    table_name = TableNames.TASK
    entity_type = Task
    updatable_fields = frozenset(
        {"Name", "Description", "UserName", "Stack", "StartDate", "EndDate", "Status", "IsActive"}
    )
    search_fields = ("Name", "UserName", "Description")

    async def validate_add(self, model: BaseModel) -> None:
        _check_dates(getattr(model, "StartDate", None), getattr(model, "EndDate", None))

    async def pre_add_operation(self, entity: Task) -> None:
        await super().pre_add_operation(entity)
        # Stored columns are naive UTC.
        if entity.StartDate is not None:
            entity.StartDate = _naive_utc(entity.StartDate)
        if entity.EndDate is not None:
            entity.EndDate = _naive_utc(entity.EndDate)

    async def pre_update_operation(self, entity: Task) -> None:
        await super().pre_update_operation(entity)
        _check_dates(entity.StartDate, entity.EndDate)
        if entity.StartDate is not None:
            entity.StartDate = _naive_utc(entity.StartDate)
        if entity.EndDate is not None:
            entity.EndDate = _naive_utc(entity.EndDate)
