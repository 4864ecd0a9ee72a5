from __future__ import annotations

import json
from typing import Optional

from pydantic import BaseModel

from recruitment_api.core.errors import ValidationError
from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.entities import Application, Department, Position, PositionStatus

from .base import BaseService


class DepartmentService(BaseService[Department]):
    table_name = TableNames.DEPARTMENT
    entity_type = Department
    updatable_fields = frozenset({"Name", "Description", "IsActive"})
    search_fields = ("Name", "Description")


class PositionService(BaseService[Position]):
    """Job openings. A referenced department must belong to the same organization."""

    table_name = TableNames.POSITION
    entity_type = Position
    updatable_fields = frozenset({"Name", "Description", "Status", "DepartmentId", "IsActive"})
    search_fields = ("Name", "Description", "Status")

    async def _ensure_department(self, department_id: Optional[str]) -> None:
        if department_id is None:
            return
        if not await self.other_repository(TableNames.DEPARTMENT).exists(department_id, self.tenant_id):
            raise ValidationError("Department not found", details={"DepartmentId": department_id})

    async def validate_add(self, model: BaseModel) -> None:
        await self._ensure_department(getattr(model, "DepartmentId", None))

    async def validate_update(self, model: BaseModel, id: str) -> None:
        if "DepartmentId" in model.model_fields_set:
            await self._ensure_department(getattr(model, "DepartmentId"))

    async def get_open_positions_async(self) -> list[Position]:
        """Active, open positions of the organization (public careers listing)."""
        return await self.repository.find_where(
            {"Status": PositionStatus.OPEN.value, "IsActive": True}, org_id=self.tenant_id
        )


def _validate_metadata(value: Optional[str]) -> None:
    if value is None:
        return
    try:
        json.loads(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid JSON in MetaData")


class ApplicationService(BaseService[Application]):
    """
    Candidate applications.

    Applications can be submitted anonymously through the public careers
    endpoint; the caller's context then carries the target organization and
    the system user is stamped as creator.
    """

    table_name = TableNames.APPLICATION
    entity_type = Application
    updatable_fields = frozenset(
        {
            "Name",
            "Email",
            "Phone",
            "Experience",
            "ResumeUrl",
            "CurrentSalary",
            "ExpectedSalary",
            "NoticePeriod",
            "MetaData",
            "IsActive",
        }
    )
    search_fields = ("Name", "Email", "Phone")

    async def validate_add(self, model: BaseModel) -> None:
        _validate_metadata(getattr(model, "MetaData", None))
        position_id = getattr(model, "PositionId", None)
        if position_id is None:
            raise ValidationError("PositionId is required")
        position = await self.other_repository(TableNames.POSITION).find_by_id(position_id, self.tenant_id)
        if position is None:
            raise ValidationError("Position not found", details={"PositionId": position_id})
        # Anonymous candidates may only apply to published openings.
        if self.context.is_anonymous and (position.Status != PositionStatus.OPEN.value or not position.IsActive):
            raise ValidationError("Position is not open for applications", details={"PositionId": position_id})

    async def validate_update(self, model: BaseModel, id: str) -> None:
        _validate_metadata(getattr(model, "MetaData", None))
