from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from recruitment_api.core.errors import DuplicateEntryError, NotFoundError, UnauthorizedError, ValidationError
from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.entities import UserInfo
from recruitment_api.schemas.results import Result

from .base import BaseService


class UserInfoService(BaseService[UserInfo]):
    """Profiles (name, contact, dates) of organization users, one per user."""

    table_name = TableNames.USER_INFO
    entity_type = UserInfo
    updatable_fields = frozenset(
        {
            "Email",
            "FirstName",
            "LastName",
            "Phone",
            "JoiningDate",
            "DateOfBirth",
            "Address",
            "Gender",
            "ProfileUrl",
            "IsActive",
        }
    )
    search_fields = ("FirstName", "LastName", "Email", "Phone")

    async def find_for_user(self, user_id: str) -> Optional[UserInfo]:
        return await self.repository.find_one_where({"UserId": user_id}, org_id=self.tenant_id)

    async def validate_add(self, model: BaseModel) -> None:
        user_id = getattr(model, "UserId", None)
        if not await self.other_repository(TableNames.USER).exists(user_id, self.tenant_id):
            raise ValidationError("User not found", details={"UserId": user_id})
        if await self.find_for_user(user_id) is not None:
            raise DuplicateEntryError("This user already has a profile")

    # PUBLIC_INTERFACE
    async def get_user_details_async(self) -> Result[UserInfo]:
        """Profile of the authenticated caller."""
        if self.context.user_id is None:
            raise UnauthorizedError()
        info = await self.find_for_user(self.context.user_id)
        if info is None:
            raise NotFoundError("User details not found")
        return Result.to_entity_result(info)
