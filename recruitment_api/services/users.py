from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from recruitment_api.core.errors import DuplicateEntryError
from recruitment_api.core.security import get_password_hash
from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.auth import UserRead
from recruitment_api.schemas.entities import User

from .base import BaseService


class UserService(BaseService[User]):
    """
    Organization users.

    Emails are unique across all organizations (they are the login key).
    Passwords are bcrypt-hashed on create and on change, and never leave the
    service: results are shaped through UserRead.
    """

    table_name = TableNames.USER
    entity_type = User
    output_type = UserRead
    updatable_fields = frozenset({"Email", "Password", "Role", "IsActive"})
    search_fields = ("Email", "Role")

    async def get_by_email(self, email: str) -> Optional[User]:
        """Look up a user by email in any organization."""
        return await self.repository.find_one_where({"Email": email})

    async def ensure_email_available(self, email: str, exclude_id: Optional[str] = None) -> None:
        existing = await self.get_by_email(email)
        if existing is not None and existing.Uid != exclude_id:
            raise DuplicateEntryError("A user with this email already exists")

    async def validate_add(self, model: BaseModel) -> None:
        await self.ensure_email_available(getattr(model, "Email"))

    async def validate_update(self, model: BaseModel, id: str) -> None:
        email = getattr(model, "Email", None)
        if "Email" in model.model_fields_set and email is not None:
            await self.ensure_email_available(email, exclude_id=id)

    async def pre_add_operation(self, entity: User) -> None:
        await super().pre_add_operation(entity)
        entity.Password = get_password_hash(entity.Password)

    def merge_model_to_entity(self, model: BaseModel, entity: User) -> User:
        current_hash = entity.Password
        entity = super().merge_model_to_entity(model, entity)
        new_password = getattr(model, "Password", None)
        entity.Password = get_password_hash(new_password) if new_password else current_hash
        return entity
