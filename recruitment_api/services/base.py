from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, ClassVar, Generic, Optional, Sequence, Type, TypeVar
from uuid import uuid4

from pydantic import BaseModel

from recruitment_api.core.context import RequestContext
from recruitment_api.core.errors import ForbiddenError, NotFoundError
from recruitment_api.db.base import utc_now
from recruitment_api.db.tables import TableNames
from recruitment_api.repositories.base import Repository
from recruitment_api.repositories.unit_of_work import UnitOfWork
from recruitment_api.schemas.common import Filter
from recruitment_api.schemas.entities import BaseEntity
from recruitment_api.schemas.results import PaginatedResult, Result

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseEntity)
R = TypeVar("R")

# Columns a client payload can never change through update_async.
PROTECTED_FIELDS = frozenset(
    {
        "Uid",
        "OrgId",
        "CreatedOn",
        "CreatedBy",
        "UpdatedOn",
        "UpdatedBy",
        "DeletedOn",
        "DeletedBy",
        "IsDeleted",
    }
)


class BaseService(Generic[E]):
    """
    Base class for entity services.

    Services keep business rules and orchestration and delegate data access
    to the repository for ``table_name``. Subclasses declare:
      - table_name / entity_type: the table and its row model
      - updatable_fields: allow-list applied when merging update payloads
      - search_fields: columns matched by the listing search keyword
      - output_type: optional read model used to shape returned entities

    Create and update run fixed hook sequences:
      create_async: validate_add -> to_entity -> pre_add_operation -> insert
                    -> post_add_operation -> re-fetch
      update_async: validate_update -> load -> merge_model_to_entity
                    -> pre_update_operation -> update -> post_update_operation
    """

    table_name: ClassVar[TableNames]
    entity_type: ClassVar[Type[BaseEntity]]
    updatable_fields: ClassVar[frozenset[str]] = frozenset()
    search_fields: ClassVar[tuple[str, ...]] = ()
    output_type: ClassVar[Optional[Type[BaseModel]]] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        protected = set(cls.updatable_fields) & PROTECTED_FIELDS
        if protected:
            raise TypeError(
                f"{cls.__name__}.updatable_fields may not include protected fields: {sorted(protected)}"
            )

    def __init__(self, uow: UnitOfWork, context: RequestContext) -> None:
        self.uow = uow
        self.context = context

    def bind(self, uow: UnitOfWork):
        """Same service, same caller, different unit of work (e.g. a transaction)."""
        return type(self)(uow, self.context)

    @property
    def repository(self) -> Repository[E]:
        return self.uow.get_repository(self.table_name, self.entity_type)

    def other_repository(self, table_name: TableNames) -> Repository[Any]:
        return self.uow.get_repository(table_name)

    @property
    def tenant_id(self) -> str:
        if not self.context.tenant_id:
            raise ForbiddenError("An organization is required for this operation")
        return self.context.tenant_id

    @property
    def user_id(self) -> str:
        return self.context.actor_id

    @property
    def entity_label(self) -> str:
        return self.entity_type.__name__

    # ------------------------------------------------------------------ reads

    async def get_all_async(self, columns: Optional[Sequence[str]] = None) -> Result[Any]:
        records = [self.to_output(e) for e in await self.repository.find_all(self.tenant_id, columns)]
        return Result.to_paged_result(1, len(records), len(records), records)

    async def get_list_async(self, filters: Optional[Filter] = None) -> PaginatedResult[Any]:
        page = await self.repository.find_list(
            self.tenant_id, filters or Filter(), search_fields=self.search_fields
        )
        return PaginatedResult(data=[self.to_output(e) for e in page.data], pagination=page.pagination)

    async def get_by_id_async(self, id: str) -> Result[Any]:
        entity = await self.repository.find_by_id(id, self.tenant_id)
        if entity is None:
            raise NotFoundError(f"{self.entity_label} not found")
        return Result.to_entity_result(self.to_output(entity))

    async def exists_async(self, id: str) -> bool:
        return await self.repository.exists(id, self.tenant_id)

    async def count_async(self) -> int:
        return await self.repository.count(self.tenant_id)

    # ------------------------------------------------------------------ writes

    async def create_async(self, model: BaseModel) -> Result[Any]:
        await self.validate_add(model)
        entity = self.to_entity(model)
        await self.pre_add_operation(entity)
        await self.repository.create(entity)
        await self.post_add_operation(model, entity)
        logger.info("Created %s %s", self.entity_label, entity.Uid)
        created = await self.repository.find_by_id(entity.Uid, entity.OrgId)
        return Result.to_entity_result(self.to_output(created or entity))

    async def update_async(self, model: BaseModel, id: str) -> Result[Any]:
        await self.validate_update(model, id)
        # Loaded without the tenant predicate so a foreign row is rejected
        # as forbidden rather than reported missing.
        existing = await self.repository.find_by_uid(id)
        if existing is None:
            raise NotFoundError(f"{self.entity_label} not found")
        before = existing.model_dump()
        entity = self.merge_model_to_entity(model, existing)
        await self.pre_update_operation(entity)
        changes = self.changed_fields(model, before, entity)
        # Scoped to the caller's organization and to live rows; a row deleted
        # since it was loaded matches nothing.
        updated = await self.repository.update(id, changes, org_id=self.tenant_id)
        if updated is None:
            raise NotFoundError(f"{self.entity_label} not found")
        await self.post_update_operation(model, updated)
        logger.info("Updated %s %s", self.entity_label, id)
        return Result.to_entity_result(self.to_output(updated))

    async def delete_async(self, id: str) -> bool:
        """Soft delete within the caller's organization."""
        return await self.repository.soft_delete(id, self.tenant_id, self.user_id)

    async def hard_delete_async(self, id: str) -> bool:
        return await self.repository.hard_delete(id, self.tenant_id)

    async def transaction(self, callback: Callable[[UnitOfWork], Awaitable[R]]) -> R:
        return await self.uow.transaction(callback)

    # ------------------------------------------------------------------ hooks

    async def validate_add(self, model: BaseModel) -> None:
        """Raise ValidationError (or another AppError) to reject a create payload."""

    async def validate_update(self, model: BaseModel, id: str) -> None:
        """Raise ValidationError (or another AppError) to reject an update payload."""

    async def pre_add_operation(self, entity: E) -> None:
        entity.Uid = str(uuid4())
        entity.OrgId = self.tenant_id
        entity.CreatedOn = utc_now()
        entity.IsActive = True
        entity.IsDeleted = False
        entity.CreatedBy = self.user_id

    async def post_add_operation(self, model: BaseModel, entity: E) -> None:
        """Runs after the insert; dependent rows (children) are written here."""

    async def pre_update_operation(self, entity: E) -> None:
        if entity.OrgId != self.context.tenant_id:
            raise ForbiddenError("Not authorized")
        entity.UpdatedOn = utc_now()
        entity.UpdatedBy = self.user_id

    async def post_update_operation(self, model: BaseModel, entity: E) -> None:
        pass

    # ------------------------------------------------------------------ mapping

    def to_entity(self, model: BaseModel) -> E:
        """Copy the payload's explicitly-set fields that exist on the entity."""
        values = {
            k: v for k, v in model.model_dump(exclude_unset=True).items() if k in self.entity_type.model_fields
        }
        return self.entity_type(**values)

    def merge_model_to_entity(self, model: BaseModel, entity: E) -> E:
        """Apply the payload's explicitly-set, updatable fields onto the loaded entity."""
        for key, value in model.model_dump(exclude_unset=True).items():
            if key in self.updatable_fields:
                setattr(entity, key, value)
        return entity

    def changed_fields(self, model: BaseModel, before: dict[str, Any], entity: E) -> dict[str, Any]:
        """
        Columns written by an update: the payload's updatable fields, the
        update stamps, and anything the hooks changed (a rehashed password,
        normalized dates). Columns outside the allow-list are never written.
        """
        after = entity.model_dump()
        keys = set(model.model_fields_set) & self.updatable_fields
        keys.update(k for k in self.updatable_fields if after.get(k) != before.get(k))
        keys.update(("UpdatedOn", "UpdatedBy"))
        return {k: after[k] for k in after if k in keys}

    def to_output(self, entity: E) -> BaseModel:
        if self.output_type is None:
            return entity
        return self.output_type.model_validate(entity.model_dump())
