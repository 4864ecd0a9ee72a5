from __future__ import annotations

from typing import Any, Generic, Iterable, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from recruitment_api.db.base import utc_now
from recruitment_api.db.query_executor import QueryExecutor, QueryResult
from recruitment_api.db.query_generator import EntityLike, QueryGenerator
from recruitment_api.db.tables import columns_for, hidden_columns_for, resolve_table
from recruitment_api.schemas.common import Filter
from recruitment_api.schemas.results import PaginatedResult

E = TypeVar("E", bound=BaseModel)

DEFAULT_SORT_BY = "CreatedOn"
DEFAULT_SORT_ORDER = "DESC"


class Repository(Generic[E]):
    """
    Generic tenant-aware data access for one table.

    Every read is filtered by ``OrgId`` and ``IsDeleted = 0``. Caller-supplied
    column names (projections, sort keys, search fields, conditions) are
    checked against the table's known columns before any SQL is built.

    Note:
      Repositories hold no state besides the executor and generator; a
      repository obtained from a transaction-bound UnitOfWork runs inside
      that transaction.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        table_name: str,
        entity_type: Type[E],
    ) -> None:
        self.executor = executor
        self.table = resolve_table(table_name)
        self.entity_type = entity_type
        self.generator = QueryGenerator(
            self.table,
            dialect=executor.dialect,
            allowed_columns=columns_for(self.table),
            hidden_columns=hidden_columns_for(self.table),
        )

    def _to_entity(self, row: Mapping[str, Any]) -> E:
        return self.entity_type.model_validate(dict(row))

    # ------------------------------------------------------------------ writes

    async def create(self, entity: EntityLike) -> QueryResult:
        """Insert the entity's defined columns; returns insert id and affected rows."""
        sql, params = self.generator.insert(entity)
        return await self.executor.insert(sql, params)

    async def create_many(self, entities: Sequence[EntityLike]) -> int:
        sql, params = self.generator.insert_many(entities)
        return (await self.executor.insert(sql, params)).affected_rows

    async def update(self, id: str, entity: EntityLike, org_id: Optional[str] = None) -> Optional[E]:
        """
        Write the entity's defined columns and return the refreshed row.

        Returns None when no live row matched (absent, soft-deleted or owned
        by another organization when ``org_id`` is given).
        """
        sql, params = self.generator.update(id, entity, org_id)
        if await self.executor.update(sql, params) == 0:
            return None
        return await self.find_by_uid(id)

    async def update_many(
        self,
        entities: Sequence[EntityLike],
        exclude_fields: Optional[Iterable[str]] = None,
    ) -> int:
        sql, params = self.generator.update_many(entities, exclude_fields)
        return await self.executor.update(sql, params)

    async def upsert_many(
        self,
        entities: Sequence[EntityLike],
        unique_key: str = "Uid",
        exclude_from_update: Optional[Iterable[str]] = None,
    ) -> int:
        sql, params = self.generator.upsert_many(entities, unique_key, exclude_from_update)
        return (await self.executor.insert(sql, params)).affected_rows

    async def soft_delete(
        self,
        id: str,
        org_id: Optional[str] = None,
        deleted_by: Optional[str] = None,
    ) -> bool:
        """Flag the row deleted. Returns False when nothing matched (absent or already deleted)."""
        sql, params = self.generator.soft_delete(id, utc_now(), deleted_by, org_id)
        return await self.executor.update(sql, params) > 0

    async def soft_delete_many(
        self,
        ids: Sequence[str],
        org_id: Optional[str] = None,
        deleted_by: Optional[str] = None,
    ) -> bool:
        sql, params = self.generator.soft_delete_many(ids, utc_now(), deleted_by, org_id)
        return await self.executor.update(sql, params) > 0

    async def hard_delete(self, id: str, org_id: Optional[str] = None) -> bool:
        sql, params = self.generator.hard_delete(id, org_id)
        return await self.executor.delete(sql, params) > 0

    async def hard_delete_many(self, ids: Sequence[str], org_id: Optional[str] = None) -> bool:
        sql, params = self.generator.hard_delete_many(ids, org_id)
        return await self.executor.delete(sql, params) > 0

    # ------------------------------------------------------------------ reads

    async def find_by_id(
        self,
        id: str,
        org_id: str,
        columns: Optional[Sequence[str]] = None,
    ) -> Optional[E]:
        sql, params = self.generator.select_by_id(id, org_id, columns)
        row = await self.executor.select_one(sql, params)
        return self._to_entity(row) if row else None

    async def find_by_uid(self, id: str, columns: Optional[Sequence[str]] = None) -> Optional[E]:
        """Lookup by primary key regardless of tenant. Callers must enforce ownership."""
        sql, params = self.generator.select_by_uid(id, columns)
        row = await self.executor.select_one(sql, params)
        return self._to_entity(row) if row else None

    async def find_all(
        self,
        org_id: str,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Filter] = None,
    ) -> list[E]:
        sql, params = self.generator.select_all(org_id, columns, filters)
        return [self._to_entity(r) for r in await self.executor.select(sql, params)]

    async def find_list(
        self,
        org_id: str,
        filters: Optional[Filter] = None,
        columns: Optional[Sequence[str]] = None,
        search_fields: Sequence[str] = (),
    ) -> PaginatedResult[E]:
        """
        Paginated, searchable listing.

        Defaults: page 1, 20 rows, sorted by CreatedOn DESC. The count runs
        before the page is fetched.
        """
        filters = filters or Filter()
        rows_query, count_query = self.generator.select_list(
            org_id,
            columns=columns,
            sort_by=filters.sort_by or DEFAULT_SORT_BY,
            sort_order=filters.sort_order or DEFAULT_SORT_ORDER,
            search_fields=search_fields,
            keyword=filters.search_keyword,
        )
        page = await self.executor.paginate(
            rows_query.sql,
            count_query.sql,
            rows_query.params,
            filters.page_or_default,
            filters.page_size_or_default,
        )
        return PaginatedResult(
            data=[self._to_entity(r) for r in page.data],
            pagination=page.pagination,
        )

    async def find_where(
        self,
        conditions: Mapping[str, Any],
        org_id: Optional[str] = None,
        columns: Optional[Sequence[str]] = None,
        order_by: Sequence[str] = (),
    ) -> list[E]:
        sql, params = self.generator.select_where(conditions, org_id, columns, order_by)
        return [self._to_entity(r) for r in await self.executor.select(sql, params)]

    async def find_one_where(
        self,
        conditions: Mapping[str, Any],
        org_id: Optional[str] = None,
        columns: Optional[Sequence[str]] = None,
    ) -> Optional[E]:
        rows = await self.find_where(conditions, org_id, columns)
        return rows[0] if rows else None

    async def exists(self, id: str, org_id: str) -> bool:
        sql, params = self.generator.exists(id, org_id)
        return await self.executor.select_one(sql, params) is not None

    async def count(self, org_id: str) -> int:
        sql, params = self.generator.count(org_id)
        row = await self.executor.select_one(sql, params)
        return int(row["total"]) if row else 0
