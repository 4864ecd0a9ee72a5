"""
Parameterized SQL builder for a single table.

The generator only produces ``Query(sql, params)`` pairs; it never talks to
the database. Identifiers are validated against a strict pattern (and,
when provided, the table's known column set) before they are interpolated.
Values are always bound through ``?`` placeholders, in order.

Usage:
    gen = QueryGenerator("Gym", dialect="mysql", allowed_columns={"Uid", "OrgId", ...})
    sql, params = gen.select_by_id(uid, org_id)
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Sequence, Union

from pydantic import BaseModel

from recruitment_api.core.errors import EmptyBatchError, ValidationError
from recruitment_api.schemas.common import Filter

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SUPPORTED_DIALECTS = ("mysql", "sqlite")

# Never rewritten by an upsert.
UPSERT_PROTECTED = ("CreatedBy", "CreatedOn")

# Never written by a single-row update; ownership and deletion have their own statements.
UPDATE_IMMUTABLE = ("Uid", "OrgId", "CreatedOn", "CreatedBy", "IsDeleted", "DeletedOn", "DeletedBy")

EntityLike = Union[BaseModel, Mapping[str, Any]]


class Query(NamedTuple):
    """A SQL statement with ``?`` placeholders and its ordered values."""

    sql: str
    params: list[Any]


# PUBLIC_INTERFACE
def validate_identifier(name: str) -> str:
    """Return ``name`` if it is a safe SQL identifier, else raise ValidationError."""
    if not isinstance(name, str) or not IDENTIFIER_RE.match(name):
        raise ValidationError(f"Invalid identifier: {name!r}")
    return name


# PUBLIC_INTERFACE
def defined_values(entity: EntityLike) -> dict[str, Any]:
    """
    Return the entity's defined columns in declaration order.

    For pydantic models a field is defined when it was explicitly set
    (constructor, validation or assignment), even if set to None. For plain
    mappings every present key is defined.
    """
    if isinstance(entity, BaseModel):
        return entity.model_dump(exclude_unset=True)
    return dict(entity)


def _placeholders(count: int) -> str:
    return ", ".join("?" for _ in range(count))


class QueryGenerator:
    """Builds tenant-aware CRUD statements for one table."""

    def __init__(
        self,
        table: str,
        dialect: str = "mysql",
        allowed_columns: Optional[Iterable[str]] = None,
        hidden_columns: Iterable[str] = (),
    ) -> None:
        if dialect not in SUPPORTED_DIALECTS:
            raise ValueError(f"Unsupported SQL dialect: {dialect}")
        self.table = validate_identifier(table)
        self.dialect = dialect
        self.allowed_columns = frozenset(allowed_columns) if allowed_columns is not None else None
        # Writable, but never selectable, sortable, searchable or filterable by name.
        self.hidden_columns = frozenset(hidden_columns)

    # ------------------------------------------------------------------ helpers

    def column(self, name: str) -> str:
        """Validate a caller-supplied column name used to read, sort, search or filter."""
        self.writable_column(name)
        if name in self.hidden_columns:
            raise ValidationError(f"Unknown column '{name}' for table {self.table}")
        return name

    def writable_column(self, name: str) -> str:
        """Validate a column name that an INSERT or UPDATE assigns."""
        validate_identifier(name)
        if self.allowed_columns is not None and name not in self.allowed_columns:
            raise ValidationError(f"Unknown column '{name}' for table {self.table}")
        return name

    def _select_list(self, columns: Optional[Sequence[str]]) -> str:
        if not columns:
            return "*"
        return ", ".join(self.column(c) for c in columns)

    def _sort_order(self, sort_order: Optional[str]) -> str:
        order = (sort_order or "DESC").upper()
        if order not in ("ASC", "DESC"):
            raise ValidationError(f"Invalid sort order: {sort_order!r}")
        return order

    def search_clause(self, fields: Sequence[str], keyword: str) -> Query:
        """``(f1 LIKE ? OR f2 LIKE ?)`` with ``%keyword%`` bound for each field."""
        if not fields:
            raise ValidationError("Search requires at least one field")
        parts = [f"{self.column(f)} LIKE ?" for f in fields]
        like = f"%{keyword}%"
        return Query("(" + " OR ".join(parts) + ")", [like] * len(fields))

    # ------------------------------------------------------------------ reads

    def select_all(
        self,
        org_id: str,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Filter] = None,
    ) -> Query:
        sql = f"SELECT {self._select_list(columns)} FROM {self.table} WHERE IsDeleted = 0 AND OrgId = ?"
        params: list[Any] = [org_id]
        if filters is not None and filters.sort_by:
            sql += f" ORDER BY {self.column(filters.sort_by)} {self._sort_order(filters.sort_order)}"
        if filters is not None and filters.is_paginated:
            sql += " LIMIT ? OFFSET ?"
            params.extend([filters.page_size_or_default, filters.offset])
        return Query(sql, params)

    def count(self, org_id: str) -> Query:
        return Query(
            f"SELECT COUNT(*) AS total FROM {self.table} WHERE IsDeleted = 0 AND OrgId = ?",
            [org_id],
        )

    def select_list(
        self,
        org_id: str,
        *,
        columns: Optional[Sequence[str]] = None,
        sort_by: str = "CreatedOn",
        sort_order: str = "DESC",
        search_fields: Sequence[str] = (),
        keyword: Optional[str] = None,
    ) -> tuple[Query, Query]:
        """
        Build the (rows, count) pair used for paginated listings.

        Both statements share the same WHERE clause; the row query carries the
        ORDER BY and is left open for LIMIT/OFFSET to be appended by the executor.
        """
        where = "IsDeleted = 0 AND OrgId = ?"
        params: list[Any] = [org_id]
        if keyword and search_fields:
            search = self.search_clause(search_fields, keyword)
            where += f" AND {search.sql}"
            params.extend(search.params)
        order = f" ORDER BY {self.column(sort_by)} {self._sort_order(sort_order)}"
        rows = Query(f"SELECT {self._select_list(columns)} FROM {self.table} WHERE {where}{order}", list(params))
        total = Query(f"SELECT COUNT(*) AS total FROM {self.table} WHERE {where}", list(params))
        return rows, total

    def select_by_id(self, uid: str, org_id: str, columns: Optional[Sequence[str]] = None) -> Query:
        return Query(
            f"SELECT {self._select_list(columns)} FROM {self.table} WHERE Uid = ? AND OrgId = ? AND IsDeleted = 0",
            [uid, org_id],
        )

    def select_by_uid(self, uid: str, columns: Optional[Sequence[str]] = None) -> Query:
        """Lookup by primary key in any tenant. Only the write path uses this."""
        return Query(
            f"SELECT {self._select_list(columns)} FROM {self.table} WHERE Uid = ? AND IsDeleted = 0",
            [uid],
        )

    def select_where(
        self,
        conditions: Mapping[str, Any],
        org_id: Optional[str] = None,
        columns: Optional[Sequence[str]] = None,
        order_by: Sequence[str] = (),
    ) -> Query:
        """
        Equality lookup over validated columns.

        A list/tuple/set value becomes ``IN (...)``; ``None`` becomes ``IS NULL``.
        ``order_by`` columns sort ascending, in the given order.
        """
        clauses = ["IsDeleted = 0"]
        params: list[Any] = []
        if org_id is not None:
            clauses.append("OrgId = ?")
            params.append(org_id)
        for key, value in conditions.items():
            col = self.column(key)
            if value is None:
                clauses.append(f"{col} IS NULL")
            elif isinstance(value, (list, tuple, set, frozenset)):
                values = list(value)
                if not values:
                    raise ValidationError(f"Empty value list for column '{key}'")
                clauses.append(f"{col} IN ({_placeholders(len(values))})")
                params.extend(values)
            else:
                clauses.append(f"{col} = ?")
                params.append(value)
        sql = f"SELECT {self._select_list(columns)} FROM {self.table} WHERE " + " AND ".join(clauses)
        if order_by:
            sql += " ORDER BY " + ", ".join(f"{self.column(c)} ASC" for c in order_by)
        return Query(sql, params)

    def exists(self, uid: str, org_id: str) -> Query:
        return Query(
            f"SELECT 1 AS found FROM {self.table} WHERE Uid = ? AND OrgId = ? AND IsDeleted = 0 LIMIT 1",
            [uid, org_id],
        )

    # ------------------------------------------------------------------ writes

    def insert(self, entity: EntityLike) -> Query:
        values = defined_values(entity)
        if not values:
            raise ValidationError("Cannot insert an entity without any defined fields")
        cols = [self.writable_column(c) for c in values]
        return Query(
            f"INSERT INTO {self.table} ({', '.join(cols)}) VALUES ({_placeholders(len(cols))})",
            list(values.values()),
        )

    def insert_many(self, entities: Sequence[EntityLike]) -> Query:
        """Multi-row INSERT; the column list comes from the first entity."""
        rows = self._rows(entities)
        cols = [self.writable_column(c) for c in rows[0]]
        group = f"({_placeholders(len(cols))})"
        params: list[Any] = []
        for row in rows:
            params.extend(row.get(c) for c in cols)
        return Query(
            f"INSERT INTO {self.table} ({', '.join(cols)}) VALUES " + ", ".join(group for _ in rows),
            params,
        )

    def update(self, uid: str, entity: EntityLike, org_id: Optional[str] = None) -> Query:
        """
        UPDATE of the defined columns of a live row, keyed by Uid (and OrgId when given).

        Identity, ownership, creation and deletion columns are never written,
        and a soft-deleted row never matches.
        """
        values = {k: v for k, v in defined_values(entity).items() if k not in UPDATE_IMMUTABLE}
        if not values:
            raise ValidationError("No fields to update")
        assignments = ", ".join(f"{self.writable_column(c)} = ?" for c in values)
        sql = f"UPDATE {self.table} SET {assignments} WHERE Uid = ? AND IsDeleted = 0"
        params: list[Any] = [*values.values(), uid]
        if org_id is not None:
            sql += " AND OrgId = ?"
            params.append(org_id)
        return Query(sql, params)

    def update_many(
        self,
        entities: Sequence[EntityLike],
        exclude_fields: Optional[Iterable[str]] = None,
    ) -> Query:
        """
        Single-statement bulk update using one CASE expression per field.

        Each entity must define Uid. A field only gets a WHEN branch for the
        entities that define it; everything else keeps its current value.
        """
        rows = self._rows(entities)
        excluded = set(exclude_fields or ()) | {"Uid"}
        uids: list[Any] = []
        for row in rows:
            if row.get("Uid") is None:
                raise ValidationError("Every entity in a bulk update needs a Uid")
            uids.append(row["Uid"])

        fields: list[str] = []
        for row in rows:
            for key in row:
                if key not in excluded and key not in fields:
                    fields.append(self.writable_column(key))
        if not fields:
            raise ValidationError("No fields to update")

        params: list[Any] = []
        assignments = []
        for field in fields:
            branches = []
            for row in rows:
                if field in row:
                    branches.append("WHEN Uid = ? THEN ?")
                    params.extend([row["Uid"], row[field]])
            assignments.append(f"{field} = CASE {' '.join(branches)} ELSE {field} END")
        params.extend(uids)
        return Query(
            f"UPDATE {self.table} SET {', '.join(assignments)} WHERE Uid IN ({_placeholders(len(uids))})",
            params,
        )

    def upsert_many(
        self,
        entities: Sequence[EntityLike],
        unique_key: str = "Uid",
        exclude_from_update: Optional[Iterable[str]] = None,
    ) -> Query:
        """
        Multi-row insert-or-update.

        On conflict every inserted column is overwritten except the unique
        key, CreatedBy, CreatedOn and any caller-excluded columns.
        """
        rows = self._rows(entities)
        cols = [self.writable_column(c) for c in rows[0]]
        key = self.writable_column(unique_key)
        if key not in cols:
            raise ValidationError(f"Upsert rows must define the unique key '{unique_key}'")
        skip = {key, *UPSERT_PROTECTED, *(exclude_from_update or ())}
        update_cols = [c for c in cols if c not in skip]

        group = f"({_placeholders(len(cols))})"
        params: list[Any] = []
        for row in rows:
            params.extend(row.get(c) for c in cols)
        sql = f"INSERT INTO {self.table} ({', '.join(cols)}) VALUES " + ", ".join(group for _ in rows)

        if self.dialect == "mysql":
            if update_cols:
                sql += " ON DUPLICATE KEY UPDATE " + ", ".join(f"{c} = VALUES({c})" for c in update_cols)
            else:
                sql += f" ON DUPLICATE KEY UPDATE {key} = {key}"
        else:
            if update_cols:
                sql += f" ON CONFLICT({key}) DO UPDATE SET " + ", ".join(f"{c} = excluded.{c}" for c in update_cols)
            else:
                sql += f" ON CONFLICT({key}) DO NOTHING"
        return Query(sql, params)

    def soft_delete(
        self,
        uid: str,
        deleted_on: Any,
        deleted_by: Optional[str] = None,
        org_id: Optional[str] = None,
    ) -> Query:
        sql = f"UPDATE {self.table} SET IsDeleted = 1, DeletedOn = ?, DeletedBy = ? WHERE Uid = ? AND IsDeleted = 0"
        params: list[Any] = [deleted_on, deleted_by, uid]
        if org_id is not None:
            sql += " AND OrgId = ?"
            params.append(org_id)
        return Query(sql, params)

    def soft_delete_many(
        self,
        uids: Sequence[str],
        deleted_on: Any,
        deleted_by: Optional[str] = None,
        org_id: Optional[str] = None,
    ) -> Query:
        ids = self._ids(uids)
        sql = (
            f"UPDATE {self.table} SET IsDeleted = 1, DeletedOn = ?, DeletedBy = ? "
            f"WHERE Uid IN ({_placeholders(len(ids))}) AND IsDeleted = 0"
        )
        params: list[Any] = [deleted_on, deleted_by, *ids]
        if org_id is not None:
            sql += " AND OrgId = ?"
            params.append(org_id)
        return Query(sql, params)

    def hard_delete(self, uid: str, org_id: Optional[str] = None) -> Query:
        sql = f"DELETE FROM {self.table} WHERE Uid = ?"
        params: list[Any] = [uid]
        if org_id is not None:
            sql += " AND OrgId = ?"
            params.append(org_id)
        return Query(sql, params)

    def hard_delete_many(self, uids: Sequence[str], org_id: Optional[str] = None) -> Query:
        ids = self._ids(uids)
        sql = f"DELETE FROM {self.table} WHERE Uid IN ({_placeholders(len(ids))})"
        params: list[Any] = list(ids)
        if org_id is not None:
            sql += " AND OrgId = ?"
            params.append(org_id)
        return Query(sql, params)

    # ------------------------------------------------------------------ batch input

    @staticmethod
    def _rows(entities: Sequence[EntityLike]) -> list[dict[str, Any]]:
        if not entities:
            raise EmptyBatchError()
        rows = [defined_values(e) for e in entities]
        if not rows[0]:
            raise ValidationError("Batch rows must define at least one field")
        return rows

    @staticmethod
    def _ids(uids: Sequence[str]) -> list[str]:
        ids = list(uids)
        if not ids:
            raise EmptyBatchError()
        return ids
