"""
Executes generated SQL against the connection pool or a bound transaction
connection, and maps driver failures to application errors.

Statements use positional ``?`` placeholders; they are rewritten into named
binds for ``sqlalchemy.text()`` so the same SQL runs on MySQL (aiomysql)
and SQLite (aiosqlite).
"""

from __future__ import annotations

import itertools
import logging
import re
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Sequence, TypeVar

from sqlalchemy import bindparam, text
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.sql.elements import TextClause

from recruitment_api.core.errors import (
    AppError,
    DatabaseError,
    DuplicateEntryError,
    ForeignKeyConstraintError,
    ValidationError,
)
from recruitment_api.schemas.results import PaginatedResult, build_pagination

from .session import dialect_of

logger = logging.getLogger(__name__)

R = TypeVar("R")

_PLACEHOLDER_RE = re.compile(r"\?")

SLOW_QUERY_SECONDS = 1.0

# MySQL server error numbers.
MYSQL_DUPLICATE_ENTRY = 1062
MYSQL_NO_REFERENCED_ROW = (1216, 1452)
MYSQL_ROW_IS_REFERENCED = (1217, 1451)
MYSQL_COLUMN_CANNOT_BE_NULL = 1048

_NOT_NULL_COLUMN_RE = re.compile(r"NOT NULL constraint failed: (?:\w+\.)?(\w+)|Column '(\w+)' cannot be null")


@dataclass
class QueryResult:
    """Outcome of one statement: rows for queries, counters for mutations."""
    data: list[dict[str, Any]] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    affected_rows: int = 0
    insert_id: Optional[Any] = None
    changed_rows: int = 0


# PUBLIC_INTERFACE
def bind_positional(sql: str, values: Optional[Sequence[Any]] = None) -> TextClause:
    """
    Turn ``?``-placeholder SQL plus ordered values into a bound text clause.

    Raises:
        ValueError: when the placeholder count does not match the value count.
    """
    params = list(values or [])
    counter = itertools.count()
    named = _PLACEHOLDER_RE.sub(lambda _m: f":p{next(counter)}", sql)
    found = next(counter)
    if found != len(params):
        raise ValueError(f"SQL has {found} placeholders but {len(params)} values were supplied")
    statement = text(named)
    if params:
        statement = statement.bindparams(*(bindparam(f"p{i}", value) for i, value in enumerate(params)))
    return statement


def _mysql_errno(orig: Any) -> Optional[int]:
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


def _not_null_error(message: str) -> ValidationError:
    match = _NOT_NULL_COLUMN_RE.search(message)
    column = (match.group(1) or match.group(2)) if match else None
    if column is None:
        return ValidationError("A required field is missing")
    return ValidationError(f"{column} is required", details={column: "cannot be null"})


# PUBLIC_INTERFACE
def translate_db_error(exc: SQLAlchemyError, sql: str = "") -> AppError:
    """
    Map a driver failure to an application error.

    - duplicate key                -> DuplicateEntryError (409)
    - missing referenced parent    -> ForeignKeyConstraintError (400)
    - row still referenced         -> ForeignKeyConstraintError (409)
    - null in a required column    -> ValidationError (400)
    - anything else                -> DatabaseError (500)
    """
    orig = getattr(exc, "orig", None)

    errno = _mysql_errno(orig)
    if errno == MYSQL_DUPLICATE_ENTRY:
        return DuplicateEntryError()
    if errno in MYSQL_NO_REFERENCED_ROW:
        return ForeignKeyConstraintError(status_code=400)
    if errno in MYSQL_ROW_IS_REFERENCED:
        return ForeignKeyConstraintError(status_code=409)
    if errno == MYSQL_COLUMN_CANNOT_BE_NULL:
        return _not_null_error(str(orig))

    # SQLite: sqlite_errorname on 3.11+, message text otherwise.
    errorname = getattr(orig, "sqlite_errorname", "") or ""
    message = str(orig if orig is not None else exc)
    if errorname in ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY") or (
        "UNIQUE constraint failed" in message
    ):
        return DuplicateEntryError()
    if errorname == "SQLITE_CONSTRAINT_FOREIGNKEY" or "FOREIGN KEY constraint failed" in message:
        deleting = sql.lstrip().upper().startswith("DELETE")
        return ForeignKeyConstraintError(status_code=409 if deleting else 400)
    if errorname == "SQLITE_CONSTRAINT_NOTNULL" or "NOT NULL constraint failed" in message:
        return _not_null_error(message)

    return DatabaseError()


class QueryExecutor:
    """
    Runs SQL on an injected AsyncEngine, or on one AsyncConnection when bound
    to a transaction.

    Unbound executors use a short-lived pooled connection per statement (auto
    commit). Bound executors never commit; the owner of the transaction does.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        *,
        connection: Optional[AsyncConnection] = None,
        dialect: Optional[str] = None,
    ) -> None:
        self.engine = engine
        self.connection = connection
        self.dialect = dialect or dialect_of(engine)

    @property
    def in_transaction(self) -> bool:
        return self.connection is not None

    async def execute(self, sql: str, values: Optional[Sequence[Any]] = None) -> QueryResult:
        """Run one statement and return rows (queries) or counters (mutations)."""
        statement = bind_positional(sql, values)
        started = time.perf_counter()
        try:
            if self.connection is not None:
                result = await self.connection.execute(statement)
                outcome = self._to_result(result)
            else:
                async with self.engine.begin() as conn:
                    result = await conn.execute(statement)
                    outcome = self._to_result(result)
        except SQLAlchemyError as exc:
            logger.error(
                "Query failed (%d values): %s | %s",
                len(values or []),
                sql,
                type(getattr(exc, "orig", exc)).__name__,
            )
            raise translate_db_error(exc, sql) from exc

        elapsed = time.perf_counter() - started
        if elapsed > SLOW_QUERY_SECONDS:
            logger.warning("Slow query (%.3fs): %s", elapsed, sql)
        else:
            logger.debug("Query ok (%.1fms): %s", elapsed * 1000, sql)
        return outcome

    @staticmethod
    def _to_result(result: CursorResult) -> QueryResult:
        if result.returns_rows:
            rows = [dict(r) for r in result.mappings().all()]
            return QueryResult(data=rows, fields=list(result.keys()))
        affected = result.rowcount if result.rowcount is not None and result.rowcount >= 0 else 0
        return QueryResult(
            affected_rows=affected,
            insert_id=getattr(result, "lastrowid", None),
            changed_rows=affected,
        )

    async def select(self, sql: str, values: Optional[Sequence[Any]] = None) -> list[dict[str, Any]]:
        return (await self.execute(sql, values)).data

    async def select_one(self, sql: str, values: Optional[Sequence[Any]] = None) -> Optional[dict[str, Any]]:
        rows = await self.select(sql, values)
        return rows[0] if rows else None

    async def insert(self, sql: str, values: Optional[Sequence[Any]] = None) -> QueryResult:
        return await self.execute(sql, values)

    async def update(self, sql: str, values: Optional[Sequence[Any]] = None) -> int:
        return (await self.execute(sql, values)).affected_rows

    async def delete(self, sql: str, values: Optional[Sequence[Any]] = None) -> int:
        return (await self.execute(sql, values)).affected_rows

    async def paginate(
        self,
        base_query: str,
        count_query: str,
        values: Sequence[Any],
        page: int,
        limit: int,
    ) -> PaginatedResult[dict[str, Any]]:
        """
        Run the count query, then the row query with LIMIT/OFFSET appended.

        ``values`` bind the shared WHERE clause of both queries.
        """
        page = page if page > 0 else 1
        limit = limit if limit > 0 else 1
        count_row = await self.select_one(count_query, values)
        total = int(count_row["total"]) if count_row else 0
        rows = await self.select(f"{base_query} LIMIT ? OFFSET ?", [*values, limit, (page - 1) * limit])
        return PaginatedResult(data=rows, pagination=build_pagination(total, page, limit))

    @asynccontextmanager
    async def begin(self) -> AsyncIterator["QueryExecutor"]:
        """
        Open a transaction on a dedicated connection and yield an executor bound to it.

        Commits when the block exits normally, rolls back and re-raises on any
        error, and always returns the connection to the pool. Calling begin()
        on an already-bound executor joins the surrounding transaction.
        """
        if self.connection is not None:
            yield self
            return

        try:
            conn = await self.engine.connect()
            trans = await conn.begin()
        except SQLAlchemyError as exc:
            raise translate_db_error(exc) from exc

        try:
            try:
                yield QueryExecutor(self.engine, connection=conn, dialect=self.dialect)
            except BaseException:
                logger.info("Rolling back transaction")
                await trans.rollback()
                raise
            try:
                await trans.commit()
            except SQLAlchemyError as exc:
                raise translate_db_error(exc) from exc
        finally:
            await conn.close()

    async def transaction(self, callback: Callable[["QueryExecutor"], Awaitable[R]]) -> R:
        """Run ``callback`` with a transaction-bound executor; commit or roll back as a unit."""
        async with self.begin() as tx:
            return await callback(tx)
