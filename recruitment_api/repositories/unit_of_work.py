from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from recruitment_api.db.query_executor import QueryExecutor
from recruitment_api.db.tables import TableNames, resolve_table
from recruitment_api.schemas import entities

from .base import Repository

R = TypeVar("R")

# Entity model used when a caller asks for a repository by table name only.
DEFAULT_ENTITY_TYPES: dict[str, Type[BaseModel]] = {
    TableNames.ORGANIZATION.value: entities.Organization,
    TableNames.USER.value: entities.User,
    TableNames.GYM.value: entities.Gym,
    TableNames.DEPARTMENT.value: entities.Department,
    TableNames.POSITION.value: entities.Position,
    TableNames.TASK.value: entities.Task,
    TableNames.APPLICATION.value: entities.Application,
    TableNames.USER_INFO.value: entities.UserInfo,
    TableNames.FORM_TEMPLATE.value: entities.FormTemplate,
    TableNames.FORM_SECTION.value: entities.FormSection,
    TableNames.FORM_FIELD.value: entities.FormField,
    TableNames.OPTION_GROUP.value: entities.OptionGroup,
    TableNames.OPTIONS.value: entities.Option,
    TableNames.EMAIL_TEMPLATE.value: entities.EmailTemplate,
}


class UnitOfWork:
    """
    Request-scoped access point for repositories.

    Repositories are created lazily and cached per (table, entity type)
    for the lifetime of this unit. ``transaction`` hands the callback a
    second unit bound to one connection, so every repository taken from it
    commits or rolls back together.
    """

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor
        self._repositories: dict[tuple[str, Type[BaseModel]], Repository[Any]] = {}

    @property
    def dialect(self) -> str:
        return self.executor.dialect

    # PUBLIC_INTERFACE
    def get_repository(
        self,
        table_name: str | TableNames,
        entity_type: Optional[Type[BaseModel]] = None,
    ) -> Repository[Any]:
        """
        Return the cached repository for ``table_name`` and ``entity_type``.

        Without ``entity_type`` the table's default entity model is used.
        Each (table, entity type) pair gets its own repository, so rows are
        always loaded into the type the caller asked for.

        Raises:
            ValueError: when the table is not in the TableNames registry.
        """
        table = resolve_table(table_name)
        key = (table, entity_type or DEFAULT_ENTITY_TYPES[table])
        repo = self._repositories.get(key)
        if repo is None:
            repo = Repository(self.executor, table, key[1])
            self._repositories[key] = repo
        return repo

    # PUBLIC_INTERFACE
    async def transaction(self, callback: Callable[["UnitOfWork"], Awaitable[R]]) -> R:
        """Run ``callback`` against a transaction-bound unit; commit on success, roll back on error."""
        async with self.executor.begin() as tx_executor:
            if tx_executor is self.executor:
                return await callback(self)
            return await callback(UnitOfWork(tx_executor))

    # PUBLIC_INTERFACE
    async def raw(self, sql: str, values: Optional[Sequence[Any]] = None) -> list[dict[str, Any]]:
        """Run an arbitrary parameterized statement and return its rows (empty for mutations)."""
        return (await self.executor.execute(sql, values)).data

    def clear_cache(self) -> None:
        self._repositories.clear()
