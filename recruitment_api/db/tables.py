"""
Closed registry of the physical tables reachable through the generic
repository layer, and the column allow-list for each of them.

Column sets come from the SQLAlchemy metadata in recruitment_api.db.models,
which also drives migrations.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from recruitment_api.db.base import Base
from recruitment_api.db import models as _models  # noqa: F401  (registers tables)


class TableNames(str, Enum):
    """Logical entity name -> physical table name."""

    ORGANIZATION = "Organization"
    USER = "Users"
    GYM = "Gym"
    DEPARTMENT = "Department"
    POSITION = "Positions"
    TASK = "Task"
    APPLICATION = "Application"
    USER_INFO = "UserInfo"
    FORM_TEMPLATE = "FormTemplate"
    FORM_SECTION = "FormSection"
    FORM_FIELD = "FormField"
    OPTION_GROUP = "OptionGroup"
    OPTIONS = "Options"
    EMAIL_TEMPLATE = "EmailTemplate"


# PUBLIC_INTERFACE
def resolve_table(table_name: str | TableNames) -> str:
    """Return the physical table name, raising ValueError for anything outside the registry."""
    if isinstance(table_name, TableNames):
        return table_name.value
    for member in TableNames:
        if table_name == member.value:
            return member.value
    raise ValueError(f"Unknown table: {table_name!r}")


# PUBLIC_INTERFACE
@lru_cache(maxsize=None)
def columns_for(table_name: str) -> frozenset[str]:
    """Known column names of a registered table."""
    table = Base.metadata.tables.get(resolve_table(table_name))
    if table is None:
        raise ValueError(f"No table metadata registered for {table_name!r}")
    return frozenset(c.name for c in table.columns)


# Stored and written normally, but never usable as a projection, sort key,
# search field or filter by name.
SECRET_COLUMNS: dict[str, frozenset[str]] = {
    TableNames.USER.value: frozenset({"Password"}),
}


# PUBLIC_INTERFACE
def hidden_columns_for(table_name: str) -> frozenset[str]:
    """Secret columns of a registered table (empty for most tables)."""
    return SECRET_COLUMNS.get(resolve_table(table_name), frozenset())
