from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, MetaData, String, false, true
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


# Standardized naming convention for alembic-friendly constraints/indexes.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# UUIDs are stored as canonical 36-char strings; MySQL and SQLite share the layout.
UID_LENGTH = 36


class Base(DeclarativeBase):
    """Declarative base class with metadata naming conventions."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class AuditMixin:
    """Primary key, soft-delete flag and audit stamps shared by every entity table."""
    Uid: Mapped[str] = mapped_column(String(UID_LENGTH), primary_key=True)
    IsActive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    IsDeleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    CreatedOn: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    CreatedBy: Mapped[Optional[str]] = mapped_column(String(UID_LENGTH), nullable=True)
    UpdatedOn: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    UpdatedBy: Mapped[Optional[str]] = mapped_column(String(UID_LENGTH), nullable=True)
    DeletedOn: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    DeletedBy: Mapped[Optional[str]] = mapped_column(String(UID_LENGTH), nullable=True)


class TenantMixin:
    """Organization scoping; OrgId is a FK to Organization.Uid."""

    @declared_attr
    def OrgId(cls) -> Mapped[str]:  # noqa: N802
        return mapped_column(
            String(UID_LENGTH),
            ForeignKey("Organization.Uid"),
            nullable=False,
            index=True,
        )


# PUBLIC_INTERFACE
def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form stored in DateTime columns."""
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)
