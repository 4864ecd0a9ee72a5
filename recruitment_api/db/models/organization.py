from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recruitment_api.db.base import UID_LENGTH, AuditMixin, Base


class Organization(AuditMixin, Base):
    """Tenant root. OrgId mirrors Uid so tenant predicates apply uniformly."""
    __tablename__ = "Organization"

    OrgId: Mapped[str] = mapped_column(String(UID_LENGTH), nullable=False, index=True)
    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    LogoUrl: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    Phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    Email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    Owner: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    Address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    OrgSite: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
