from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recruitment_api.db.base import AuditMixin, Base, TenantMixin


class Gym(AuditMixin, TenantMixin, Base):
    """Gym location managed by an organization."""
    __tablename__ = "Gym"

    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    Phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    Email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
