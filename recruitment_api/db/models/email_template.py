from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recruitment_api.db.base import AuditMixin, Base, TenantMixin


class EmailTemplate(AuditMixin, TenantMixin, Base):
    """Stored email body an organization sends for a given event type."""
    __tablename__ = "EmailTemplate"

    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    Content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    Type: Mapped[str] = mapped_column(String(30), nullable=False, default="Test", server_default="Test")
