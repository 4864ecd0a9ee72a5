from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recruitment_api.db.base import AuditMixin, Base, TenantMixin


class Task(AuditMixin, TenantMixin, Base):
    """Work item assigned to a team member."""
    __tablename__ = "Task"

    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    UserName: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    Stack: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    StartDate: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    EndDate: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    Status: Mapped[str] = mapped_column(String(20), nullable=False, default="Active", server_default="Active")
