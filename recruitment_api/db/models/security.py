from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from recruitment_api.db.base import UID_LENGTH, AuditMixin, Base, TenantMixin


class User(AuditMixin, TenantMixin, Base):
    """Application user within an organization. Emails are unique across tenants."""
    __tablename__ = "Users"
    __table_args__ = (
        UniqueConstraint("Email", name="uq_Users_Email"),
    )

    Email: Mapped[str] = mapped_column(String(255), nullable=False)
    Password: Mapped[str] = mapped_column(String(255), nullable=False)
    Role: Mapped[str] = mapped_column(String(20), nullable=False, default="Employee", server_default="Employee")


class UserInfo(AuditMixin, TenantMixin, Base):
    """Profile details for a user; at most one live row per user."""
    __tablename__ = "UserInfo"

    UserId: Mapped[str] = mapped_column(String(UID_LENGTH), ForeignKey("Users.Uid"), nullable=False, index=True)
    Email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    FirstName: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    LastName: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    Phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    JoiningDate: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    DateOfBirth: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    Address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    Gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    ProfileUrl: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
