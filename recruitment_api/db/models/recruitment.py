from __future__ import annotations

from typing import Optional

from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recruitment_api.db.base import UID_LENGTH, AuditMixin, Base, TenantMixin


class Department(AuditMixin, TenantMixin, Base):
    """Organizational unit that owns open positions."""
    __tablename__ = "Department"

    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Position(AuditMixin, TenantMixin, Base):
    """Job opening within a department."""
    __tablename__ = "Positions"

    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    Status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft", server_default="Draft")
    DepartmentId: Mapped[Optional[str]] = mapped_column(
        String(UID_LENGTH), ForeignKey("Department.Uid"), nullable=True, index=True
    )


class Application(AuditMixin, TenantMixin, Base):
    """Candidate application for a position."""
    __tablename__ = "Application"

    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Email: Mapped[str] = mapped_column(String(255), nullable=False)
    Phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    Experience: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    PositionId: Mapped[Optional[str]] = mapped_column(
        String(UID_LENGTH), ForeignKey("Positions.Uid"), nullable=True, index=True
    )
    ResumeUrl: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    CurrentSalary: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ExpectedSalary: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    NoticePeriod: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    MetaData: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
