from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, true
from sqlalchemy.orm import Mapped, mapped_column

from recruitment_api.db.base import UID_LENGTH, AuditMixin, Base, TenantMixin


class FormTemplate(AuditMixin, TenantMixin, Base):
    """Named form (application, interview, feedback) made of ordered sections."""
    __tablename__ = "FormTemplate"

    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    TemplateType: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Application", server_default="Application"
    )


class FormSection(AuditMixin, TenantMixin, Base):
    __tablename__ = "FormSection"

    FormTemplateId: Mapped[str] = mapped_column(
        String(UID_LENGTH), ForeignKey("FormTemplate.Uid"), nullable=False, index=True
    )
    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ShowTitle: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    SortOrder: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")


class OptionGroup(AuditMixin, TenantMixin, Base):
    """Reusable list of choices for select, radio and checkbox fields."""
    __tablename__ = "OptionGroup"

    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Option(AuditMixin, TenantMixin, Base):
    __tablename__ = "Options"

    OptionGroupId: Mapped[str] = mapped_column(
        String(UID_LENGTH), ForeignKey("OptionGroup.Uid"), nullable=False, index=True
    )
    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Value: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    SortOrder: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")


class FormField(AuditMixin, TenantMixin, Base):
    """Input rendered inside a section; choice fields point at an option group."""
    __tablename__ = "FormField"

    FormSectionId: Mapped[str] = mapped_column(
        String(UID_LENGTH), ForeignKey("FormSection.Uid"), nullable=False, index=True
    )
    Label: Mapped[str] = mapped_column(String(255), nullable=False)
    Name: Mapped[str] = mapped_column(String(255), nullable=False)
    Placeholder: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    Type: Mapped[str] = mapped_column(String(20), nullable=False, default="text", server_default="text")
    OptionGroupId: Mapped[Optional[str]] = mapped_column(
        String(UID_LENGTH), ForeignKey("OptionGroup.Uid"), nullable=True, index=True
    )
    HelpText: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    IsRequired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    DefaultValue: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    MinLength: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    MaxLength: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    Pattern: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    SortOrder: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    IsVisible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    Width: Mapped[int] = mapped_column(Integer, nullable=False, default=100, server_default="100")
