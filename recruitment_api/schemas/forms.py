"""
Payloads and read models for the form builder.

A form template is made of ordered sections, each holding ordered fields.
Choice fields (select, radio, checkbox) reference an option group whose
options are returned nested under the field when a template is read.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .entities import FormField, FormSection, FormTemplate, FormTemplateType, Option, OptionGroup


class FormTemplateCreate(BaseModel):
    """Create form template payload."""
    model_config = ConfigDict(use_enum_values=True)

    Name: str = Field(..., min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    TemplateType: FormTemplateType = Field(default=FormTemplateType.APPLICATION)


class FormTemplateUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    TemplateType: Optional[FormTemplateType] = Field(None)
    IsActive: Optional[bool] = Field(None)


class FormSectionCreate(BaseModel):
    FormTemplateId: str = Field(..., description="Template the section belongs to")
    Name: str = Field(..., min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    ShowTitle: bool = Field(default=True)
    SortOrder: int = Field(default=0, ge=0)


class FormSectionUpdate(BaseModel):
    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    ShowTitle: Optional[bool] = Field(None)
    SortOrder: Optional[int] = Field(None, ge=0)
    IsActive: Optional[bool] = Field(None)


class FormFieldCreate(BaseModel):
    """Create form field payload."""
    FormSectionId: str = Field(..., description="Section the field belongs to")
    Label: str = Field(..., min_length=1, max_length=255)
    Name: str = Field(..., min_length=1, max_length=255, description="Key of the submitted value")
    Placeholder: Optional[str] = Field(None, max_length=255)
    Type: str = Field(default="text", min_length=1, max_length=20)
    OptionGroupId: Optional[str] = Field(None, description="Choices for select/radio/checkbox fields")
    HelpText: Optional[str] = Field(None)
    IsRequired: bool = Field(default=True)
    DefaultValue: Optional[str] = Field(None, max_length=255)
    MinLength: Optional[int] = Field(None, ge=0)
    MaxLength: Optional[int] = Field(None, ge=0)
    Pattern: Optional[str] = Field(None, max_length=255)
    SortOrder: int = Field(default=0, ge=0)
    IsVisible: bool = Field(default=True)
    Width: int = Field(default=100, ge=1, le=100)


class FormFieldUpdate(BaseModel):
    FormSectionId: Optional[str] = Field(None)
    Label: Optional[str] = Field(None, min_length=1, max_length=255)
    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Placeholder: Optional[str] = Field(None, max_length=255)
    Type: Optional[str] = Field(None, min_length=1, max_length=20)
    OptionGroupId: Optional[str] = Field(None)
    HelpText: Optional[str] = Field(None)
    IsRequired: Optional[bool] = Field(None)
    DefaultValue: Optional[str] = Field(None, max_length=255)
    MinLength: Optional[int] = Field(None, ge=0)
    MaxLength: Optional[int] = Field(None, ge=0)
    Pattern: Optional[str] = Field(None, max_length=255)
    SortOrder: Optional[int] = Field(None, ge=0)
    IsVisible: Optional[bool] = Field(None)
    Width: Optional[int] = Field(None, ge=1, le=100)
    IsActive: Optional[bool] = Field(None)


class FormFieldUpsert(FormFieldCreate):
    """Field in a bulk save: updated when ``Uid`` names an existing field, created otherwise."""
    Uid: Optional[str] = Field(None)


class OptionInput(BaseModel):
    """Option inside an option group payload; ``Uid`` selects an existing option to update."""
    Uid: Optional[str] = Field(None)
    Name: str = Field(..., min_length=1, max_length=255)
    Value: Optional[str] = Field(None, max_length=255)
    SortOrder: int = Field(default=0, ge=0)
    IsActive: Optional[bool] = Field(None)


class OptionGroupCreate(BaseModel):
    Name: str = Field(..., min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    Options: List[OptionInput] = Field(default_factory=list)


class OptionGroupUpdate(BaseModel):
    """Options listed here are upserted; options left out are kept as they are."""
    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    IsActive: Optional[bool] = Field(None)
    Options: List[OptionInput] = Field(default_factory=list)


class OptionGroupResult(OptionGroup):
    Options: List[Option] = Field(default_factory=list)


class FormFieldResult(FormField):
    Options: List[Option] = Field(default_factory=list)


class FormSectionResult(FormSection):
    Fields: List[FormFieldResult] = Field(default_factory=list)


class FormTemplateResult(FormTemplate):
    """Template with its sections, fields and options, each level ordered by SortOrder."""
    Sections: List[FormSectionResult] = Field(default_factory=list)
