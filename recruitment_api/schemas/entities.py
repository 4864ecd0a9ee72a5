"""
Row-level entity models.

Field names match the physical column names. A field is "defined" for the
query generator only when it was explicitly set on the instance, so a
partially populated entity produces INSERT/UPDATE statements touching just
those columns. Unknown keys (join-enriched columns) are dropped on load.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    ADMIN = "Admin"
    MANAGER = "Manager"
    EMPLOYEE = "Employee"


class PositionStatus(str, Enum):
    DRAFT = "Draft"
    OPEN = "Open"
    CLOSED = "Closed"


class TaskStack(str, Enum):
    WEB = "Web"
    API = "API"
    DB = "Db"


class FormTemplateType(str, Enum):
    APPLICATION = "Application"
    INTERVIEW = "Interview"
    FEEDBACK = "Feedback"


class EmailTemplateType(str, Enum):
    TEST = "Test"
    LOGIN_NOTIFICATION = "LoginNotification"
    APPLICATION_RECEIVED = "ApplicationReceived"


class TaskStatus(str, Enum):
    ACTIVE = "Active"
    HOLD = "Hold"
    COMPLETED = "Completed"
    CANCELED = "Canceled"


# PUBLIC_INTERFACE
class BaseEntity(BaseModel):
    """Audit and tenancy columns shared by every organization-scoped table."""

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    Uid: Optional[str] = Field(default=None, description="Primary key (UUID string)")
    OrgId: Optional[str] = Field(default=None, description="Owning organization (tenant)")
    IsActive: Optional[bool] = Field(default=None)
    IsDeleted: Optional[bool] = Field(default=None)
    CreatedOn: Optional[datetime] = Field(default=None)
    CreatedBy: Optional[str] = Field(default=None)
    UpdatedOn: Optional[datetime] = Field(default=None)
    UpdatedBy: Optional[str] = Field(default=None)
    DeletedOn: Optional[datetime] = Field(default=None)
    DeletedBy: Optional[str] = Field(default=None)


class Organization(BaseEntity):
    """A tenant. Its OrgId is its own Uid."""
    Name: Optional[str] = None
    Description: Optional[str] = None
    LogoUrl: Optional[str] = None
    Phone: Optional[str] = None
    Email: Optional[str] = None
    Owner: Optional[str] = None
    Address: Optional[str] = None
    OrgSite: Optional[str] = None


class User(BaseEntity):
    Email: Optional[str] = None
    Password: Optional[str] = Field(default=None, description="bcrypt hash, never returned by the API")
    Role: Optional[UserRole] = None


class Gym(BaseEntity):
    Name: Optional[str] = None
    Address: Optional[str] = None
    Phone: Optional[str] = None
    Email: Optional[str] = None
    Description: Optional[str] = None


class Department(BaseEntity):
    Name: Optional[str] = None
    Description: Optional[str] = None


class Position(BaseEntity):
    Name: Optional[str] = None
    Description: Optional[str] = None
    Status: Optional[PositionStatus] = None
    DepartmentId: Optional[str] = None


class Task(BaseEntity):
    Name: Optional[str] = None
    Description: Optional[str] = None
    UserName: Optional[str] = None
    Stack: Optional[TaskStack] = None
    StartDate: Optional[datetime] = None
    EndDate: Optional[datetime] = None
    Status: Optional[TaskStatus] = None


class Application(BaseEntity):
    Name: Optional[str] = None
    Email: Optional[str] = None
    Phone: Optional[str] = None
    Experience: Optional[float] = None
    PositionId: Optional[str] = None
    ResumeUrl: Optional[str] = None
    CurrentSalary: Optional[float] = None
    ExpectedSalary: Optional[float] = None
    NoticePeriod: Optional[int] = None
    MetaData: Optional[str] = Field(default=None, description="Free-form JSON document stored as text")


class UserInfo(BaseEntity):
    UserId: Optional[str] = None
    Email: Optional[str] = None
    FirstName: Optional[str] = None
    LastName: Optional[str] = None
    Phone: Optional[str] = None
    JoiningDate: Optional[datetime] = None
    DateOfBirth: Optional[datetime] = None
    Address: Optional[str] = None
    Gender: Optional[str] = None
    ProfileUrl: Optional[str] = None


class FormTemplate(BaseEntity):
    Name: Optional[str] = None
    Description: Optional[str] = None
    TemplateType: Optional[FormTemplateType] = None


class FormSection(BaseEntity):
    FormTemplateId: Optional[str] = None
    Name: Optional[str] = None
    Description: Optional[str] = None
    ShowTitle: Optional[bool] = None
    SortOrder: Optional[int] = None


class FormField(BaseEntity):
    FormSectionId: Optional[str] = None
    Label: Optional[str] = None
    Name: Optional[str] = None
    Placeholder: Optional[str] = None
    Type: Optional[str] = Field(default=None, description="Input kind: text, email, select, radio ...")
    OptionGroupId: Optional[str] = None
    HelpText: Optional[str] = None
    IsRequired: Optional[bool] = None
    DefaultValue: Optional[str] = None
    MinLength: Optional[int] = None
    MaxLength: Optional[int] = None
    Pattern: Optional[str] = None
    SortOrder: Optional[int] = None
    IsVisible: Optional[bool] = None
    Width: Optional[int] = Field(default=None, description="Percentage of the row the field spans")


class OptionGroup(BaseEntity):
    Name: Optional[str] = None
    Description: Optional[str] = None


class Option(BaseEntity):
    OptionGroupId: Optional[str] = None
    Name: Optional[str] = None
    Value: Optional[str] = None
    SortOrder: Optional[int] = None


class EmailTemplate(BaseEntity):
    Name: Optional[str] = None
    Description: Optional[str] = None
    Content: Optional[str] = None
    Type: Optional[EmailTemplateType] = None
