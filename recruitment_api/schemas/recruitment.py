from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .entities import PositionStatus


class DepartmentCreate(BaseModel):
    """Create department payload."""
    Name: str = Field(..., min_length=1, max_length=255)
    Description: Optional[str] = Field(None)


class DepartmentUpdate(BaseModel):
    """Update department payload."""
    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    IsActive: Optional[bool] = Field(None)


class PositionCreate(BaseModel):
    """Create position payload."""
    model_config = ConfigDict(use_enum_values=True)

    Name: str = Field(..., min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    Status: PositionStatus = Field(default=PositionStatus.DRAFT)
    DepartmentId: Optional[str] = Field(None, description="Owning department")


class PositionUpdate(BaseModel):
    """Update position payload."""
    model_config = ConfigDict(use_enum_values=True)

    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    Status: Optional[PositionStatus] = Field(None)
    DepartmentId: Optional[str] = Field(None)
    IsActive: Optional[bool] = Field(None)


class ApplicationCreate(BaseModel):
    """Candidate application payload (also used by the public careers endpoint)."""
    Name: str = Field(..., min_length=1, max_length=255)
    Email: EmailStr = Field(...)
    Phone: Optional[str] = Field(None, max_length=50)
    Experience: Optional[float] = Field(None, ge=0, description="Years of experience")
    PositionId: str = Field(..., description="Position applied for")
    ResumeUrl: Optional[str] = Field(None, max_length=500)
    CurrentSalary: Optional[float] = Field(None, ge=0)
    ExpectedSalary: Optional[float] = Field(None, ge=0)
    NoticePeriod: Optional[int] = Field(None, ge=0, description="Notice period in days")
    MetaData: Optional[str] = Field(None, description="JSON document with extra answers")


class ApplicationUpdate(BaseModel):
    """Update application payload."""
    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Email: Optional[EmailStr] = Field(None)
    Phone: Optional[str] = Field(None, max_length=50)
    Experience: Optional[float] = Field(None, ge=0)
    ResumeUrl: Optional[str] = Field(None, max_length=500)
    CurrentSalary: Optional[float] = Field(None, ge=0)
    ExpectedSalary: Optional[float] = Field(None, ge=0)
    NoticePeriod: Optional[int] = Field(None, ge=0)
    MetaData: Optional[str] = Field(None)
    IsActive: Optional[bool] = Field(None)
