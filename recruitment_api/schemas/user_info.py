from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserInfoCreate(BaseModel):
    """Create profile payload for a user of the organization."""
    UserId: str = Field(..., description="User the profile belongs to")
    Email: Optional[EmailStr] = Field(None)
    FirstName: Optional[str] = Field(None, max_length=100)
    LastName: Optional[str] = Field(None, max_length=100)
    Phone: Optional[str] = Field(None, max_length=50)
    JoiningDate: Optional[datetime] = Field(None)
    DateOfBirth: Optional[datetime] = Field(None)
    Address: Optional[str] = Field(None)
    Gender: Optional[str] = Field(None, max_length=20)
    ProfileUrl: Optional[str] = Field(None, max_length=500)


class UserInfoUpdate(BaseModel):
    Email: Optional[EmailStr] = Field(None)
    FirstName: Optional[str] = Field(None, max_length=100)
    LastName: Optional[str] = Field(None, max_length=100)
    Phone: Optional[str] = Field(None, max_length=50)
    JoiningDate: Optional[datetime] = Field(None)
    DateOfBirth: Optional[datetime] = Field(None)
    Address: Optional[str] = Field(None)
    Gender: Optional[str] = Field(None, max_length=20)
    ProfileUrl: Optional[str] = Field(None, max_length=500)
    IsActive: Optional[bool] = Field(None)
