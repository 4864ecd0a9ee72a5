from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class GymCreate(BaseModel):
    """Create gym payload."""
    Name: str = Field(..., min_length=1, max_length=255, description="Gym name")
    Address: Optional[str] = Field(None)
    Phone: Optional[str] = Field(None, max_length=50)
    Email: Optional[EmailStr] = Field(None)
    Description: Optional[str] = Field(None)


class GymUpdate(BaseModel):
    """Update gym payload; only fields present in the request are applied."""
    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Address: Optional[str] = Field(None)
    Phone: Optional[str] = Field(None, max_length=50)
    Email: Optional[EmailStr] = Field(None)
    Description: Optional[str] = Field(None)
    IsActive: Optional[bool] = Field(None)
