from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class OrganizationUpdate(BaseModel):
    """Update organization profile payload. Organizations are created by sign-up."""
    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    LogoUrl: Optional[str] = Field(None, max_length=500)
    Phone: Optional[str] = Field(None, max_length=50)
    Email: Optional[EmailStr] = Field(None)
    Owner: Optional[str] = Field(None, max_length=255)
    Address: Optional[str] = Field(None)
    OrgSite: Optional[str] = Field(None, max_length=255)
