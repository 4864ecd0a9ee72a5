from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .entities import UserRole


class TokenPair(BaseModel):
    """Access and refresh tokens."""
    token_type: str = Field("bearer", description="Token type, typically 'bearer'")
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")


class RefreshRequest(BaseModel):
    """Request to refresh an access token."""
    refresh_token: str = Field(..., description="Refresh token")


class LoginRequest(BaseModel):
    """Email/password credentials."""
    Email: EmailStr = Field(..., description="User email")
    Password: str = Field(..., min_length=1, description="User password")


class RegisterRequest(BaseModel):
    """Sign-up payload: creates an organization and its first (admin) user."""
    OrganizationName: str = Field(..., min_length=1, max_length=255, description="Organization name")
    Email: EmailStr = Field(..., description="Admin email")
    Password: str = Field(..., min_length=6, description="Admin password")
    Phone: Optional[str] = Field(None, max_length=50)
    OrgSite: Optional[str] = Field(None, max_length=255)
    FirstName: Optional[str] = Field(None, max_length=100, description="Admin first name")
    LastName: Optional[str] = Field(None, max_length=100)


class UserRead(BaseModel):
    """User read model. The password hash is never part of it."""
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    Uid: str = Field(..., description="User ID")
    OrgId: str = Field(..., description="Organization ID")
    Email: str = Field(..., description="User email")
    Role: Optional[UserRole] = Field(None)
    IsActive: Optional[bool] = Field(None, description="Active flag")
    CreatedOn: Optional[datetime] = Field(None, description="Created timestamp")
    CreatedBy: Optional[str] = Field(None)
    UpdatedOn: Optional[datetime] = Field(None, description="Updated timestamp")
    UpdatedBy: Optional[str] = Field(None)


class UserCreate(BaseModel):
    """Admin create user payload."""
    model_config = ConfigDict(use_enum_values=True)

    Email: EmailStr = Field(..., description="Email")
    Password: str = Field(..., min_length=6, description="Password")
    Role: UserRole = Field(default=UserRole.EMPLOYEE)
    IsActive: Optional[bool] = Field(default=None)


class UserUpdate(BaseModel):
    """Admin update user payload."""
    model_config = ConfigDict(use_enum_values=True)

    Email: Optional[EmailStr] = Field(None)
    Password: Optional[str] = Field(None, min_length=6)
    Role: Optional[UserRole] = Field(None)
    IsActive: Optional[bool] = Field(None)


class AuthSession(BaseModel):
    """Tokens plus the authenticated user, returned by login and register."""
    tokens: TokenPair
    user: UserRead
