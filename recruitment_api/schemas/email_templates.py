from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .entities import EmailTemplateType


class EmailTemplateCreate(BaseModel):
    """Create email template payload."""
    model_config = ConfigDict(use_enum_values=True)

    Name: str = Field(..., min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    Content: Optional[str] = Field(None, description="Message body (HTML)")
    Type: EmailTemplateType = Field(default=EmailTemplateType.TEST)


class EmailTemplateUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    Content: Optional[str] = Field(None)
    Type: Optional[EmailTemplateType] = Field(None)
    IsActive: Optional[bool] = Field(None)
