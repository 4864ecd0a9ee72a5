from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .entities import TaskStack, TaskStatus


class TaskCreate(BaseModel):
    """Create task payload."""
    model_config = ConfigDict(use_enum_values=True)

    Name: str = Field(..., min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    UserName: Optional[str] = Field(None, max_length=255, description="Assignee display name")
    Stack: Optional[TaskStack] = Field(None)
    StartDate: Optional[datetime] = Field(None)
    EndDate: Optional[datetime] = Field(None)
    Status: TaskStatus = Field(default=TaskStatus.ACTIVE)


class TaskUpdate(BaseModel):
    """Update task payload."""
    model_config = ConfigDict(use_enum_values=True)

    Name: Optional[str] = Field(None, min_length=1, max_length=255)
    Description: Optional[str] = Field(None)
    UserName: Optional[str] = Field(None, max_length=255)
    Stack: Optional[TaskStack] = Field(None)
    StartDate: Optional[datetime] = Field(None)
    EndDate: Optional[datetime] = Field(None)
    Status: Optional[TaskStatus] = Field(None)
    IsActive: Optional[bool] = Field(None)
