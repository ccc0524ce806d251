from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.TaskCreate import (
    DESCRIPTION_MAX_LENGTH,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    TITLE_MAX_LENGTH,
)


class TaskUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    isCompleted: Optional[bool] = None
    dueDate: Optional[datetime] = None
    priority: Optional[int] = Field(default=None, ge=PRIORITY_LOW, le=PRIORITY_HIGH)
