from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

PRIORITY_LOW = 1
PRIORITY_MEDIUM = 2
PRIORITY_HIGH = 3

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    dueDate: Optional[datetime] = None
    priority: int = Field(default=PRIORITY_LOW, ge=PRIORITY_LOW, le=PRIORITY_HIGH)
