from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    isCompleted: bool = False
    createdAt: datetime
    updatedAt: datetime
    dueDate: Optional[datetime] = None
    priority: int = 1
