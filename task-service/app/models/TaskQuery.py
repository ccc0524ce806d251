from typing import Literal, Optional

from pydantic import BaseModel

SortKey = Literal["createdAt", "updatedAt", "title", "dueDate", "priority"]


class TaskQuery(BaseModel):
    """Search, filter and sort options applied to a task collection.

    Every field is optional; ``None`` means "no constraint" for the filters
    and "use the key's default" for ``sortDescending``.
    """

    search: Optional[str] = None
    isCompleted: Optional[bool] = None
    priority: Optional[int] = None
    sortBy: Optional[SortKey] = None
    sortDescending: Optional[bool] = None
