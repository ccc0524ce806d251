from app.models.TaskCreate import TaskCreate
from app.models.TaskQuery import SortKey, TaskQuery
from app.models.TaskResponse import TaskResponse
from app.models.TaskStats import TaskStats
from app.models.TaskUpdate import TaskUpdate

__all__ = [
    "SortKey",
    "TaskCreate",
    "TaskQuery",
    "TaskResponse",
    "TaskStats",
    "TaskUpdate",
]
