"""Relational task store.

Each operation runs in its own session and transaction. Database errors are
not caught here; the API layer turns them into a generic failure.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from app.db import TaskRecord
from app.models import TaskCreate, TaskResponse

logger = logging.getLogger(__name__)

# columns that cannot hold NULL; an explicit null in an update leaves them alone
_NON_NULLABLE = {"title", "isCompleted", "priority"}

_COLUMNS = {
    "title": "title",
    "description": "description",
    "isCompleted": "is_completed",
    "dueDate": "due_date",
    "priority": "priority",
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_storage(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to naive UTC; naive input is assumed to be UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def to_response(row: TaskRecord) -> TaskResponse:
    return TaskResponse(
        id=row.id,
        title=row.title,
        description=row.description,
        isCompleted=row.is_completed,
        createdAt=from_storage(row.created_at),
        updatedAt=from_storage(row.updated_at),
        dueDate=from_storage(row.due_date),
        priority=row.priority,
    )


class TaskStore:
    def __init__(self, sessions: sessionmaker):
        self._sessions = sessions

    def list_all(self) -> list[TaskResponse]:
        with self._sessions() as session:
            rows = session.scalars(select(TaskRecord).order_by(TaskRecord.id)).all()
            return [to_response(r) for r in rows]

    def get(self, task_id: int) -> Optional[TaskResponse]:
        with self._sessions() as session:
            row = session.get(TaskRecord, task_id)
            return to_response(row) if row else None

    def insert(self, task: TaskCreate) -> TaskResponse:
        now = to_storage(utcnow())
        row = TaskRecord(
            title=task.title,
            description=task.description,
            is_completed=False,
            created_at=now,
            updated_at=now,
            due_date=to_storage(task.dueDate),
            priority=task.priority,
        )
        with self._sessions() as session, session.begin():
            session.add(row)
            session.flush()
            created = to_response(row)
        logger.info("Created task %s", created.id)
        return created

    def update(self, task_id: int, changes: Mapping[str, Any]) -> Optional[TaskResponse]:
        """Apply the supplied fields and bump ``updatedAt``.

        ``changes`` uses the wire names (``isCompleted``, ``dueDate``, ...).
        Returns ``None`` when the task does not exist.
        """
        with self._sessions() as session, session.begin():
            row = session.get(TaskRecord, task_id)
            if row is None:
                return None
            for key, value in changes.items():
                column = _COLUMNS.get(key)
                if column is None:
                    continue
                if value is None and key in _NON_NULLABLE:
                    continue
                if key == "dueDate":
                    value = to_storage(value)
                setattr(row, column, value)
            row.updated_at = max(to_storage(utcnow()), row.created_at)
            session.flush()
            updated = to_response(row)
        logger.info("Updated task %s", task_id)
        return updated

    def delete(self, task_id: int) -> bool:
        with self._sessions() as session, session.begin():
            row = session.get(TaskRecord, task_id)
            if row is None:
                return False
            session.delete(row)
        logger.info("Deleted task %s", task_id)
        return True
