from datetime import datetime, timezone
from typing import Iterable, Optional

from app.models import TaskResponse, TaskStats


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def summarize_tasks(tasks: Iterable[TaskResponse], now: Optional[datetime] = None) -> TaskStats:
    """Counts for a task collection; overdue means pending with a due date already past."""
    now = _aware(now or datetime.now(timezone.utc))
    total = completed = overdue = 0
    for task in tasks:
        total += 1
        if task.isCompleted:
            completed += 1
        elif task.dueDate is not None and _aware(task.dueDate) < now:
            overdue += 1
    rate = round(completed / total * 100, 1) if total else 0.0
    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        completionRate=rate,
    )
