"""Client-side search, filter and sort over an in-memory task collection.

``filter_tasks`` is pure: it never touches its input and always returns a
new list, so it can be re-run on every change of the collection or query.
"""

import unicodedata
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from app.models import SortKey, TaskQuery, TaskResponse

DEFAULT_SORT_KEY: SortKey = "createdAt"


def _timestamp(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _fold(text: str) -> str:
    """Fold accented letters to their base letter, then drop case."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def _title_key(task: TaskResponse):
    # base letters first, then accents, then lowercase before uppercase
    return (_fold(task.title), task.title.casefold(), task.title.swapcase())


_SORT_KEYS: dict[str, Callable[[TaskResponse], object]] = {
    "createdAt": lambda t: _timestamp(t.createdAt),
    "updatedAt": lambda t: _timestamp(t.updatedAt),
    "title": _title_key,
    "dueDate": lambda t: _timestamp(t.dueDate),
    "priority": lambda t: t.priority,
}


def default_descending(sort_by: Optional[SortKey]) -> bool:
    """Direction used when the query does not set one.

    Without a key the list is newest first. A chosen key sorts ascending,
    except priority, which sorts high to low.
    """
    if sort_by is None:
        return True
    return sort_by == "priority"


def matches(task: TaskResponse, query: TaskQuery) -> bool:
    if query.search and query.search.strip():
        term = query.search.lower()
        in_title = term in task.title.lower()
        in_description = task.description is not None and term in task.description.lower()
        if not (in_title or in_description):
            return False
    if query.isCompleted is not None and task.isCompleted != query.isCompleted:
        return False
    if query.priority is not None and task.priority != query.priority:
        return False
    return True


def filter_tasks(
    tasks: Optional[Iterable[TaskResponse]], query: Optional[TaskQuery] = None
) -> list[TaskResponse]:
    if not tasks:
        return []
    if query is None:
        query = TaskQuery()

    selected = [t for t in tasks if matches(t, query)]

    sort_by = query.sortBy or DEFAULT_SORT_KEY
    descending = query.sortDescending
    if descending is None:
        descending = default_descending(query.sortBy)
    key = _SORT_KEYS[sort_by]

    if sort_by == "dueDate":
        # undated tasks go last whatever the direction, in input order
        dated = [t for t in selected if t.dueDate is not None]
        undated = [t for t in selected if t.dueDate is None]
        return sorted(dated, key=key, reverse=descending) + undated

    return sorted(selected, key=key, reverse=descending)
