"""HTTP client for the task service with a read cache.

Reads go through the cache; every successful or failed mutation clears it,
so the next read fetches a fresh snapshot. No retries are attempted.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx
import redis

from app import config
from app.cache import MemoryCache, redis_cache_from_env
from app.models import TaskResponse, TaskStats

logger = logging.getLogger(__name__)

_LIST_KEY = "tasks"

# Fields that may be sent as an explicit null in an update to clear them.
_CLEARABLE = {"description", "dueDate"}


class TaskServiceError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TaskNotFoundError(TaskServiceError):
    pass


class TaskValidationError(TaskServiceError):
    def __init__(self, message: str, errors: Optional[list] = None, status_code: Optional[int] = 422):
        super().__init__(message, status_code)
        self.errors = errors or []


def _detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "detail" in body:
        return body["detail"]
    return body


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    detail = _detail(response)
    if response.status_code == 404:
        raise TaskNotFoundError(str(detail), 404)
    if response.status_code in (400, 422):
        errors = detail if isinstance(detail, list) else []
        message = "; ".join(
            str(e.get("msg", e)) if isinstance(e, dict) else str(e) for e in errors
        ) or str(detail)
        raise TaskValidationError(message, errors, response.status_code)
    raise TaskServiceError(f"Task service returned {response.status_code}: {detail}", response.status_code)


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class TaskClient:
    def __init__(self, http: Optional[httpx.Client] = None, cache=None, base_url: Optional[str] = None):
        self.http = http or httpx.Client(base_url=base_url or config.TODO_API_URL)
        if cache is None:
            cache = redis_cache_from_env(config.TASKS_CACHE_TTL) or MemoryCache(config.TASKS_CACHE_TTL)
        self.cache = cache

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "TaskClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TaskServiceError(f"Task service unreachable: {e}") from e
        _raise_for_status(response)
        return response

    # A broken cache backend only costs a fresh fetch; it never fails a call.
    def _cache_get(self, key: str) -> Any:
        try:
            return self.cache.get(key)
        except redis.RedisError as e:
            logger.warning("Cache read for %s failed: %s", key, e)
            return None

    def _cache_set(self, key: str, value: Any) -> None:
        try:
            self.cache.set(key, value)
        except redis.RedisError as e:
            logger.warning("Cache write for %s failed: %s", key, e)

    def _cache_clear(self) -> None:
        try:
            self.cache.clear()
        except redis.RedisError as e:
            logger.warning("Cache invalidation failed: %s", e)

    def _mutate(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return self._request(method, url, **kwargs)
        finally:
            self._cache_clear()
            logger.debug("Invalidated task cache after %s %s", method, url)

    def list_tasks(self) -> list[TaskResponse]:
        raw = self._cache_get(_LIST_KEY)
        if raw is None:
            raw = self._request("GET", "/tasks").json()
            self._cache_set(_LIST_KEY, raw)
        else:
            logger.debug("Cache hit for %s", _LIST_KEY)
        return [TaskResponse.model_validate(t) for t in raw]

    def get_task(self, task_id: int) -> TaskResponse:
        key = f"task:{task_id}"
        raw = self._cache_get(key)
        if raw is None:
            raw = self._request("GET", f"/tasks/{task_id}").json()
            self._cache_set(key, raw)
        return TaskResponse.model_validate(raw)

    def stats(self) -> TaskStats:
        return TaskStats.model_validate(self._request("GET", "/tasks/stats").json())

    def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        dueDate: Optional[datetime] = None,
        priority: Optional[int] = None,
    ) -> TaskResponse:
        payload: dict[str, Any] = {"title": title}
        if description is not None:
            payload["description"] = description
        if dueDate is not None:
            payload["dueDate"] = _encode(dueDate)
        if priority is not None:
            payload["priority"] = priority
        response = self._mutate("POST", "/tasks", json=payload)
        return TaskResponse.model_validate(response.json())

    def update_task(self, task_id: int, **changes: Any) -> TaskResponse:
        """Send a partial update. ``None`` is only sent for clearable fields."""
        payload = {
            k: _encode(v) for k, v in changes.items() if v is not None or k in _CLEARABLE
        }
        response = self._mutate("PATCH", f"/tasks/{task_id}", json=payload)
        return TaskResponse.model_validate(response.json())

    def toggle_complete(self, task: TaskResponse) -> TaskResponse:
        return self.update_task(task.id, isCompleted=not task.isCompleted)

    def delete_task(self, task_id: int) -> None:
        self._mutate("DELETE", f"/tasks/{task_id}")
