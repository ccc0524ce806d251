"""Result caches for the task client.

Values are JSON-compatible (what the API returned). Entries go stale after
``ttl`` seconds; ``clear`` drops everything and is called after mutations.
"""

import json
import logging
import time
from typing import Any, Callable, Optional

import redis

from app import config

logger = logging.getLogger(__name__)


class MemoryCache:
    def __init__(self, ttl: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock() + self.ttl, value)

    def clear(self) -> None:
        self._entries.clear()


class RedisCache:
    """Cache in Redis strings; a set under ``{prefix}:keys`` indexes what we wrote."""

    def __init__(self, client, ttl: float = 30.0, prefix: str = "todo-cache"):
        self.ttl = ttl
        self.prefix = prefix
        self.r = client

    @property
    def index_key(self) -> str:
        return f"{self.prefix}:keys"

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    def get(self, key: str) -> Optional[Any]:
        raw = self.r.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        if self.ttl <= 0:
            return
        redis_key = self._key(key)
        with self.r.pipeline(transaction=True) as p:
            p.set(redis_key, json.dumps(value), px=int(self.ttl * 1000))
            p.sadd(self.index_key, redis_key)
            p.execute()

    def clear(self) -> None:
        keys = self.r.smembers(self.index_key)
        with self.r.pipeline(transaction=True) as p:
            if keys:
                p.delete(*keys)
            p.delete(self.index_key)
            p.execute()
        logger.debug("Cleared %d cached entries", len(keys))


def redis_cache_from_env(ttl: float) -> Optional[RedisCache]:
    if not config.REDIS_HOST:
        return None
    r = redis.Redis(host=config.REDIS_HOST, port=config.REDIS_PORT, decode_responses=True)
    return RedisCache(r, ttl=ttl)
