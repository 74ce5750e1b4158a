from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Protocol

import redis.asyncio as redis
from cachetools import TLRUCache

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool: ...


def _expires_at(key: str, value: tuple[int, Any], now: float) -> float:
    ttl, _ = value
    return now + ttl


class MemoryCache:
    """
    Process-local cache with a TTL per entry.

    Concurrent misses on the same key both fetch and both write; the writes are
    identical so no locking is needed.
    """

    def __init__(self, maxsize: int = 512, timer: Callable[[], float] = time.monotonic):
        self._entries: TLRUCache[str, tuple[int, Any]] = TLRUCache(
            maxsize=maxsize, ttu=_expires_at, timer=timer
        )

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry[1]

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        self._entries[key] = (ttl_seconds, value)
        return True

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RedisCache:
    """JSON values in Redis. Backend errors read as a miss or a dropped write."""

    def __init__(self, url: str):
        self._url = url
        self._client: redis.Redis | None = None

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            logger.info("Creating Redis client for catalog cache")
            self._client = redis.from_url(
                self._url,
                decode_responses=True,
                encoding="utf-8",
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        return self._client

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._get_client().get(key)
        except (redis.RedisError, OSError) as exc:
            logger.warning("Failed to read %s from Redis: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> bool:
        try:
            result = await self._get_client().setex(key, ttl_seconds, json.dumps(value))
        except (redis.RedisError, OSError) as exc:
            logger.warning("Failed to write %s to Redis: %s", key, exc)
            return False
        return bool(result)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def build_cache(redis_url: str = "", maxsize: int = 512) -> MemoryCache | RedisCache:
    if redis_url:
        return RedisCache(redis_url)
    return MemoryCache(maxsize=maxsize)
