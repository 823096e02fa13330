"""
Key-value cache wrapper.

A thin async facade over either Redis (``redis://`` URLs, via ``redis.asyncio``)
or an in-process TTL map (``memory://``). Values are JSON encoded so both
backends store the same representation.

Keys used by the server are namespaced per campaign, e.g.
``campaign:<id>:signal-score``, so a mutation can drop everything cached for
one campaign with :meth:`KeyValueCache.delete_prefix`.
"""

from __future__ import annotations

import json
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Tuple

from redis.asyncio import Redis

from productlobby.core.logging_config import get_logger

logger = get_logger(__name__)


class CacheBackend(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str, ttl_seconds: Optional[int]) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def delete_prefix(self, prefix: str) -> int: ...

    async def close(self) -> None: ...


class MemoryBackend:
    """In-process backend. Expiry is checked lazily on read."""

    def __init__(self) -> None:
        self._store: Dict[str, Tuple[str, Optional[float]]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            self._store.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: Optional[int]) -> None:
        expires_at = time.monotonic() + ttl_seconds if ttl_seconds else None
        self._store[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def delete_prefix(self, prefix: str) -> int:
        doomed = [k for k in self._store if k.startswith(prefix)]
        for k in doomed:
            del self._store[k]
        return len(doomed)

    async def close(self) -> None:
        self._store.clear()


class RedisBackend:
    """Redis backend using the asyncio client."""

    def __init__(self, url: str) -> None:
        self._redis = Redis.from_url(url, decode_responses=True)

    async def get(self, key: str) -> Optional[str]:
        return await self._redis.get(key)

    async def set(self, key: str, value: str, ttl_seconds: Optional[int]) -> None:
        await self._redis.set(key, value, ex=ttl_seconds or None)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)

    async def delete_prefix(self, prefix: str) -> int:
        removed = 0
        async for key in self._redis.scan_iter(match=f"{prefix}*"):
            removed += await self._redis.delete(key)
        return removed

    async def close(self) -> None:
        await self._redis.aclose()


def create_backend(url: str) -> CacheBackend:
    """Pick a backend from the cache URL scheme.

    Args:
        url: ``memory://`` or a ``redis://`` / ``rediss://`` URL

    Returns:
        Backend instance

    Raises:
        ValueError: If the scheme is not supported
    """
    if url.startswith("memory://"):
        return MemoryBackend()
    if url.startswith(("redis://", "rediss://", "unix://")):
        return RedisBackend(url)
    raise ValueError(f"Unsupported cache URL: {url}")


class KeyValueCache:
    """JSON value cache with a default time-to-live."""

    def __init__(self, backend: CacheBackend, default_ttl: int = 300) -> None:
        self.backend = backend
        self.default_ttl = default_ttl

    async def get(self, key: str) -> Any:
        raw = await self.backend.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ttl = self.default_ttl if ttl_seconds is None else ttl_seconds
        await self.backend.set(key, json.dumps(value, default=str), ttl)

    async def delete(self, key: str) -> None:
        await self.backend.delete(key)

    async def delete_prefix(self, prefix: str) -> int:
        removed = await self.backend.delete_prefix(prefix)
        if removed:
            logger.debug(f"Cache invalidated {removed} key(s) under '{prefix}'")
        return removed

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl_seconds: Optional[int] = None,
    ) -> Any:
        """Return the cached value for ``key``, computing and storing it on a miss."""
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await factory()
        await self.set(key, value, ttl_seconds)
        return value

    async def close(self) -> None:
        await self.backend.close()


def campaign_key(campaign_id: str, name: str) -> str:
    return f"campaign:{campaign_id}:{name}"


def campaign_prefix(campaign_id: str) -> str:
    return f"campaign:{campaign_id}:"


_cache: Optional[KeyValueCache] = None


def get_cache() -> KeyValueCache:
    """Process-wide cache built from settings on first use."""
    global _cache
    if _cache is None:
        from productlobby.server.core.config import settings

        _cache = KeyValueCache(create_backend(settings.cache.url), default_ttl=settings.cache.ttl_seconds)
    return _cache


async def close_cache() -> None:
    global _cache
    if _cache is not None:
        await _cache.close()
        _cache = None
