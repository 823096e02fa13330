"""
Unit tests for the key-value cache wrapper.
"""

from unittest.mock import AsyncMock, patch

import pytest

from productlobby.core import cache as cache_module
from productlobby.core.cache import (
    KeyValueCache,
    MemoryBackend,
    RedisBackend,
    campaign_key,
    campaign_prefix,
    create_backend,
)


@pytest.fixture
def kv() -> KeyValueCache:
    return KeyValueCache(MemoryBackend(), default_ttl=60)


class TestMemoryBackend:
    async def test_expired_entries_are_dropped_on_read(self):
        backend = MemoryBackend()
        with patch.object(cache_module.time, "monotonic", return_value=1000.0):
            await backend.set("k", "v", 10)
        with patch.object(cache_module.time, "monotonic", return_value=1009.0):
            assert await backend.get("k") == "v"
        with patch.object(cache_module.time, "monotonic", return_value=1010.0):
            assert await backend.get("k") is None

    async def test_zero_ttl_never_expires(self):
        backend = MemoryBackend()
        await backend.set("k", "v", 0)

        with patch.object(cache_module.time, "monotonic", return_value=10**9):
            assert await backend.get("k") == "v"

    async def test_delete_prefix_only_touches_matching_keys(self):
        backend = MemoryBackend()
        await backend.set("campaign:a:score", "1", None)
        await backend.set("campaign:a:weather", "2", None)
        await backend.set("campaign:ab:score", "3", None)

        removed = await backend.delete_prefix(campaign_prefix("a"))

        assert removed == 2
        assert await backend.get("campaign:ab:score") == "3"


class TestKeyValueCache:
    async def test_values_round_trip_as_json(self, kv):
        await kv.set("k", {"score": 74.3, "tier": "high"})

        assert await kv.get("k") == {"score": 74.3, "tier": "high"}
        assert await kv.get("missing") is None

    async def test_get_or_set_computes_once(self, kv):
        factory = AsyncMock(return_value={"value": 1})

        first = await kv.get_or_set("k", factory)
        second = await kv.get_or_set("k", factory)

        assert first == second == {"value": 1}
        factory.assert_awaited_once()

    async def test_default_ttl_applies(self):
        backend = AsyncMock()
        kv = KeyValueCache(backend, default_ttl=42)

        await kv.set("k", 1)
        await kv.set("j", 2, ttl_seconds=5)

        assert backend.set.await_args_list[0].args == ("k", "1", 42)
        assert backend.set.await_args_list[1].args == ("j", "2", 5)

    async def test_delete(self, kv):
        await kv.set("k", 1)
        await kv.delete("k")

        assert await kv.get("k") is None


class TestCreateBackend:
    def test_memory(self):
        assert isinstance(create_backend("memory://"), MemoryBackend)

    def test_redis(self):
        assert isinstance(create_backend("redis://localhost:6379/0"), RedisBackend)

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            create_backend("memcached://localhost")


def test_campaign_keys_share_the_prefix():
    assert campaign_key("c1", "signal-score") == "campaign:c1:signal-score"
    assert campaign_key("c1", "weather").startswith(campaign_prefix("c1"))


async def test_close_cache_resets_the_global(monkeypatch):
    monkeypatch.setattr(cache_module, "_cache", KeyValueCache(MemoryBackend()))

    await cache_module.close_cache()

    assert cache_module._cache is None
