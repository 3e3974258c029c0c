import asyncio

import pytest

from api_intent_pipeline.backends.memory import MemoryCache
from api_intent_pipeline.config import CacheConfig
from api_intent_pipeline.exceptions import CacheMissError


class TestMemoryCache:
    @pytest.fixture
    def cache(self):
        return MemoryCache(CacheConfig(namespace="test", ttl=60, max_size=3))

    def test_init(self):
        cache = MemoryCache()
        assert cache.namespace == "api_intent_pipeline"
        assert cache.config.ttl == 300.0
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_set_has_get(self, cache):
        """Test basic set/has/get operations."""
        await cache.set("/users", [{"id": 1}])

        assert await cache.has("/users") is True
        assert await cache.get("/users") == [{"id": 1}]
        assert cache.stats.writes == 1
        assert cache.stats.hits == 1

    @pytest.mark.asyncio
    async def test_missing_key(self, cache):
        assert await cache.has("/missing") is False
        with pytest.raises(CacheMissError) as exc_info:
            await cache.get("/missing")
        assert exc_info.value.key == "/missing"
        assert cache.stats.misses == 1

    @pytest.mark.asyncio
    async def test_overwrite(self, cache):
        await cache.set("/x", 1)
        await cache.set("/x", 2)
        assert await cache.get("/x") == 2
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_keys_are_namespaced(self, cache):
        await cache.set("/x", 1)
        assert list(cache._entries) == ["test:/x"]

    @pytest.mark.asyncio
    async def test_ttl_expiry(self):
        cache = MemoryCache(CacheConfig(ttl=0.01))
        await cache.set("/x", 1)

        await asyncio.sleep(0.05)

        assert await cache.has("/x") is False
        assert cache.stats.expirations == 1
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_no_ttl(self):
        cache = MemoryCache(CacheConfig(ttl=None))
        await cache.set("/x", 1)
        assert cache._entries["api_intent_pipeline:/x"].expires_at is None

    @pytest.mark.asyncio
    async def test_lru_eviction(self, cache):
        """Least recently used entry is evicted once max_size is exceeded."""
        await cache.set("/a", 1)
        await cache.set("/b", 2)
        await cache.set("/c", 3)

        # touch /a so /b becomes least recently used
        assert await cache.has("/a")
        await cache.set("/d", 4)

        assert await cache.has("/b") is False
        assert await cache.has("/a") is True
        assert await cache.has("/d") is True
        assert cache.stats.evictions == 1
        assert len(cache) == 3

    @pytest.mark.asyncio
    async def test_delete(self, cache):
        await cache.set("/x", 1)
        assert await cache.delete("/x") is True
        assert await cache.delete("/x") is False
        assert await cache.has("/x") is False

    @pytest.mark.asyncio
    async def test_clear(self, cache):
        await cache.set("/a", 1)
        await cache.set("/b", 2)
        await cache.clear()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_concurrent_writes(self, cache):
        await asyncio.gather(*(cache.set(f"/{n}", n) for n in range(10)))
        assert len(cache) == 3
        assert cache.stats.writes == 10
        assert cache.stats.evictions == 7
