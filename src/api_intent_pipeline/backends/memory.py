# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
MemoryCache for API Intent Pipeline

This module provides an in-process cache implementation that doesn't require
Redis. Suitable for testing, development, and single-process applications.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Any

from ..config import CacheConfig
from ..exceptions import CacheMissError
from .base import BaseCache
from .models import CacheEntry

logger = logging.getLogger(__name__)


class MemoryCache(BaseCache):
    """
    An in-memory, endpoint-keyed cache.

    Key Features:
    - TTL support; expired entries are dropped lazily on access
    - LRU eviction once ``max_size`` entries are stored
    - Async-safe operations using asyncio.Lock

    Note:
        Entries are not shared between processes. Stored values are kept by
        reference; mutate a cached payload and the cache sees the change.
    """

    def __init__(self, config: CacheConfig | None = None) -> None:
        """
        Initialize the in-memory cache.

        Args:
            config: Namespace, TTL and size bound (defaults if omitted)
        """
        self.config = config or CacheConfig()
        super().__init__(self.config.namespace)

        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

        logger.debug(
            f"Initialized MemoryCache with namespace '{self.namespace}' "
            f"(ttl={self.config.ttl}, max_size={self.config.max_size})"
        )

    def __len__(self) -> int:
        return len(self._entries)

    def _live_entry(self, key: str) -> CacheEntry | None:
        """Return the live entry for ``key``, dropping it if expired. Lock must be held."""
        full_key = self._key(key)
        entry = self._entries.get(full_key)
        if entry is None:
            return None
        if entry.is_expired:
            del self._entries[full_key]
            self.stats.expirations += 1
            logger.debug(f"Expired cache entry for {key}")
            return None
        self._entries.move_to_end(full_key)
        return entry

    async def has(self, key: str) -> bool:
        async with self._lock:
            return self._live_entry(key) is not None

    async def get(self, key: str) -> Any:
        async with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                self.stats.misses += 1
                raise CacheMissError(key)
            self.stats.hits += 1
            return entry.value

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            full_key = self._key(key)
            self._entries[full_key] = CacheEntry.create(key, value, self.config.ttl)
            self._entries.move_to_end(full_key)
            self.stats.writes += 1

            max_size = self.config.max_size
            while max_size is not None and len(self._entries) > max_size:
                evicted, _ = self._entries.popitem(last=False)
                self.stats.evictions += 1
                logger.debug(f"Evicted least recently used cache entry {evicted}")

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._entries.pop(self._key(key), None) is not None

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
        logger.info(f"Cleared MemoryCache '{self.namespace}'")


__all__ = ["MemoryCache"]
