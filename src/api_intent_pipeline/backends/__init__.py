# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Cache backends for call intents.

Available backends:
- BaseCache: Abstract base class defining the cache interface
- MemoryCache: In-process cache with TTL and LRU eviction
- RedisCache: Redis-based cache shared across processes (requires redis extra)

Supporting types:
- CacheEntry: Pydantic model of a stored entry
- CacheStats: Hit/miss/write counters kept by every backend

Note: RedisCache is lazily imported to avoid requiring the redis package
when only using MemoryCache.
"""

from typing import TYPE_CHECKING, cast

from api_intent_pipeline.backends.base import BaseCache, CacheStats
from api_intent_pipeline.backends.memory import MemoryCache
from api_intent_pipeline.backends.models import CacheEntry

# Lazy import for optional redis backend
if TYPE_CHECKING:
    from api_intent_pipeline.backends.redis import RedisCache

__all__ = [
    # Base classes
    "BaseCache",
    "CacheEntry",
    "CacheStats",
    # Memory backend
    "MemoryCache",
    # Redis backend (lazy loaded)
    "RedisCache",
]


def __getattr__(name: str) -> type:
    """Lazy import for optional redis backend."""
    if name == "RedisCache":
        try:
            from api_intent_pipeline.backends import redis as redis_module

            return cast(type, redis_module.RedisCache)
        except ImportError as e:  # pragma: no cover
            raise ImportError(  # pragma: no cover
                f"'{name}' requires the 'redis' extra. "
                "Install with: pip install api-intent-pipeline[redis]"
            ) from e
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
