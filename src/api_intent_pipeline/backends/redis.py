# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
RedisCache for API Intent Pipeline

Stores cached payloads in Redis so that several processes can share one
cache. Entries are JSON documents produced by CacheEntry; values must be
JSON-serializable. Expiry is delegated to Redis (``SET ... EX``).

Requires the ``redis`` extra:
    pip install api-intent-pipeline[redis]
"""

import json
import logging
import math
import os
from typing import Any

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from ..config import CacheConfig
from ..exceptions import CacheConnectionError, CacheError, CacheMissError
from .base import BaseCache
from .models import CacheEntry

logger = logging.getLogger(__name__)


class RedisCache(BaseCache):
    """
    Redis-backed, endpoint-keyed cache.

    Keys are stored as ``{namespace}:{endpoint}``. Redis errors are raised as
    CacheConnectionError; the pipeline turns a failing probe into a
    RequestError event and logs a failing write.

    Example:
        >>> cache = RedisCache(redis_url="redis://localhost:6379/0")
        >>> intent = {"endpoint": "/users", "method": "GET", "cache": cache, ...}
    """

    def __init__(
        self,
        redis_url: str | None = None,
        redis_client: Any | None = None,
        config: CacheConfig | None = None,
    ) -> None:
        """
        Initialize the Redis cache.

        Args:
            redis_url: Redis connection URL. If not provided, falls back to the
                REDIS_URL environment variable, then to "redis://localhost:6379".
            redis_client: Optional pre-configured ``redis.asyncio`` client. A
                client passed in is not closed by ``close()``.
            config: Namespace and TTL (``max_size`` is not used)
        """
        self.config = config or CacheConfig()
        super().__init__(self.config.namespace)

        self.redis_url = redis_url or os.environ.get(
            "REDIS_URL", "redis://localhost:6379"
        )
        self._owns_client = redis_client is None
        self._redis: Any = redis_client

        logger.info(f"Initialized RedisCache with namespace '{self.namespace}'")

    def _client(self) -> Any:
        if self._redis is None:
            self._redis = Redis.from_url(self.redis_url, decode_responses=True)
        return self._redis

    async def has(self, key: str) -> bool:
        try:
            return bool(await self._client().exists(self._key(key)))
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.error(f"Redis error checking cache entry for {key}: {e}")
            raise CacheConnectionError(f"Redis error checking {key}: {e}") from e

    async def get(self, key: str) -> Any:
        try:
            raw = await self._client().get(self._key(key))
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.error(f"Redis error reading cache entry for {key}: {e}")
            raise CacheConnectionError(f"Redis error reading {key}: {e}") from e

        if raw is None:
            self.stats.misses += 1
            raise CacheMissError(key)

        try:
            entry = CacheEntry.from_dict(json.loads(raw))
        except (ValueError, KeyError, ValidationError) as e:
            raise CacheError(f"Corrupt cache entry for {key}: {e}") from e

        self.stats.hits += 1
        return entry.value

    async def set(self, key: str, value: Any) -> None:
        entry = CacheEntry.create(key, value, self.config.ttl)
        try:
            document = json.dumps(entry.to_dict())
        except (TypeError, ValueError) as e:
            raise CacheError(f"Value for {key} is not JSON-serializable: {e}") from e

        ttl = self.config.ttl
        try:
            await self._client().set(
                self._key(key),
                document,
                ex=max(1, math.ceil(ttl)) if ttl is not None else None,
            )
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.error(f"Redis error writing cache entry for {key}: {e}")
            raise CacheConnectionError(f"Redis error writing {key}: {e}") from e
        self.stats.writes += 1

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._client().delete(self._key(key)))
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.error(f"Redis error deleting cache entry for {key}: {e}")
            raise CacheConnectionError(f"Redis error deleting {key}: {e}") from e

    async def clear(self) -> None:
        """Clear every entry in the namespace.

        Uses SCAN instead of KEYS to avoid blocking Redis on large keyspaces.
        """
        try:
            client = self._client()
            cursor = 0
            while True:
                cursor, keys = await client.scan(
                    cursor, match=f"{self.namespace}:*", count=100
                )
                if keys:
                    await client.delete(*keys)
                if cursor == 0:
                    break
        except (ConnectionError, TimeoutError, RedisError) as e:
            logger.error(f"Redis error during clear: {e}")
            raise CacheConnectionError(f"Redis error during clear: {e}") from e
        logger.info(f"Cleared RedisCache '{self.namespace}'")

    async def close(self) -> None:
        """Close the Redis connection if this cache created it."""
        if self._owns_client and self._redis is not None:
            await self._redis.aclose()
            self._redis = None
        await super().close()


__all__ = ["RedisCache"]
