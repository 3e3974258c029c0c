# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base Cache for API Intent Pipeline

This module provides the BaseCache abstract class that defines the common
interface of the bundled cache backends. Any BaseCache satisfies
CacheProtocol and can be placed in the ``cache`` field of a call intent.
"""

import abc
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """
    Counters kept by a cache backend.

    Attributes:
        hits: ``get`` calls that returned a value
        misses: ``get`` calls for absent or expired keys
        writes: Successful ``set`` calls
        evictions: Entries dropped to honour the size bound
        expirations: Entries dropped because their TTL elapsed
    """

    hits: int = 0
    misses: int = 0
    writes: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def hit_ratio(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class BaseCache(abc.ABC):
    """
    An abstract base class for endpoint-keyed caches.

    Keys are resolved endpoint strings. Values are whatever the success
    descriptor produced as payload; backends that leave the process
    (Redis) require them to be JSON-serializable.

    Subclasses must implement all abstract methods.
    """

    def __init__(self, namespace: str = "api_intent_pipeline"):
        """
        Initialize the cache with a namespace for isolation.

        Args:
            namespace: Namespace for isolating entries across applications
        """
        self.namespace = namespace
        self.stats = CacheStats()

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @abc.abstractmethod
    async def has(self, key: str) -> bool:
        """
        Check whether a live entry exists for ``key``.

        Args:
            key: Resolved endpoint

        Returns:
            True if a non-expired entry exists
        """
        pass

    @abc.abstractmethod
    async def get(self, key: str) -> Any:
        """
        Get the value stored for ``key``.

        Raises:
            CacheMissError: If no live entry exists
        """
        pass

    @abc.abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store ``value`` for ``key``, replacing any existing entry."""
        pass

    @abc.abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Remove the entry for ``key``.

        Returns:
            True if an entry was removed
        """
        pass

    @abc.abstractmethod
    async def clear(self) -> None:
        """Remove every entry in this cache's namespace."""
        pass

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
        logger.debug(f"Closed {self.__class__.__name__} '{self.namespace}'")


__all__ = ["BaseCache", "CacheStats"]
