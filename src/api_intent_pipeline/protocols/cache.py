# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for the cache capability."""

from collections.abc import Awaitable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheProtocol(Protocol):
    """
    Minimal protocol for an endpoint-keyed cache.

    The cache is owned by the caller and may be shared between pipelines
    and mutated concurrently; the pipeline takes no locks around it. Each
    method may be a plain function or a coroutine function.

    The pipeline only calls ``get`` after ``has`` returned True for the same
    key, and only calls ``set`` with the payload of a success event built
    from a live network response. Failures of ``set`` are logged and
    otherwise ignored.

    Keys are resolved endpoint strings; method, body and headers are not
    part of the key.
    """

    def has(self, key: str) -> bool | Awaitable[bool]:
        """Return whether a value is cached for ``key``."""
        ...

    def get(self, key: str) -> Any | Awaitable[Any]:
        """Return the value cached for ``key``."""
        ...

    def set(self, key: str, value: Any) -> None | Awaitable[None]:
        """Store ``value`` for ``key``."""
        ...
