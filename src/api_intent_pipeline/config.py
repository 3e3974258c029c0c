# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for the API intent pipeline.

This module provides configuration classes for the pipeline itself, the
default httpx transport and the bundled cache backends.
"""

from dataclasses import dataclass, field

from .types.intent import CALL_API, CREDENTIALS_POLICIES, HTTP_METHODS


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline executor and its validator.
    """

    # === Intent Recognition ===

    call_api_key: str = CALL_API
    """Marker key identifying a call intent inside an envelope."""

    # === Validation ===

    valid_methods: frozenset[str] = HTTP_METHODS
    """Accepted request methods (compared upper-case)."""

    valid_credentials: frozenset[str] = CREDENTIALS_POLICIES
    """Accepted credentials policies."""

    strict_keys: bool = True
    """Report unknown keys inside the intent body as validation defects."""

    # === Cache ===

    cache_writes_enabled: bool = True
    """Write success payloads of live calls back to the intent's cache."""

    # === Metrics and Monitoring ===

    metrics_enabled: bool = False
    """Record metrics in the global collector when none is injected."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.call_api_key, str) or not self.call_api_key:
            raise ValueError("call_api_key must be a non-empty string")
        if not self.valid_methods:
            raise ValueError("valid_methods must not be empty")
        if any(m != m.upper() for m in self.valid_methods):
            raise ValueError("valid_methods must be upper-case")
        self.valid_methods = frozenset(self.valid_methods)
        self.valid_credentials = frozenset(self.valid_credentials)


@dataclass
class TransportConfig:
    """
    Configuration for the default httpx transport.
    """

    base_url: str = ""
    """Base URL prepended to relative endpoints."""

    timeout: float = 30.0
    """Request timeout in seconds."""

    follow_redirects: bool = True
    """Follow redirect responses."""

    default_headers: dict[str, str] = field(default_factory=dict)
    """Headers sent with every request; per-call headers take precedence."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")


@dataclass
class CacheConfig:
    """
    Configuration for the bundled cache backends.
    """

    namespace: str = "api_intent_pipeline"
    """Key prefix isolating entries of different applications."""

    ttl: float | None = 300.0
    """Entry TTL in seconds; None keeps entries until evicted."""

    max_size: int | None = 1000
    """Maximum number of entries before LRU eviction (memory cache only)."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.ttl is not None and self.ttl <= 0:
            raise ValueError("ttl must be positive")
        if self.max_size is not None and self.max_size < 1:
            raise ValueError("max_size must be at least 1")
        if not self.namespace:
            raise ValueError("namespace must not be empty")


__all__ = [
    "CacheConfig",
    "PipelineConfig",
    "TransportConfig",
]
