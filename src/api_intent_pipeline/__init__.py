# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""API Intent Pipeline - Action-driven asynchronous API calls.

This library turns declarative "call intents" into API requests and reports
each call's lifecycle as a short sequence of output events, forwarded to
whatever dispatch system delivered the intent.

Key Features:
    - Request, success and failure events named by type descriptors
    - Static or state-dependent endpoint, headers, options and bail-out
    - Structural validation reporting every defect at once
    - Optional endpoint-keyed cache short-circuiting the network call
    - Pluggable transport (httpx by default) and cache backends (memory, Redis)
    - Prometheus metrics

Quick Start:
    >>> from api_intent_pipeline import CALL_API, create_pipeline
    >>>
    >>> async with create_pipeline(get_state=store.get_state, forward=store.dispatch) as pipeline:
    ...     await pipeline.process({
    ...         CALL_API: {
    ...             "endpoint": "https://api.example.com/users",
    ...             "method": "GET",
    ...             "types": ["USERS_REQUEST", "USERS_SUCCESS", "USERS_FAILURE"],
    ...         }
    ...     })

Main Exports:
    - ApiPipeline, create_pipeline, api_middleware: Pipeline entry points
    - CALL_API, TypeDescriptor, OutputEvent: Intent and event types
    - InvalidIntent, RequestError, InternalError, ApiError: Error payloads
    - HttpxTransport: Default transport
    - MemoryCache, RedisCache: Cache backends

Note: RedisCache requires the 'redis' extra. Install with:
    pip install api-intent-pipeline[redis]

Version: 1.0.0
"""

__version__ = "1.0.0"

from typing import TYPE_CHECKING

from .backends import BaseCache, CacheEntry, CacheStats, MemoryCache
from .config import CacheConfig, PipelineConfig, TransportConfig
from .exceptions import (
    ApiError,
    CacheConnectionError,
    CacheError,
    CacheMissError,
    ConfigurationError,
    InternalError,
    InvalidIntent,
    PipelineError,
    RequestError,
)
from .pipeline import (
    ApiPipeline,
    PipelineOutcome,
    ProcessResult,
    api_middleware,
    create_pipeline,
    extract_intent,
    is_intent,
    normalize_type_descriptors,
    validate_intent,
)
from .protocols import CacheProtocol, ResponseProtocol, TransportProtocol
from .transports import HttpxResponse, HttpxTransport
from .types import (
    CALL_API,
    CachedResponse,
    Dynamic,
    OutputEvent,
    Static,
    TypeDescriptor,
)

# Lazy import for optional redis backend
if TYPE_CHECKING:
    from .backends import RedisCache

__all__ = [
    "CALL_API",
    # Errors
    "ApiError",
    # Pipeline
    "ApiPipeline",
    # Backends
    "BaseCache",
    "CacheConfig",
    "CacheConnectionError",
    "CacheEntry",
    "CacheError",
    "CacheMissError",
    # Protocols
    "CacheProtocol",
    "CacheStats",
    # Types
    "CachedResponse",
    "ConfigurationError",
    "Dynamic",
    # Transports
    "HttpxResponse",
    "HttpxTransport",
    "InternalError",
    "InvalidIntent",
    "MemoryCache",
    "OutputEvent",
    # Config
    "PipelineConfig",
    "PipelineError",
    "PipelineOutcome",
    "ProcessResult",
    "RedisCache",  # Lazy loaded - requires redis extra
    "RequestError",
    "ResponseProtocol",
    "Static",
    "TransportConfig",
    "TransportProtocol",
    "TypeDescriptor",
    "api_middleware",
    "create_pipeline",
    "extract_intent",
    "is_intent",
    "normalize_type_descriptors",
    "validate_intent",
]


def __getattr__(name: str) -> type:
    """Lazy import for optional redis backend."""
    if name == "RedisCache":
        from .backends import RedisCache

        return RedisCache
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
