# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the API intent pipeline.

This module defines two families of exceptions, both rooted at PipelineError:

Error payloads:
    InvalidIntent, RequestError, InternalError and ApiError are never raised
    out of the pipeline. Instances are carried as the ``payload`` of output
    events whose ``error`` flag is set, so subscribers can inspect them the
    same way they would inspect a caught exception.

Operational errors:
    ConfigurationError and the cache errors are raised to callers of the
    configuration and cache APIs in the usual way.
"""

from typing import Any


class PipelineError(Exception):
    """Base exception for all pipeline errors.

    Catch this exception to handle any error originating from the library.

    Attributes:
        name: Short name of the error kind, stable across versions. Event
            subscribers can switch on it without importing the classes.
        message: Human-readable description.
    """

    name = "PipelineError"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class InvalidIntent(PipelineError):
    """Payload of the event emitted when a call intent fails validation.

    Emitted before any side effect takes place: no state is read, no
    callable is invoked, no network call is made.

    Attributes:
        validation_errors: Every defect found in the intent, in the order
            the validator reports them. Never empty.

    Example:
        if event.error and isinstance(event.payload, InvalidIntent):
            for problem in event.payload.validation_errors:
                logger.error(problem)
    """

    name = "InvalidIntent"

    def __init__(self, validation_errors: list[str]):
        super().__init__("Invalid call intent")
        self.validation_errors = list(validation_errors)


class RequestError(PipelineError):
    """Payload of the event emitted when local processing fails.

    Raised conceptually by a bail-out callable, endpoint/header/option
    resolution, a cache probe, or the transport itself: anything that
    prevents a server response from being obtained. The message names the
    failing stage and, where one is available, the underlying cause.
    """

    name = "RequestError"


class InternalError(PipelineError):
    """Payload of an event whose payload or meta transform raised.

    The event keeps its type but has its ``error`` flag set and this
    payload in place of whatever the transform would have produced.
    """

    name = "InternalError"


class ApiError(PipelineError):
    """Default payload of the failure event for a non-ok server response.

    Attributes:
        status: HTTP status code of the response.
        status_text: Reason phrase of the response.
        response: Decoded response body (JSON value), or None when the body
            is empty or not JSON.
    """

    name = "ApiError"

    def __init__(self, status: int, status_text: str, response: Any = None):
        super().__init__(f"{status} - {status_text}")
        self.status = status
        self.status_text = status_text
        self.response = response


class ConfigurationError(PipelineError):
    """Raised when configuration is invalid.

    This exception is raised during construction of a pipeline, transport
    or cache when the supplied collaborators are missing or unusable.

    Example:
        try:
            pipeline = create_pipeline(get_state=None, forward=store.dispatch)
        except ConfigurationError as e:
            logger.error(f"Invalid configuration: {e}")
            raise SystemExit(1)
    """

    name = "ConfigurationError"


class CacheError(PipelineError):
    """Base class for cache backend failures.

    Inside the pipeline these surface as RequestError events during the
    cache probe; they are only raised directly to code that uses a cache
    backend on its own.
    """

    name = "CacheError"


class CacheMissError(CacheError):
    """Raised by ``get`` when the key is absent or has expired.

    The pipeline only calls ``get`` after ``has`` returned True, so this
    indicates the entry expired or was removed concurrently in between.

    Attributes:
        key: The endpoint key that was not found.
    """

    name = "CacheMissError"

    def __init__(self, key: str):
        super().__init__(f"Cache entry not found: {key}")
        self.key = key


class CacheConnectionError(CacheError):
    """Raised when a cache backend cannot reach its storage.

    Example:
        try:
            await cache.has(endpoint)
        except CacheConnectionError:
            logger.warning("Redis unavailable, falling back to memory cache")
            cache = MemoryCache()
    """

    name = "CacheConnectionError"


__all__ = [
    "ApiError",
    "CacheConnectionError",
    "CacheError",
    "CacheMissError",
    "ConfigurationError",
    "InternalError",
    "InvalidIntent",
    "PipelineError",
    "RequestError",
]
