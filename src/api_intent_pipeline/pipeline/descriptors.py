# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Type descriptor normalization and event building.

Raw descriptors come in two shapes: a bare identifier, or a record with a
``type`` identifier and optional ``payload``/``meta`` transforms. They are
normalized once, after validation, into TypeDescriptor values whose
transforms are filled in with the lifecycle defaults:

* request: no payload, no meta
* success: payload is the decoded JSON body of the response
* failure: payload is an ApiError carrying status, reason and decoded body

Transforms are called with ``(envelope, state)`` for request events and
``(envelope, state, response)`` for success and failure events, only when
the corresponding event is actually emitted.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

from ..exceptions import ApiError, InternalError
from ..protocols.transport import ResponseProtocol
from ..types.descriptor import TypeDescriptor
from ..types.event import OutputEvent
from ..types.resolution import maybe_await

logger = logging.getLogger(__name__)

# Statuses that never carry a body
EMPTY_BODY_STATUSES = frozenset({204, 205})

_UNSET: Any = object()


def _content_type(headers: Mapping[str, str]) -> str | None:
    for name, value in headers.items():
        if name.lower() == "content-type":
            return value
    return None


async def get_json(response: ResponseProtocol) -> Any:
    """
    Decode a response body as JSON when it declares a JSON content type.

    Returns None for bodiless statuses (204, 205) and for responses whose
    content type is missing or not JSON.
    """
    if response.status in EMPTY_BODY_STATUSES:
        return None
    content_type = _content_type(response.headers)
    if content_type and "json" in content_type:
        return await response.json()
    return None


async def default_success_payload(
    envelope: Any, state: Any, response: ResponseProtocol
) -> Any:
    return await get_json(response)


async def default_failure_payload(
    envelope: Any, state: Any, response: ResponseProtocol
) -> ApiError:
    return ApiError(response.status, response.status_text, await get_json(response))


def _to_descriptor(raw: Any) -> TypeDescriptor:
    if isinstance(raw, TypeDescriptor):
        return raw
    if isinstance(raw, Mapping):
        return TypeDescriptor(
            type=raw["type"], payload=raw.get("payload"), meta=raw.get("meta")
        )
    return TypeDescriptor(type=raw)


def normalize_type_descriptors(
    types: Sequence[Any],
) -> tuple[TypeDescriptor, TypeDescriptor, TypeDescriptor]:
    """
    Normalize a validated ``types`` triple.

    Args:
        types: The request, success and failure descriptors, each either an
            identifier, a mapping, or a TypeDescriptor

    Returns:
        Three TypeDescriptor values with lifecycle defaults filled in
    """
    request_type, success_type, failure_type = (_to_descriptor(t) for t in types)

    if success_type.payload is None:
        success_type = replace(success_type, payload=default_success_payload)
    if failure_type.payload is None:
        failure_type = replace(failure_type, payload=default_failure_payload)

    return request_type, success_type, failure_type


async def build_event(
    descriptor: TypeDescriptor,
    args: tuple[Any, ...],
    *,
    payload: Any = _UNSET,
    error: bool = False,
) -> OutputEvent:
    """
    Build the event for ``descriptor`` by applying its transforms to ``args``.

    Args:
        descriptor: Normalized type descriptor
        args: ``(envelope, state)`` or ``(envelope, state, response)``
        payload: Fixed payload overriding the payload transform, used for
            RequestError events built from the request descriptor
        error: Initial value of the event's error flag

    Returns:
        The event. A transform that raises never propagates: the event gets
        an InternalError payload and its error flag set, and a failing meta
        transform leaves the event without meta.
    """
    event = OutputEvent(type=descriptor.type, error=error)

    if payload is not _UNSET:
        event.payload = payload
    elif descriptor.payload is not None:
        try:
            event.payload = await maybe_await(descriptor.payload(*args))
        except Exception as e:
            logger.warning(f"Payload transform for {descriptor.type!r} failed: {e}")
            event.payload = InternalError(str(e))
            event.error = True

    if descriptor.meta is not None:
        try:
            event.meta = await maybe_await(descriptor.meta(*args))
        except Exception as e:
            logger.warning(f"Meta transform for {descriptor.type!r} failed: {e}")
            event.meta = None
            event.payload = InternalError(str(e))
            event.error = True

    return event


__all__ = [
    "EMPTY_BODY_STATUSES",
    "build_event",
    "default_failure_payload",
    "default_success_payload",
    "get_json",
    "normalize_type_descriptors",
]
