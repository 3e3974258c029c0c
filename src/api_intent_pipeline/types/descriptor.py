# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Type descriptor types.

A type descriptor names the output event emitted for one lifecycle stage of
a call (request, success, failure) and optionally carries transforms that
compute the event's payload and meta.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

# Event type identifiers are strings or enum members (symbol-like)
Identifier = Union[str, Enum]

# Signature: (envelope, state) for request events,
# (envelope, state, response) for success and failure events.
# May return an awaitable.
Transform = Callable[..., Any]

DESCRIPTOR_KEYS = frozenset({"type", "payload", "meta"})


def is_identifier(value: Any) -> bool:
    """Return True if ``value`` can name an output event."""
    return isinstance(value, (str, Enum))


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Normalized type descriptor.

    Attributes:
        type: Identifier used as the ``type`` of the emitted event
        payload: Transform producing the event payload, or None for the
            lifecycle default
        meta: Transform producing the event meta, or None for no meta
    """

    type: Identifier
    payload: Transform | None = None
    meta: Transform | None = None


__all__ = [
    "DESCRIPTOR_KEYS",
    "Identifier",
    "Transform",
    "TypeDescriptor",
    "is_identifier",
]
