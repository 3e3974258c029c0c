# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Type definitions and constants."""

from .descriptor import (
    DESCRIPTOR_KEYS,
    Identifier,
    Transform,
    TypeDescriptor,
    is_identifier,
)
from .event import OutputEvent
from .intent import (
    CALL_API,
    CREDENTIALS_POLICIES,
    HTTP_METHODS,
    INTENT_KEYS,
    Envelope,
    IntentBody,
)
from .resolution import (
    Dynamic,
    Resolvable,
    StateReader,
    Static,
    as_resolvable,
    maybe_await,
    read_state,
    resolve,
)
from .response import CachedResponse

__all__ = [
    # Intent constants
    "CALL_API",
    "CREDENTIALS_POLICIES",
    # Descriptors
    "DESCRIPTOR_KEYS",
    "HTTP_METHODS",
    "INTENT_KEYS",
    # Responses
    "CachedResponse",
    # Resolution
    "Dynamic",
    "Envelope",
    "Identifier",
    "IntentBody",
    # Events
    "OutputEvent",
    "Resolvable",
    "StateReader",
    "Static",
    "Transform",
    "TypeDescriptor",
    "as_resolvable",
    "is_identifier",
    "maybe_await",
    "read_state",
    "resolve",
]
