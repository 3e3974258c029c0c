# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Recognition of call intents among arbitrary inbound values."""

from collections.abc import Mapping
from typing import Any

from ..types.intent import CALL_API


def is_intent(value: Any, key: str = CALL_API) -> bool:
    """Return True if ``value`` is a mapping carrying the marker ``key``."""
    try:
        return isinstance(value, Mapping) and key in value
    except Exception:
        # Mappings with a broken __contains__ are not intents
        return False


def extract_intent(value: Any, key: str = CALL_API) -> tuple[bool, Any]:
    """
    Split an inbound value into (is_intent, intent_body).

    The body is returned as-is, without any validation; it is None for
    values that are not intents.
    """
    if not is_intent(value, key):
        return False, None
    try:
        return True, value[key]
    except Exception:
        # Mappings that claim the key but cannot produce it are not intents
        return False, None


__all__ = ["extract_intent", "is_intent"]
