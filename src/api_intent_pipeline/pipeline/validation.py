# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Structural validation of call intents.

Every check runs regardless of earlier failures so that a caller sees all
defects of an intent at once. The defect strings are meant for humans and
are reported in a stable order: body shape, unknown keys, then one group
per field in the order endpoint, method, headers, options, credentials,
bailout, cache, types.
"""

from collections.abc import Mapping
from typing import Any

from ..config import PipelineConfig
from ..types.descriptor import (
    DESCRIPTOR_KEYS,
    Identifier,
    TypeDescriptor,
    is_identifier,
)
from ..types.intent import INTENT_KEYS

_STAGES = ("request", "success", "failure")
_CACHE_METHODS = ("has", "get", "set")


def _descriptor_defect(descriptor: Any) -> str | None:
    """Return why ``descriptor`` is unusable, or None if it is valid."""
    if is_identifier(descriptor):
        return None

    if isinstance(descriptor, TypeDescriptor):
        fields: Mapping[str, Any] = {
            "type": descriptor.type,
            "payload": descriptor.payload,
            "meta": descriptor.meta,
        }
    elif isinstance(descriptor, Mapping):
        unknown = sorted(str(k) for k in descriptor if k not in DESCRIPTOR_KEYS)
        if unknown:
            return f"unknown keys {', '.join(unknown)}"
        fields = descriptor
    else:
        return "must be an identifier or a descriptor mapping"

    if "type" not in fields:
        return "missing type"
    if not is_identifier(fields["type"]):
        return "type must be a string or an enum member"
    for name in ("payload", "meta"):
        transform = fields.get(name)
        if transform is not None and not callable(transform):
            return f"{name} must be callable"
    return None


def _validate_types(types: Any) -> list[str]:
    if types is None:
        return ["[CALL_API] must have a types property"]
    if not isinstance(types, (list, tuple)) or len(types) != 3:
        return ["[CALL_API].types property must be a list or tuple of length 3"]

    errors = []
    for stage, descriptor in zip(_STAGES, types):
        reason = _descriptor_defect(descriptor)
        if reason is not None:
            errors.append(f"Invalid {stage} type: {reason}")
    return errors


def validate_intent(intent: Any, config: PipelineConfig | None = None) -> list[str]:
    """
    Validate an extracted intent body.

    Args:
        intent: The value found under the marker key of an envelope
        config: Pipeline configuration (accepted methods, credentials
            policies and key strictness)

    Returns:
        Every defect found, in a stable order. An empty list means the
        intent is valid.
    """
    config = config or PipelineConfig()

    if not isinstance(intent, Mapping):
        return ["[CALL_API] property must be a mapping"]

    errors: list[str] = []

    if config.strict_keys:
        for key in intent:
            if key not in INTENT_KEYS:
                errors.append(f"Invalid [CALL_API] key: {key}")

    endpoint = intent.get("endpoint")
    if endpoint is None:
        errors.append("[CALL_API] must have an endpoint property")
    elif not isinstance(endpoint, str) and not callable(endpoint):
        errors.append("[CALL_API].endpoint property must be a string or a callable")

    method = intent.get("method")
    if method is None:
        errors.append("[CALL_API] must have a method property")
    elif not isinstance(method, str):
        errors.append("[CALL_API].method property must be a string")
    elif method.upper() not in config.valid_methods:
        errors.append(f"Invalid [CALL_API].method: {method.upper()}")

    for name in ("headers", "options"):
        value = intent.get(name)
        if value is not None and not isinstance(value, Mapping) and not callable(value):
            errors.append(
                f"[CALL_API].{name} property must be None, a mapping, or a callable"
            )

    credentials = intent.get("credentials")
    if credentials is not None:
        if not isinstance(credentials, str):
            errors.append("[CALL_API].credentials property must be None or a string")
        elif credentials not in config.valid_credentials:
            errors.append(f"Invalid [CALL_API].credentials: {credentials}")

    bailout = intent.get("bailout")
    if bailout is not None and not isinstance(bailout, bool) and not callable(bailout):
        errors.append(
            "[CALL_API].bailout property must be None, a boolean, or a callable"
        )

    cache = intent.get("cache")
    if cache is not None:
        missing = [m for m in _CACHE_METHODS if not callable(getattr(cache, m, None))]
        if missing:
            errors.append(
                f"[CALL_API].cache must expose callable {', '.join(missing)}"
            )

    errors.extend(_validate_types(intent.get("types")))
    return errors


def request_type_for_error(intent: Any) -> Identifier | None:
    """
    Identifier to report validation errors under.

    Returns the identifier of the first type descriptor, unwrapping a
    descriptor record, or None when no usable identifier exists. In the
    latter case the intent is dropped without any event.
    """
    if not isinstance(intent, Mapping):
        return None
    types = intent.get("types")
    if not isinstance(types, (list, tuple)) or not types:
        return None

    first = types[0]
    if isinstance(first, TypeDescriptor):
        first = first.type
    elif isinstance(first, Mapping):
        first = first.get("type")
    return first if is_identifier(first) else None


__all__ = ["request_type_for_error", "validate_intent"]
