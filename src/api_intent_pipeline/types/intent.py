# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
# api_intent_pipeline/types/intent.py
"""
Call intent constants.

This module defines the marker key that identifies a call intent inside an
envelope, the keys an intent body may carry, and the accepted values for the
enumerated intent fields.

Constants:
    CALL_API: Marker key; an envelope carrying it is a call intent
    INTENT_KEYS: Frozenset of keys recognised inside an intent body
    HTTP_METHODS: Frozenset of accepted (upper-case) request methods
    CREDENTIALS_POLICIES: Frozenset of accepted credentials policies

Example:
    >>> from api_intent_pipeline import CALL_API
    >>> envelope = {
    ...     CALL_API: {
    ...         "endpoint": "https://api.example.com/users",
    ...         "method": "GET",
    ...         "types": ["USERS_REQUEST", "USERS_SUCCESS", "USERS_FAILURE"],
    ...     }
    ... }
"""

from collections.abc import Mapping
from typing import Any

# Envelopes are plain mappings; the intent body lives under CALL_API
Envelope = Mapping[str, Any]
IntentBody = Mapping[str, Any]

CALL_API = "@@api_intent_pipeline/CALL_API"

INTENT_KEYS = frozenset(
    {
        "endpoint",
        "method",
        "headers",
        "body",
        "credentials",
        "bailout",
        "types",
        "cache",
        "options",
    }
)

HTTP_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})

CREDENTIALS_POLICIES = frozenset({"omit", "same-origin", "include"})


__all__ = [
    "CALL_API",
    "CREDENTIALS_POLICIES",
    "HTTP_METHODS",
    "INTENT_KEYS",
    "Envelope",
    "IntentBody",
]
