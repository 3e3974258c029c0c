# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Call intent pipeline.

Extractor -> validator -> descriptor normalizer -> executor. The executor
is the entry point; the other modules are exposed for reuse and testing.
"""

from .descriptors import (
    EMPTY_BODY_STATUSES,
    build_event,
    default_failure_payload,
    default_success_payload,
    get_json,
    normalize_type_descriptors,
)
from .executor import (
    ApiPipeline,
    Forward,
    ParsedIntent,
    PipelineOutcome,
    ProcessResult,
    create_pipeline,
)
from .extractor import extract_intent, is_intent
from .middleware import Handler, api_middleware
from .validation import request_type_for_error, validate_intent

__all__ = [
    "EMPTY_BODY_STATUSES",
    "ApiPipeline",
    "Forward",
    "Handler",
    "ParsedIntent",
    "PipelineOutcome",
    "ProcessResult",
    "api_middleware",
    "build_event",
    "create_pipeline",
    "default_failure_payload",
    "default_success_payload",
    "extract_intent",
    "get_json",
    "is_intent",
    "normalize_type_descriptors",
    "request_type_for_error",
    "validate_intent",
]
