# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

This module provides standardized metric names for all observability
in the api-intent-pipeline library. All metric names use the
`api_pipeline_` prefix for Prometheus compatibility.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`
    - Gauges use present-tense descriptive names

Label Best Practices:
    To prevent label cardinality explosion, use only:
    - `outcome` - Terminal state of an intent (enum: success, failure, ...)
    - `kind` - Lifecycle kind of an emitted event (request, success, failure, error)
    - `stage` - Pipeline stage that failed (bailout, endpoint, cache, ...)
    - `method` - HTTP method (GET, POST, ...)

    NEVER use:
    - `endpoint` - Unique per URL (unbounded!)
    - `event_type` - User-defined identifiers (unbounded!)

Usage:
    >>> from api_intent_pipeline.observability.constants import (
    ...     INTENTS_PROCESSED_TOTAL, METRIC_PREFIX
    ... )
    >>> print(INTENTS_PROCESSED_TOTAL)
    'api_pipeline_intents_processed_total'
"""


# =============================================================================
# Global Prefix
# =============================================================================

METRIC_PREFIX = "api_pipeline"
"""Prefix for all Prometheus metrics in this library."""


# =============================================================================
# Pipeline Metrics (pipeline/executor.py)
# =============================================================================

INTENTS_PROCESSED_TOTAL = f"{METRIC_PREFIX}_intents_processed_total"
"""Total values processed, labelled by terminal outcome."""

EVENTS_EMITTED_TOTAL = f"{METRIC_PREFIX}_events_emitted_total"
"""Total events forwarded, labelled by lifecycle kind."""

REQUEST_ERRORS_TOTAL = f"{METRIC_PREFIX}_request_errors_total"
"""Total RequestError events, labelled by the stage that failed."""

IN_FLIGHT_INTENTS = f"{METRIC_PREFIX}_in_flight_intents"
"""Number of intents currently being processed."""

TRANSPORT_DURATION_SECONDS = f"{METRIC_PREFIX}_transport_duration_seconds"
"""Duration of transport calls that produced a response (histogram)."""


# =============================================================================
# Cache Metrics (pipeline/executor.py)
# =============================================================================

CACHE_HITS_TOTAL = f"{METRIC_PREFIX}_cache_hits_total"
"""Total cache probes that short-circuited the network call."""

CACHE_MISSES_TOTAL = f"{METRIC_PREFIX}_cache_misses_total"
"""Total cache probes that fell through to the network call."""

CACHE_WRITE_FAILURES_TOTAL = f"{METRIC_PREFIX}_cache_write_failures_total"
"""Total best-effort cache writes that raised."""


# =============================================================================
# Histogram Buckets
# =============================================================================

LATENCY_BUCKETS: list[float] = [
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
]
"""Default latency buckets for request duration histograms (in seconds)."""


__all__ = [
    # Cache
    "CACHE_HITS_TOTAL",
    "CACHE_MISSES_TOTAL",
    "CACHE_WRITE_FAILURES_TOTAL",
    # Pipeline
    "EVENTS_EMITTED_TOTAL",
    "INTENTS_PROCESSED_TOTAL",
    "IN_FLIGHT_INTENTS",
    # Buckets
    "LATENCY_BUCKETS",
    # Prefix
    "METRIC_PREFIX",
    "REQUEST_ERRORS_TOTAL",
    "TRANSPORT_DURATION_SECONDS",
]
