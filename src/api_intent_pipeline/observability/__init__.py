# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability and metrics for the API intent pipeline.

Classes:
    UnifiedMetricsCollector: Metrics collector with dict snapshot and Prometheus export.
    MetricDefinition: Schema of a pre-defined metric.

Protocols:
    MetricsCollectorProtocol: Protocol for metrics collection backends.

Functions:
    get_metrics_collector: Get the global metrics collector singleton.
    reset_metrics_collector: Reset the global metrics collector singleton.

Constants:
    All metric name constants from constants module.
"""

from .collector import (
    METRIC_DEFINITIONS,
    MetricDefinition,
    UnifiedMetricsCollector,
    get_metrics_collector,
    reset_metrics_collector,
)
from .constants import (
    # Cache
    CACHE_HITS_TOTAL,
    CACHE_MISSES_TOTAL,
    CACHE_WRITE_FAILURES_TOTAL,
    # Pipeline
    EVENTS_EMITTED_TOTAL,
    IN_FLIGHT_INTENTS,
    INTENTS_PROCESSED_TOTAL,
    # Buckets
    LATENCY_BUCKETS,
    METRIC_PREFIX,
    REQUEST_ERRORS_TOTAL,
    TRANSPORT_DURATION_SECONDS,
)
from .protocols import MetricsCollectorProtocol

__all__ = [
    "CACHE_HITS_TOTAL",
    "CACHE_MISSES_TOTAL",
    "CACHE_WRITE_FAILURES_TOTAL",
    "EVENTS_EMITTED_TOTAL",
    "INTENTS_PROCESSED_TOTAL",
    "IN_FLIGHT_INTENTS",
    "LATENCY_BUCKETS",
    "METRIC_DEFINITIONS",
    "METRIC_PREFIX",
    "REQUEST_ERRORS_TOTAL",
    "TRANSPORT_DURATION_SECONDS",
    "MetricDefinition",
    "MetricsCollectorProtocol",
    "UnifiedMetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
]
