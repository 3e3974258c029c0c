# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Middleware adapter for dispatch chains.

Dispatch systems built around a chain of handlers expect a middleware of
the shape ``get_state -> forward -> handler``. ``api_middleware`` produces
such a function on top of ApiPipeline: every handler it builds shares one
transport, configuration and metrics collector.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from ..config import PipelineConfig
from ..observability.protocols import MetricsCollectorProtocol
from ..protocols.transport import TransportProtocol
from ..transports.httpx_transport import HttpxTransport
from ..types.resolution import StateReader
from .executor import ApiPipeline, Forward, ProcessResult

Handler = Callable[[Any], Awaitable[ProcessResult]]


def api_middleware(
    get_state: StateReader,
    *,
    transport: TransportProtocol | None = None,
    config: PipelineConfig | None = None,
    metrics_collector: MetricsCollectorProtocol | None = None,
) -> Callable[[Forward], Handler]:
    """
    Build a middleware from a state reader.

    Args:
        get_state: Reader of the external state
        transport: Transport shared by every handler. When omitted, a new
            HttpxTransport is created and owned by every bound pipeline:
            ``await handler.__self__.aclose()`` on any of them closes its
            client, which is recreated on next use.
        config: Pipeline configuration
        metrics_collector: Optional metrics collector

    Returns:
        A function taking the next ``forward`` in the chain and returning the
        coroutine handler ``value -> ProcessResult``.

    Example:
        >>> handler = api_middleware(store.get_state)(store.dispatch)
        >>> await handler({CALL_API: {...}})
    """
    owns_transport = transport is None
    shared_transport = transport if transport is not None else HttpxTransport()

    def bind(forward: Forward) -> Handler:
        pipeline = ApiPipeline(
            get_state=get_state,
            forward=forward,
            transport=shared_transport,
            config=config,
            metrics_collector=metrics_collector,
            owns_transport=owns_transport,
        )
        return pipeline.process

    return bind


__all__ = ["Handler", "api_middleware"]
