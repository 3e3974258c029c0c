# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Pipeline executor for call intents.

ApiPipeline receives inbound values one at a time through ``process``.
Values that are not call intents are forwarded unchanged. Call intents are
validated, normalized and then taken through a fixed sequence of stages,
each of which may end processing early:

    bail-out -> endpoint -> cache probe -> headers -> options
        -> request event -> transport call -> success / failure event

Every stage failure becomes exactly one RequestError event built from the
request descriptor; nothing raised by user callables, the cache or the
transport escapes ``process``. External state is read fresh at each stage
that needs it.
"""

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from typing_extensions import Self

from ..config import PipelineConfig
from ..exceptions import ConfigurationError, InvalidIntent, RequestError
from ..observability.collector import get_metrics_collector
from ..observability.constants import (
    CACHE_HITS_TOTAL,
    CACHE_MISSES_TOTAL,
    CACHE_WRITE_FAILURES_TOTAL,
    EVENTS_EMITTED_TOTAL,
    IN_FLIGHT_INTENTS,
    INTENTS_PROCESSED_TOTAL,
    REQUEST_ERRORS_TOTAL,
    TRANSPORT_DURATION_SECONDS,
)
from ..observability.protocols import MetricsCollectorProtocol
from ..protocols.cache import CacheProtocol
from ..protocols.transport import TransportProtocol
from ..transports.httpx_transport import HttpxTransport
from ..types.descriptor import TypeDescriptor
from ..types.event import OutputEvent
from ..types.intent import Envelope, IntentBody
from ..types.resolution import (
    Resolvable,
    StateReader,
    as_resolvable,
    maybe_await,
    read_state,
    resolve,
)
from ..types.response import CachedResponse
from .descriptors import build_event, normalize_type_descriptors
from .extractor import extract_intent
from .validation import request_type_for_error, validate_intent

logger = logging.getLogger(__name__)

Forward = Callable[[Any], Any]


class PipelineOutcome(Enum):
    """Terminal state reached by one call to ``process``.

    - PASSTHROUGH: not an intent, forwarded unchanged
    - DROPPED: invalid intent without a usable request type, nothing emitted
    - INVALID: invalid intent, one InvalidIntent event emitted
    - BAILED_OUT: bail-out condition held, nothing emitted
    - REQUEST_ERROR: a local stage failed, one RequestError event emitted
    - CACHE_HIT: request event then success event built from the cache
    - SUCCESS: request event then success event built from the response
    - FAILURE: request event then failure event for a non-ok response
    """

    PASSTHROUGH = "passthrough"
    DROPPED = "dropped"
    INVALID = "invalid"
    BAILED_OUT = "bailed_out"
    REQUEST_ERROR = "request_error"
    CACHE_HIT = "cache_hit"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class ProcessResult:
    """
    What one call to ``process`` did.

    Attributes:
        outcome: Terminal state reached
        events: Events forwarded, in order
        forwarded: Return value of the last forwarding call, if any
    """

    outcome: PipelineOutcome
    events: list[OutputEvent] = field(default_factory=list)
    forwarded: Any = None


@dataclass(frozen=True)
class ParsedIntent:
    """A validated intent with its fields wrapped for resolution."""

    endpoint: Resolvable[str]
    method: str
    request_type: TypeDescriptor
    success_type: TypeDescriptor
    failure_type: TypeDescriptor
    body: Any = None
    credentials: str | None = None
    headers: Resolvable[Mapping[str, str]] | None = None
    options: Resolvable[Mapping[str, Any]] | None = None
    bailout: Resolvable[Any] | None = None
    cache: CacheProtocol | None = None

    @classmethod
    def from_intent(cls, intent: IntentBody) -> "ParsedIntent":
        request_type, success_type, failure_type = normalize_type_descriptors(
            intent["types"]
        )

        def optional(name: str) -> Resolvable[Any] | None:
            value = intent.get(name)
            return None if value is None else as_resolvable(value)

        return cls(
            endpoint=as_resolvable(intent["endpoint"]),
            method=intent["method"].upper(),
            request_type=request_type,
            success_type=success_type,
            failure_type=failure_type,
            body=intent.get("body"),
            credentials=intent.get("credentials"),
            headers=optional("headers"),
            options=optional("options"),
            bailout=optional("bailout"),
            cache=intent.get("cache"),
        )


class _StageError(Exception):
    """Internal signal carrying the RequestError message of a failed stage."""

    def __init__(self, stage: str, message: str):
        super().__init__(message)
        self.stage = stage
        self.message = message


def _cause(e: BaseException) -> str:
    return str(e) or type(e).__name__


class ApiPipeline:
    """
    Processes inbound values and forwards the resulting events.

    The pipeline holds no per-intent state, so one instance may process any
    number of intents concurrently. Events of one intent are forwarded in
    order (the request event always precedes its terminal event); no
    ordering is imposed between different intents.

    Args:
        get_state: Zero-argument reader of the external state, sync or
            async. Called any number of times per intent.
        forward: Receives every non-intent value and every emitted event.
            May be sync or async; its return value is kept in the result.
        transport: Performs the network call. Defaults to an HttpxTransport
            owned (and closed) by the pipeline.
        config: Pipeline configuration.
        metrics_collector: Optional collector; when omitted and
            ``config.metrics_enabled`` is set, the global collector is used.
        owns_transport: Whether ``aclose`` closes the transport. Defaults to
            True only when the pipeline creates the transport itself.

    Example:
        >>> async with ApiPipeline(get_state=store.get_state, forward=store.dispatch) as pipeline:
        ...     result = await pipeline.process({CALL_API: {...}})
    """

    def __init__(
        self,
        get_state: StateReader,
        forward: Forward,
        transport: TransportProtocol | None = None,
        config: PipelineConfig | None = None,
        metrics_collector: MetricsCollectorProtocol | None = None,
        *,
        owns_transport: bool | None = None,
    ) -> None:
        if not callable(get_state):
            raise ConfigurationError("get_state must be callable")
        if not callable(forward):
            raise ConfigurationError("forward must be callable")
        if transport is not None and not callable(transport):
            raise ConfigurationError("transport must be callable")

        self.config = config or PipelineConfig()
        self._get_state = get_state
        self._forward = forward

        self._owns_transport = (
            transport is None if owns_transport is None else owns_transport
        )
        self.transport: TransportProtocol = (
            transport if transport is not None else HttpxTransport()
        )

        if metrics_collector is None and self.config.metrics_enabled:
            metrics_collector = get_metrics_collector()
        self._metrics = metrics_collector

        logger.info(
            f"Initialized {self.__class__.__name__} "
            f"(transport={type(self.transport).__name__}, "
            f"metrics={'on' if self._metrics else 'off'})"
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def process(self, value: Any) -> ProcessResult:
        """
        Process one inbound value.

        Returns:
            ProcessResult describing the terminal state and the events
            forwarded. Only exceptions raised by ``forward`` itself (and
            cancellation) propagate.
        """
        found, intent = extract_intent(value, self.config.call_api_key)
        if not found:
            forwarded = await maybe_await(self._forward(value))
            result = ProcessResult(PipelineOutcome.PASSTHROUGH, forwarded=forwarded)
            self._record_outcome(result)
            return result

        self._gauge(1.0)
        try:
            result = await self._process_intent(value, intent)
        finally:
            self._gauge(-1.0)
        self._record_outcome(result)
        return result

    async def _process_intent(
        self, envelope: Envelope, intent: Any
    ) -> ProcessResult:
        errors = validate_intent(intent, self.config)
        if errors:
            return await self._reject(intent, errors)

        parsed = ParsedIntent.from_intent(intent)
        result = ProcessResult(PipelineOutcome.REQUEST_ERROR)

        try:
            if await self._should_bail_out(parsed):
                logger.debug(f"Bailing out of {parsed.request_type.type!r}")
                result.outcome = PipelineOutcome.BAILED_OUT
                return result

            endpoint = await self._resolve_endpoint(parsed)

            if parsed.cache is not None:
                hit, cached = await self._probe_cache(parsed.cache, endpoint)
                if hit:
                    await self._emit_request(result, parsed, envelope)
                    result.outcome = PipelineOutcome.CACHE_HIT
                    await self._emit_success(
                        result, parsed, envelope, endpoint, CachedResponse(cached),
                        write_cache=False,
                    )
                    return result

            headers = await self._resolve_headers(parsed)
            options = await self._resolve_options(parsed)

            await self._emit_request(result, parsed, envelope)
            response, ok = await self._call_transport(parsed, endpoint, headers, options)
        except _StageError as e:
            await self._emit_request_error(result, parsed, envelope, e)
            return result

        if ok:
            result.outcome = PipelineOutcome.SUCCESS
            await self._emit_success(
                result, parsed, envelope, endpoint, response,
                write_cache=parsed.cache is not None,
            )
        else:
            result.outcome = PipelineOutcome.FAILURE
            await self._emit_failure(result, parsed, envelope, response)
        return result

    # ------------------------------------------------------------------
    # Validation failure
    # ------------------------------------------------------------------

    async def _reject(self, intent: Any, errors: list[str]) -> ProcessResult:
        event_type = request_type_for_error(intent)
        if event_type is None:
            logger.warning(
                f"Dropping invalid call intent without a usable request type: {errors}"
            )
            return ProcessResult(PipelineOutcome.DROPPED)

        logger.warning(f"Invalid call intent {event_type!r}: {errors}")
        result = ProcessResult(PipelineOutcome.INVALID)
        event = OutputEvent(type=event_type, payload=InvalidIntent(errors), error=True)
        await self._emit(result, event, "error")
        return result

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _should_bail_out(self, parsed: ParsedIntent) -> bool:
        if parsed.bailout is None:
            return False
        try:
            return bool(await resolve(parsed.bailout, self._get_state))
        except Exception as e:
            raise _StageError(
                "bailout", f"[CALL_API].bailout function failed: {_cause(e)}"
            ) from e

    async def _resolve_endpoint(self, parsed: ParsedIntent) -> str:
        try:
            endpoint = await resolve(parsed.endpoint, self._get_state)
            if not isinstance(endpoint, str):
                raise TypeError(
                    f"expected a string, got {type(endpoint).__name__}"
                )
            return endpoint
        except Exception as e:
            raise _StageError(
                "endpoint", f"[CALL_API].endpoint function failed: {_cause(e)}"
            ) from e

    async def _probe_cache(self, cache: CacheProtocol, endpoint: str) -> tuple[bool, Any]:
        try:
            hit = bool(await maybe_await(cache.has(endpoint)))
            cached = await maybe_await(cache.get(endpoint)) if hit else None
        except Exception as e:
            raise _StageError(
                "cache", f"[CALL_API].cache API function failed: {_cause(e)}"
            ) from e

        if self._metrics:
            self._metrics.inc_counter(CACHE_HITS_TOTAL if hit else CACHE_MISSES_TOTAL)
        logger.debug(f"Cache {'hit' if hit else 'miss'} for {endpoint}")
        return hit, cached

    async def _resolve_headers(self, parsed: ParsedIntent) -> Mapping[str, str] | None:
        if parsed.headers is None:
            return None
        try:
            headers = await resolve(parsed.headers, self._get_state)
            if headers is not None and not isinstance(headers, Mapping):
                raise TypeError(f"expected a mapping, got {type(headers).__name__}")
            return headers
        except Exception as e:
            raise _StageError(
                "headers", f"[CALL_API].headers function failed: {_cause(e)}"
            ) from e

    async def _resolve_options(self, parsed: ParsedIntent) -> Mapping[str, Any]:
        if parsed.options is None:
            return {}
        try:
            options = await resolve(parsed.options, self._get_state)
            if options is None:
                return {}
            if not isinstance(options, Mapping):
                raise TypeError(f"expected a mapping, got {type(options).__name__}")
            return options
        except Exception as e:
            raise _StageError(
                "options", f"[CALL_API].options function failed: {_cause(e)}"
            ) from e

    async def _call_transport(
        self,
        parsed: ParsedIntent,
        endpoint: str,
        headers: Mapping[str, str] | None,
        options: Mapping[str, Any],
    ) -> tuple[Any, bool]:
        init: dict[str, Any] = {
            **options,
            "method": parsed.method,
            "body": parsed.body,
            "credentials": parsed.credentials,
            "headers": dict(headers) if headers else {},
        }
        started = time.monotonic()
        try:
            response = await maybe_await(self.transport(endpoint, **init))
            ok = bool(response.ok)
        except Exception as e:
            raise _StageError("transport", _cause(e)) from e

        if self._metrics:
            self._metrics.observe_histogram(
                TRANSPORT_DURATION_SECONDS,
                time.monotonic() - started,
                labels={"method": parsed.method},
            )
        return response, ok

    async def _write_cache(self, cache: CacheProtocol, endpoint: str, payload: Any) -> None:
        try:
            await maybe_await(cache.set(endpoint, payload))
        except Exception as e:
            logger.warning(f"Cache write for {endpoint} failed: {_cause(e)}")
            if self._metrics:
                self._metrics.inc_counter(CACHE_WRITE_FAILURES_TOTAL)

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    async def _state(self, stage: str) -> Any:
        try:
            return await read_state(self._get_state)
        except Exception as e:
            raise _StageError(stage, f"Reading external state failed: {_cause(e)}") from e

    async def _emit(self, result: ProcessResult, event: OutputEvent, kind: str) -> None:
        result.events.append(event)
        result.forwarded = await maybe_await(self._forward(event))
        if self._metrics:
            self._metrics.inc_counter(EVENTS_EMITTED_TOTAL, labels={"kind": kind})

    async def _emit_request(
        self, result: ProcessResult, parsed: ParsedIntent, envelope: Envelope
    ) -> None:
        state = await self._state("request")
        event = await build_event(parsed.request_type, (envelope, state))
        await self._emit(result, event, "request")

    async def _emit_success(
        self,
        result: ProcessResult,
        parsed: ParsedIntent,
        envelope: Envelope,
        endpoint: str,
        response: Any,
        write_cache: bool,
    ) -> None:
        try:
            state = await self._state("response")
        except _StageError as e:
            await self._emit_request_error(result, parsed, envelope, e)
            return
        event = await build_event(parsed.success_type, (envelope, state, response))
        await self._emit(result, event, "success")
        # Emission never waits on the cache write
        if (
            write_cache
            and parsed.cache is not None
            and self.config.cache_writes_enabled
            and not event.error
        ):
            await self._write_cache(parsed.cache, endpoint, event.payload)

    async def _emit_failure(
        self,
        result: ProcessResult,
        parsed: ParsedIntent,
        envelope: Envelope,
        response: Any,
    ) -> None:
        try:
            state = await self._state("response")
        except _StageError as e:
            await self._emit_request_error(result, parsed, envelope, e)
            return
        event = await build_event(parsed.failure_type, (envelope, state, response))
        event.error = True
        await self._emit(result, event, "failure")

    async def _emit_request_error(
        self,
        result: ProcessResult,
        parsed: ParsedIntent,
        envelope: Envelope,
        error: _StageError,
    ) -> None:
        logger.warning(
            f"Call intent {parsed.request_type.type!r} failed at {error.stage}: "
            f"{error.message}"
        )
        try:
            state = await read_state(self._get_state)
        except Exception as e:
            logger.warning(f"Reading external state for error event failed: {_cause(e)}")
            state = None

        event = await build_event(
            parsed.request_type,
            (envelope, state),
            payload=RequestError(error.message),
            error=True,
        )
        result.outcome = PipelineOutcome.REQUEST_ERROR
        if self._metrics:
            self._metrics.inc_counter(REQUEST_ERRORS_TOTAL, labels={"stage": error.stage})
        await self._emit(result, event, "error")

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def _gauge(self, delta: float) -> None:
        if not self._metrics:
            return
        if delta > 0:
            self._metrics.inc_gauge(IN_FLIGHT_INTENTS, delta)
        else:
            self._metrics.dec_gauge(IN_FLIGHT_INTENTS, -delta)

    def _record_outcome(self, result: ProcessResult) -> None:
        if self._metrics:
            self._metrics.inc_counter(
                INTENTS_PROCESSED_TOTAL, labels={"outcome": result.outcome.value}
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the transport if the pipeline created it."""
        if self._owns_transport:
            aclose = getattr(self.transport, "aclose", None)
            if aclose is not None:
                await aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def create_pipeline(
    get_state: StateReader,
    forward: Forward,
    transport: TransportProtocol | None = None,
    config: PipelineConfig | None = None,
    metrics_collector: MetricsCollectorProtocol | None = None,
    **overrides: Any,
) -> ApiPipeline:
    """
    Factory function to create an ApiPipeline.

    Args:
        get_state: Reader of the external state
        forward: Receiver of forwarded values and emitted events
        transport: Optional transport (defaults to HttpxTransport)
        config: Optional pipeline config (default config if not provided)
        metrics_collector: Optional metrics collector
        **overrides: PipelineConfig fields to override, e.g.
            ``strict_keys=False``

    Returns:
        Configured ApiPipeline instance

    Raises:
        ConfigurationError: If an override names an unknown field or has an
            invalid value
    """
    config = config or PipelineConfig()
    if overrides:
        try:
            config = PipelineConfig(**{**config.__dict__, **overrides})
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid pipeline configuration: {e}") from e

    return ApiPipeline(
        get_state=get_state,
        forward=forward,
        transport=transport,
        config=config,
        metrics_collector=metrics_collector,
    )


__all__ = [
    "ApiPipeline",
    "Forward",
    "ParsedIntent",
    "PipelineOutcome",
    "ProcessResult",
    "create_pipeline",
]
