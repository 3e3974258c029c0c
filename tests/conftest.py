# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Shared fixtures for the pipeline test suite.

The fakes here stand in for the pipeline's collaborators: the forwarding
function, the external state reader, the transport and the cache. Each one
records how it was called so tests can assert on ordering and arguments.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import pytest

from api_intent_pipeline.types.intent import CALL_API


class Recorder:
    """Forward target collecting everything it receives."""

    def __init__(self) -> None:
        self.received: list[Any] = []

    def __call__(self, value: Any) -> str:
        self.received.append(value)
        return f"forwarded-{len(self.received)}"


class StateStore:
    """Mutable external state with a call counter on the reader."""

    def __init__(self, state: Any = None) -> None:
        self.state = state if state is not None else {}
        self.reads = 0

    def get_state(self) -> Any:
        self.reads += 1
        return self.state


@dataclass
class FakeResponse:
    """Minimal ResponseProtocol implementation."""

    status: int = 200
    body: Any = None
    status_text: str = "OK"
    headers: dict[str, str] = field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def json(self) -> Any:
        return self.body

    async def text(self) -> str:
        return json.dumps(self.body)


class FakeTransport:
    """Transport returning a canned response or raising a canned error."""

    def __init__(
        self,
        response: FakeResponse | None = None,
        error: BaseException | None = None,
        on_call: Any = None,
    ) -> None:
        self.response = response or FakeResponse(body={"a": 1})
        self.error = error
        self.on_call = on_call
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, url: str, **init: Any) -> FakeResponse:
        self.calls.append((url, init))
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.response


class DictCache:
    """Synchronous cache capability logging every operation."""

    def __init__(self, entries: dict[str, Any] | None = None) -> None:
        self.entries = dict(entries or {})
        self.log: list[tuple[str, ...]] = []

    def has(self, key: str) -> bool:
        self.log.append(("has", key))
        return key in self.entries

    def get(self, key: str) -> Any:
        self.log.append(("get", key))
        return self.entries[key]

    def set(self, key: str, value: Any) -> None:
        self.log.append(("set", key))
        self.entries[key] = value


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def store() -> StateStore:
    return StateStore({"token": "abc", "user": {"id": 7}})


@pytest.fixture
def make_response():
    def _make(status: int = 200, body: Any = None, **kwargs: Any) -> FakeResponse:
        return FakeResponse(status=status, body=body, **kwargs)

    return _make


@pytest.fixture
def make_transport():
    def _make(**kwargs: Any) -> FakeTransport:
        return FakeTransport(**kwargs)

    return _make


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_cache():
    def _make(entries: dict[str, Any] | None = None) -> DictCache:
        return DictCache(entries)

    return _make


@pytest.fixture
def make_intent():
    """Build an envelope around an intent body with sensible defaults."""

    def _make(**fields: Any) -> dict[str, Any]:
        body: dict[str, Any] = {
            "endpoint": "/x",
            "method": "GET",
            "types": ["REQ", "OK", "FAIL"],
        }
        body.update(fields)
        return {CALL_API: body}

    return _make
