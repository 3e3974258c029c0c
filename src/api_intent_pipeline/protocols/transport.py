# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocols for the HTTP transport and its responses."""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ResponseProtocol(Protocol):
    """
    Response returned by a transport.

    ``ok`` distinguishes success from an HTTP-level failure status. Body
    decoding is lazy: the accessors are only awaited by the descriptor
    transforms that need them.
    """

    @property
    def ok(self) -> bool:
        """True for a 2xx status."""
        ...

    @property
    def status(self) -> int:
        """HTTP status code."""
        ...

    @property
    def status_text(self) -> str:
        """Reason phrase."""
        ...

    @property
    def headers(self) -> Mapping[str, str]:
        """Response headers."""
        ...

    async def json(self) -> Any:
        """Decode the body as JSON."""
        ...

    async def text(self) -> str:
        """Decode the body as text."""
        ...


@runtime_checkable
class TransportProtocol(Protocol):
    """
    Protocol for the function that performs the network call.

    Any exception raised by the transport (malformed request, connection
    failure, timeout) is treated as a transport-level failure. A response
    with a non-ok status is a successful transport call.
    """

    async def __call__(
        self,
        url: str,
        *,
        method: str,
        body: Any = None,
        credentials: str | None = None,
        headers: Mapping[str, str] | None = None,
        **options: Any,
    ) -> ResponseProtocol:
        """Perform the request and return the response."""
        ...
