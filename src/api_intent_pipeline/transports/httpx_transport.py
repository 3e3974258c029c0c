# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Default transport backed by httpx.

HttpxTransport performs the network call for pipelines that are not given
a transport of their own. It maps the transport arguments onto
``httpx.AsyncClient.request``:

* mapping and list bodies are sent as JSON, ``str``/``bytes`` as raw content
* ``credentials="omit"`` strips Authorization and Cookie headers
* ``params``, ``timeout``, ``follow_redirects``, ``auth`` and ``extensions``
  options are passed through; other options are ignored

Transport-level failures surface as ``httpx.HTTPError`` (connection errors,
timeouts, invalid URLs). Non-2xx responses are returned normally.
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from typing_extensions import Self

from ..config import TransportConfig

logger = logging.getLogger(__name__)

PASSTHROUGH_OPTIONS = frozenset(
    {"params", "timeout", "follow_redirects", "auth", "extensions"}
)

_OMITTED_CREDENTIAL_HEADERS = frozenset({"authorization", "cookie"})


class HttpxResponse:
    """Adapter exposing an ``httpx.Response`` through ResponseProtocol."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def ok(self) -> bool:
        return self._response.is_success

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def status_text(self) -> str:
        return self._response.reason_phrase

    @property
    def headers(self) -> Mapping[str, str]:
        return self._response.headers

    @property
    def raw(self) -> httpx.Response:
        """The wrapped httpx response."""
        return self._response

    async def json(self) -> Any:
        await self._response.aread()
        return self._response.json()

    async def text(self) -> str:
        await self._response.aread()
        return self._response.text

    def __repr__(self) -> str:
        return f"HttpxResponse(status={self.status}, ok={self.ok})"


class HttpxTransport:
    """
    Transport performing requests with a shared ``httpx.AsyncClient``.

    A client passed in by the caller is used as-is and never closed by the
    transport. Without one, the transport lazily creates a client from its
    TransportConfig and closes it in ``aclose()``.

    Example:
        >>> async with HttpxTransport(TransportConfig(base_url="https://api.example.com")) as t:
        ...     response = await t("/users", method="GET")
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or TransportConfig()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        """The underlying client, created on first use when not injected."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                follow_redirects=self.config.follow_redirects,
                headers=self.config.default_headers,
            )
            logger.info(
                f"Created httpx client (base_url={self.config.base_url!r}, "
                f"timeout={self.config.timeout})"
            )
        return self._client

    async def __call__(
        self,
        url: str,
        *,
        method: str,
        body: Any = None,
        credentials: str | None = None,
        headers: Mapping[str, str] | None = None,
        **options: Any,
    ) -> HttpxResponse:
        request_headers = dict(headers or {})
        if credentials == "omit":
            request_headers = {
                k: v
                for k, v in request_headers.items()
                if k.lower() not in _OMITTED_CREDENTIAL_HEADERS
            }

        kwargs: dict[str, Any] = {"headers": request_headers}
        if isinstance(body, (str, bytes, bytearray)):
            kwargs["content"] = body
        elif body is not None:
            kwargs["json"] = body

        for name, value in options.items():
            if name in PASSTHROUGH_OPTIONS:
                kwargs[name] = value
            else:
                logger.debug(f"Ignoring unsupported transport option {name!r}")

        response = await self.client.request(method, url, **kwargs)
        logger.debug(f"{method} {url} -> {response.status_code}")
        return HttpxResponse(response)

    async def aclose(self) -> None:
        """Close the client if this transport created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Closed httpx client")

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


__all__ = ["PASSTHROUGH_OPTIONS", "HttpxResponse", "HttpxTransport"]
