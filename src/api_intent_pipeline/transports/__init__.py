# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Transport implementations.

Available transports:
- HttpxTransport: Default transport over httpx.AsyncClient
- HttpxResponse: ResponseProtocol adapter for httpx responses
"""

from .httpx_transport import PASSTHROUGH_OPTIONS, HttpxResponse, HttpxTransport

__all__ = [
    "PASSTHROUGH_OPTIONS",
    "HttpxResponse",
    "HttpxTransport",
]
