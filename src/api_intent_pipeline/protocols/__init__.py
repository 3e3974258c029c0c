# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for pipeline collaborators.

This module provides Protocol classes that define the interfaces for
pluggable components of the API intent pipeline.

Available protocols:
- CacheProtocol: Interface for the endpoint-keyed cache capability
- TransportProtocol: Interface for the function that performs network calls
- ResponseProtocol: Interface for responses returned by a transport
"""

from .cache import CacheProtocol
from .transport import ResponseProtocol, TransportProtocol

__all__ = [
    "CacheProtocol",
    "ResponseProtocol",
    "TransportProtocol",
]
