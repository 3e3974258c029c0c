# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Synthetic response used for cache hits."""

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class CachedResponse:
    """
    An ok response wrapping a cached value.

    On a cache hit the success descriptor's transform receives one of these
    in place of a live transport response: status 200, a JSON content type,
    and the cached value as the decoded body. Transforms that inspect
    transport-specific details of the response cannot tell a cache hit from
    a live call that returned the same body.

    Attributes:
        body: The cached value
        status: Always 200
        status_text: Always "OK"
        headers: A single JSON Content-Type header
    """

    body: Any
    status: int = 200
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


__all__ = ["CachedResponse"]
