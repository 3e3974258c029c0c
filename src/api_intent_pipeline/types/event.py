# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Output event emitted by the pipeline."""

from dataclasses import dataclass
from typing import Any

from .descriptor import Identifier


@dataclass
class OutputEvent:
    """
    One lifecycle event of a call.

    Attributes:
        type: Identifier taken from the type descriptor that built the event
        payload: Event payload. For error events this is one of the error
            payload kinds, or whatever the failure transform produced
        meta: Optional metadata computed by the descriptor's meta transform
        error: True for failure-class events
    """

    type: Identifier
    payload: Any = None
    meta: Any = None
    error: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to the plain ``{type, payload, meta?, error?}`` record."""
        record: dict[str, Any] = {"type": self.type, "payload": self.payload}
        if self.meta is not None:
            record["meta"] = self.meta
        if self.error:
            record["error"] = True
        return record


__all__ = ["OutputEvent"]
