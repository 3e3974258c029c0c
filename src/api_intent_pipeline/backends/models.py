# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Cache entry model shared by the cache backends.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, Field, model_validator


class CacheEntry(BaseModel):
    """
    A cached payload with its storage and expiry times.

    Validated with Pydantic so entries read back from an external store
    are rejected when malformed.
    """

    key: str
    value: Any = None
    stored_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime | None = None

    @model_validator(mode="after")
    def _validate_expiration(self) -> "CacheEntry":
        """Validate that expires_at is after stored_at."""
        if self.expires_at and self.expires_at <= self.stored_at:
            raise ValueError("expires_at must be after stored_at")
        return self

    @classmethod
    def create(cls, key: str, value: Any, ttl: float | None = None) -> "CacheEntry":
        """Create an entry expiring ``ttl`` seconds from now (never if None)."""
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(seconds=ttl) if ttl is not None else None
        return cls(key=key, value=value, stored_at=now, expires_at=expires_at)

    @property
    def is_expired(self) -> bool:
        """Check if entry has expired."""
        return (
            self.expires_at is not None
            and datetime.now(timezone.utc) >= self.expires_at
        )

    @property
    def age_seconds(self) -> float:
        """Get age of entry in seconds."""
        return (datetime.now(timezone.utc) - self.stored_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for backend storage."""
        return {
            "key": self.key,
            "value": self.value,
            "stored_at": self.stored_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        """Create CacheEntry from dict."""
        return cls(
            key=data["key"],
            value=data.get("value"),
            stored_at=datetime.fromisoformat(data["stored_at"])
            if data.get("stored_at")
            else datetime.now(timezone.utc),
            expires_at=datetime.fromisoformat(data["expires_at"])
            if data.get("expires_at")
            else None,
        )


__all__ = ["CacheEntry"]
