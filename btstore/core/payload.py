"""Payload envelope with optional read-time expiration.

Payloads are stored as ``{"value": ..., "expiresAt": ...}`` where
``expiresAt`` is either ``null`` or an RFC 1123 GMT date string such as
``"Sat, 17 Oct 2026 12:00:00 GMT"``. Expiration is lazy: an expired
payload stays in its area until overwritten or deleted, and only reads
treat it as absent.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any

import msgspec


class Payload(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """A stored value and its expiration date."""

    value: Any
    expires_at: str | None = None

    @property
    def expiration(self) -> datetime | None:
        """Parsed expiration date, timezone-aware in UTC."""
        if not self.expires_at:
            return None
        try:
            return _as_utc(parsedate_to_datetime(self.expires_at))
        except (TypeError, ValueError):
            # Unparseable dates never expire.
            return None

    def is_expired(self, now: datetime) -> bool:
        """Check expiration; a payload expiring exactly at ``now`` is still live."""
        expiration = self.expiration
        if expiration is None:
            return False
        return _as_utc(now) > expiration

    def to_builtins(self) -> dict[str, Any]:
        """Convert to the plain mapping written to a storage area."""
        return msgspec.to_builtins(self)

    @classmethod
    def from_stored(cls, data: Any) -> Payload | None:
        """Build a payload from an area's raw value, or ``None`` if unusable."""
        if not data or not isinstance(data, dict):
            return None
        try:
            return msgspec.convert(data, cls)
        except msgspec.ValidationError:
            return None


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def encode(value: Any, expires_at: datetime | None = None) -> Payload:
    """Wrap ``value`` in a payload, expiring at ``expires_at`` if given."""
    if expires_at is None:
        return Payload(value=value)
    return Payload(
        value=value,
        expires_at=format_datetime(_as_utc(expires_at), usegmt=True),
    )


def decode(payload: Payload | None, now: datetime) -> Any | None:
    """Return the payload's value, or ``None`` when absent or expired."""
    if payload is None or payload.is_expired(now):
        return None
    return payload.value
