"""Pure helpers shared by the storage layer: key routing, payloads, sizing."""

from btstore.core.keys import (
    SYNCABLE_KEY_PREFIXES,
    Backend,
    format_key,
    is_syncable,
    route,
)
from btstore.core.payload import Payload, decode, encode
from btstore.core.sizing import format_bytes, serialized_size

__all__ = [
    # Keys
    "SYNCABLE_KEY_PREFIXES",
    "Backend",
    "format_key",
    "is_syncable",
    "route",
    # Payloads
    "Payload",
    "encode",
    "decode",
    # Sizing
    "format_bytes",
    "serialized_size",
]
