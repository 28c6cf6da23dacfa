"""Byte accounting for values as the sync area would store them."""

from typing import Any

import msgspec

_encoder = msgspec.json.Encoder()


def serialized_size(data: Any) -> int:
    """Size in bytes of ``data`` serialized as compact UTF-8 JSON."""
    return len(_encoder.encode(data))


def format_bytes(size: int) -> str:
    """Render a byte count as ``B`` below 1024, otherwise as ``KB``.

    Sizes never escalate past ``KB``; 2 MiB renders as ``2048.0 KB``.
    """
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KB"
