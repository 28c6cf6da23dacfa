"""Base storage area interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SyncQuota:
    """Limits reported by a quota-bound storage area."""

    total_bytes: int = 102400
    per_item_bytes: int = 8192
    max_items: int = 512


class StorageArea(ABC):
    """Abstract asynchronous key-value storage area.

    Mirrors the host's storage area shape: reads take an explicit key list
    or ``None`` for everything, writes take a mapping, and failures raise
    :class:`~btstore.storage.exceptions.BackendError`.
    """

    name: str = "area"
    quota: SyncQuota | None = None

    @abstractmethod
    async def get(self, keys: list[str] | None = None) -> dict[str, Any]:
        """Read the given keys, or every key when ``keys`` is None."""
        pass

    @abstractmethod
    async def set(self, items: dict[str, Any]) -> None:
        """Write every item in the mapping."""
        pass

    @abstractmethod
    async def remove(self, keys: str | list[str]) -> None:
        """Remove one key or a list of keys."""
        pass

    @abstractmethod
    async def get_bytes_in_use(self, keys: list[str] | None = None) -> int:
        """Bytes used by the given keys, or by the whole area."""
        pass

    async def keys(self) -> list[str]:
        """Get all keys."""
        return list((await self.get(None)).keys())

    async def read(self, key: str) -> Any | None:
        """Read a single key."""
        return (await self.get([key])).get(key)

    async def write(self, key: str, value: Any) -> None:
        """Write a single key."""
        await self.set({key: value})
