"""In-memory storage area for testing and development."""

from __future__ import annotations

from collections.abc import Callable
from copy import deepcopy
from typing import Any

from btstore.core.sizing import serialized_size

from ..exceptions import BackendError
from .base import StorageArea, SyncQuota


class MemoryStorageArea(StorageArea):
    """In-memory storage area following the host's accounting rules.

    Bytes in use are counted per item as the key length plus the length of
    the JSON-serialized value. When ``quota`` is set, writes that would
    break it are rejected the way the host rejects them.
    """

    def __init__(
        self,
        name: str = "local",
        quota: SyncQuota | None = None,
        data: dict[str, Any] | None = None,
    ):
        self.name = name
        self.quota = quota
        self._data: dict[str, Any] = deepcopy(data) if data else {}
        self.writes: list[dict[str, Any]] = []
        self.fail_on: Callable[[str], bool] | None = None

    async def get(self, keys: list[str] | None = None) -> dict[str, Any]:
        """Read the given keys, or every key when ``keys`` is None."""
        if keys is None:
            return deepcopy(self._data)
        return {key: deepcopy(self._data[key]) for key in keys if key in self._data}

    async def set(self, items: dict[str, Any]) -> None:
        """Write items, enforcing the quota if one is configured."""
        for key in items:
            if self.fail_on and self.fail_on(key):
                raise BackendError(f"Write rejected for {key}", area=self.name)

        if self.quota:
            self._check_quota(self.quota, items)

        self.writes.append(deepcopy(items))
        self._data.update(deepcopy(items))

    async def remove(self, keys: str | list[str]) -> None:
        """Remove keys; unknown keys are ignored."""
        if isinstance(keys, str):
            keys = [keys]
        for key in keys:
            self._data.pop(key, None)

    async def get_bytes_in_use(self, keys: list[str] | None = None) -> int:
        """Bytes used by the given keys, or by the whole area."""
        selected = self._data if keys is None else {
            key: self._data[key] for key in keys if key in self._data
        }
        return sum(_item_bytes(key, value) for key, value in selected.items())

    def _check_quota(self, quota: SyncQuota, items: dict[str, Any]) -> None:
        """Reject writes that would exceed ``quota``."""
        for key, value in items.items():
            if _item_bytes(key, value) > quota.per_item_bytes:
                raise BackendError(
                    "QUOTA_BYTES_PER_ITEM quota exceeded", area=self.name
                )

        merged = {**self._data, **items}
        if len(merged) > quota.max_items:
            raise BackendError("MAX_ITEMS quota exceeded", area=self.name)

        total = sum(_item_bytes(key, value) for key, value in merged.items())
        if total > quota.total_bytes:
            raise BackendError("QUOTA_BYTES quota exceeded", area=self.name)


def _item_bytes(key: str, value: Any) -> int:
    return len(key.encode()) + serialized_size(value)
