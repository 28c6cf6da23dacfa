"""Bindings to the extension host's callback-style storage API.

The host exposes ``storage.local`` and ``storage.sync`` objects whose
methods report completion through a callback, and signals failures by
setting ``runtime.lastError`` while the callback runs. This module wraps
those objects in the coroutine-based :class:`StorageArea` contract.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from btstore.config import ConfigError, HostFamily

from ..exceptions import BackendError
from .base import StorageArea, SyncQuota

logger = logging.getLogger(__name__)


def extension_api(host: HostFamily | str, host_globals: Mapping[str, Any]) -> Any:
    """Select the host API object for the configured host family."""
    try:
        family = HostFamily(host)
    except ValueError:
        raise ConfigError(f"Unknown extension host: {host}")

    try:
        return host_globals[family.api_name]
    except KeyError:
        raise ConfigError(
            f"Host global '{family.api_name}' is not available for {family.value}"
        )


class CallbackStorageArea(StorageArea):
    """Adapts one callback-style host storage area to :class:`StorageArea`."""

    def __init__(self, area: Any, runtime: Any = None, name: str = "local"):
        self.name = name
        self._area = area
        self._runtime = runtime
        self.quota = _read_quota(area)

    async def get(self, keys: list[str] | None = None) -> dict[str, Any]:
        """Read the given keys, or every key when ``keys`` is None."""
        result = await self._call(self._area.get, keys)
        return dict(result or {})

    async def set(self, items: dict[str, Any]) -> None:
        """Write every item in the mapping."""
        await self._call(self._area.set, items)

    async def remove(self, keys: str | list[str]) -> None:
        """Remove keys; an empty list does not reach the host."""
        if isinstance(keys, list) and not keys:
            return
        await self._call(self._area.remove, keys)

    async def get_bytes_in_use(self, keys: list[str] | None = None) -> int:
        """Bytes used by the given keys, or by the whole area."""
        return int(await self._call(self._area.getBytesInUse, keys) or 0)

    async def _call(self, method: Callable[..., Any], argument: Any) -> Any:
        """Invoke ``method(argument, callback)`` and await the callback."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def resolve(result: Any = None, error: str | None = None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(BackendError(error, area=self.name))
            else:
                future.set_result(result)

        def callback(*args: Any) -> None:
            # lastError is only meaningful while the callback is running.
            error = self._last_error()
            result = args[0] if args else None
            loop.call_soon_threadsafe(resolve, result, error)

        method(argument, callback)
        return await future

    def _last_error(self) -> str | None:
        if self._runtime is None:
            return None
        last_error = getattr(self._runtime, "lastError", None)
        if not last_error:
            return None
        if isinstance(last_error, Mapping):
            return str(last_error.get("message", last_error))
        return str(getattr(last_error, "message", last_error))


def _read_quota(area: Any) -> SyncQuota | None:
    """Read the quota constants the host publishes on quota-bound areas."""
    total = getattr(area, "QUOTA_BYTES", None)
    if total is None:
        return None
    defaults = SyncQuota()
    return SyncQuota(
        total_bytes=int(total),
        per_item_bytes=int(
            getattr(area, "QUOTA_BYTES_PER_ITEM", defaults.per_item_bytes)
        ),
        max_items=int(getattr(area, "MAX_ITEMS", defaults.max_items)),
    )


def open_storage_areas(api: Any) -> tuple[CallbackStorageArea, CallbackStorageArea]:
    """Wrap the host's local and sync areas."""
    runtime = getattr(api, "runtime", None)
    local = CallbackStorageArea(api.storage.local, runtime, name="local")
    sync = CallbackStorageArea(api.storage.sync, runtime, name="sync")
    if sync.quota is None:
        sync.quota = SyncQuota()
        logger.debug("Sync area publishes no quota constants; using defaults")
    return local, sync
