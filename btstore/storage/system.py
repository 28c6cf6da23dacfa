"""Storage facade splitting data between the local and sync areas.

Provides a unified interface for:
- Reading and writing league-namespaced values, with optional expiration
- Routing syncable keys to the sync area while sync is enabled
- Moving syncable data between areas when sync is toggled
- Measuring how much of the sync quota is in use

Calls are not serialized internally. Callers must not overlap a sync
toggle with other calls; concurrent toggles or writes during a toggle
have undefined outcomes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from btstore.config import StorageConfig
from btstore.core.keys import Backend, format_key, route
from btstore.core.payload import Payload, decode, encode

from .backends.base import StorageArea
from .backends.extension import extension_api, open_storage_areas
from .cleanup import purge_past_leagues
from .events import EventBus, EventType
from .exceptions import StorageError
from .migrations import MigrationEngine
from .quota import QuotaMonitor, QuotaSnapshot
from .results import SyncResult
from .state import StorageState

logger = logging.getLogger(__name__)

LOCAL_VALUE_PREFIX = "bt-"
SYNC_ENABLED_KEY = "sync-enabled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_data_key(key: str) -> None:
    # Local preference values, including the sync flag, live under this prefix.
    if key.startswith(LOCAL_VALUE_PREFIX):
        raise ValueError(
            f"Key '{key}' uses the reserved prefix '{LOCAL_VALUE_PREFIX}'"
        )


class StorageSystem:
    """Public storage surface combining routing, payloads, migration and quota."""

    def __init__(
        self,
        local: StorageArea,
        sync: StorageArea,
        config: StorageConfig | None = None,
        event_bus: EventBus | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the storage system.

        Args:
            local: Device-local area, also holding the sync flag
            sync: Quota-bound area shared across devices
            config: Storage configuration
            event_bus: Bus receiving sync and quota events
            clock: Source of the current time for expiration checks
        """
        self.local = local
        self.sync = sync
        self.config = config or StorageConfig()
        self.clock = clock or _utcnow
        self.event_bus = event_bus or EventBus(clock=self.clock)

        self.state = StorageState()
        self.quota_monitor = QuotaMonitor(sync, self.state)
        self.migrations = MigrationEngine(local, sync, self.state)

    @classmethod
    async def open(
        cls, local: StorageArea, sync: StorageArea, **kwargs: Any
    ) -> StorageSystem:
        """Create a storage system and run its startup step."""
        system = cls(local, sync, **kwargs)
        await system.initialize()
        return system

    @classmethod
    async def from_host(
        cls,
        host_globals: Mapping[str, Any],
        config: StorageConfig | None = None,
        **kwargs: Any,
    ) -> StorageSystem:
        """Bind to the extension host's storage areas and initialize."""
        config = config or StorageConfig()
        local, sync = open_storage_areas(extension_api(config.host, host_globals))
        return await cls.open(local, sync, config=config, **kwargs)

    async def initialize(self) -> None:
        """Purge past leagues, load the sync flag, and measure sync usage."""
        purged = await purge_past_leagues(self.local, self.config.past_leagues)
        if purged:
            self.event_bus.emit(EventType.PAST_LEAGUES_PURGED, keys=purged)

        self.state.sync_enabled = await self.get_local_value(SYNC_ENABLED_KEY) == "true"
        logger.debug(f"Sync enabled at startup: {self.state.sync_enabled}")

        if self.state.sync_enabled:
            await self.refresh_quota()

    # State accessors

    @property
    def sync_enabled(self) -> bool:
        return self.state.sync_enabled

    @property
    def quota(self) -> QuotaSnapshot | None:
        return self.state.quota

    def formatted_quota_usage(self) -> str:
        """Render the cached quota snapshot, or ``""`` if there is none."""
        return self.quota_monitor.formatted_usage()

    # Local preference values

    async def set_local_value(
        self, key: str, value: str, league: str | None = None
    ) -> None:
        """Store a raw string in the local area; never routed or migrated."""
        await self.local.write(self._local_key(key, league), value)

    async def get_local_value(self, key: str, league: str | None = None) -> str | None:
        """Read a raw string stored with :meth:`set_local_value`."""
        return await self.local.read(self._local_key(key, league))

    async def delete_local_value(self, key: str, league: str | None = None) -> None:
        """Remove a raw string stored with :meth:`set_local_value`."""
        await self.local.remove(self._local_key(key, league))

    @staticmethod
    def _local_key(key: str, league: str | None) -> str:
        return f"{LOCAL_VALUE_PREFIX}{format_key(key, league)}"

    # Routed values

    def backend_for(self, key: str) -> Backend:
        """Area a formatted key currently routes to."""
        return route(key, self.state.sync_enabled)

    def _area(self, backend: Backend) -> StorageArea:
        return self.sync if backend is Backend.SYNC else self.local

    async def set_value(self, key: str, value: Any, league: str | None = None) -> None:
        """Store a value that never expires."""
        await self._write(self._data_key(key, league), encode(value))

    async def set_ephemeral_value(
        self,
        key: str,
        value: Any,
        expires_at: datetime,
        league: str | None = None,
    ) -> None:
        """Store a value that reads as absent once ``expires_at`` has passed."""
        await self._write(self._data_key(key, league), encode(value, expires_at))

    async def get_value(self, key: str, league: str | None = None) -> Any | None:
        """Read a value; missing and expired values both return None."""
        formatted = self._data_key(key, league)
        stored = await self._area(self.backend_for(formatted)).read(formatted)
        return decode(Payload.from_stored(stored), self.clock())

    async def delete_value(self, key: str, league: str | None = None) -> None:
        """Remove a value from the area it routes to."""
        await self.remove_values([self._data_key(key, league)])

    async def remove_values(self, keys: list[str]) -> None:
        """Remove formatted keys, grouping them by the area they route to."""
        if not keys:
            return
        for key in keys:
            _check_data_key(key)

        local_keys = [k for k in keys if self.backend_for(k) is Backend.LOCAL]
        sync_keys = [k for k in keys if self.backend_for(k) is Backend.SYNC]

        if local_keys:
            await self.local.remove(local_keys)
        if sync_keys:
            await self.sync.remove(sync_keys)

    @staticmethod
    def _data_key(key: str, league: str | None) -> str:
        formatted = format_key(key, league)
        _check_data_key(formatted)
        return formatted

    async def _write(self, key: str, payload: Payload) -> None:
        await self._area(self.backend_for(key)).write(key, payload.to_builtins())

    # Sync mode

    async def set_sync_enabled(self, enabled: bool) -> SyncResult:
        """Switch sync on or off, migrating syncable data first.

        The flag only changes once the migration has succeeded. Data is
        copied, not moved: the source area keeps its copy.
        """
        if enabled == self.state.sync_enabled:
            return SyncResult.ok()

        result = await self.migrations.transition(enabled)
        if result.failed:
            return self._toggle_failed(enabled, result)

        try:
            await self.set_local_value(SYNC_ENABLED_KEY, "true" if enabled else "false")
        except StorageError as e:
            logger.error(f"Saving the sync flag failed: {e}")
            if result.report:
                result.report.error = f"Migration failed: {e}"
            return self._toggle_failed(
                enabled, SyncResult.failure(f"Migration failed: {e}", result.report)
            )

        self.state.sync_enabled = enabled
        logger.info(f"Sync {'enabled' if enabled else 'disabled'}")

        if enabled:
            try:
                await self.refresh_quota()
            except StorageError as e:
                logger.warning(f"Could not measure sync usage after enabling: {e}")
                self.quota_monitor.clear()
            self.event_bus.emit(EventType.SYNC_ENABLED, report=result.report)
        else:
            self.quota_monitor.clear()
            self.event_bus.emit(EventType.QUOTA_CLEARED)
            self.event_bus.emit(EventType.SYNC_DISABLED, report=result.report)

        return result

    def _toggle_failed(self, enabled: bool, result: SyncResult) -> SyncResult:
        self.event_bus.emit(
            EventType.MIGRATION_FAILED, enabled=enabled, error=result.error
        )
        return result

    async def refresh_quota(self) -> QuotaSnapshot:
        """Measure the sync area and replace the cached snapshot."""
        snapshot = await self.quota_monitor.refresh()
        self.event_bus.emit(EventType.QUOTA_REFRESHED, snapshot=snapshot)
        return snapshot
