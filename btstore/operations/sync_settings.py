"""Sync toggle controller for settings screens."""

from __future__ import annotations

import logging

from ..storage.quota import QuotaSnapshot
from ..storage.system import StorageSystem

logger = logging.getLogger(__name__)


class SyncSettings:
    """Tracks a sync toggle in progress and the last error it produced."""

    def __init__(self, storage: StorageSystem):
        self.storage = storage
        self.is_toggling = False
        self.last_error: str | None = None

    @property
    def sync_enabled(self) -> bool:
        return self.storage.sync_enabled

    @property
    def quota_info(self) -> QuotaSnapshot | None:
        return self.storage.quota

    @property
    def formatted_quota_usage(self) -> str:
        return self.storage.formatted_quota_usage()

    @property
    def show_quota_warning(self) -> bool:
        """Check if the sync area is close to its byte or item limit."""
        info = self.quota_info
        return info.needs_warning if info else False

    async def toggle_sync(self, enabled: bool) -> bool:
        """Switch sync mode; returns False and records the error on failure."""
        self.is_toggling = True
        self.last_error = None

        try:
            result = await self.storage.set_sync_enabled(enabled)
            if result.failed:
                self.last_error = result.error or "Unknown error"
                logger.warning(f"Sync toggle failed: {self.last_error}")
                return False
            return True
        finally:
            self.is_toggling = False

    async def refresh_quota_info(self) -> None:
        """Re-measure sync usage; does nothing while sync is disabled."""
        if self.sync_enabled:
            await self.storage.refresh_quota()
