"""Sync quota validation and usage monitoring.

The guard validates a migration batch before anything is written; the
monitor produces read-only snapshots of how full the sync area is.
"""

from __future__ import annotations

import logging
from typing import Any

import msgspec

from btstore.core.sizing import format_bytes, serialized_size

from .backends.base import StorageArea, SyncQuota
from .exceptions import AggregateQuotaError, ItemQuotaError
from .state import StorageState

logger = logging.getLogger(__name__)

QUOTA_WARNING_THRESHOLD = 0.8
ITEM_WARNING_THRESHOLD = 0.9


class QuotaGuard:
    """Checks candidate batches against a sync quota."""

    def __init__(self, quota: SyncQuota):
        self.quota = quota

    def check_aggregate(self, batch: dict[str, Any]) -> int:
        """Check the serialized size of the whole batch; returns the size."""
        size = serialized_size(batch)
        if size > self.quota.total_bytes:
            raise AggregateQuotaError(size, self.quota.total_bytes)
        return size

    def check_items(self, batch: dict[str, Any]) -> None:
        """Check each ``{key: value}`` pair; fails on the first offender."""
        for key, value in batch.items():
            size = serialized_size({key: value})
            if size > self.quota.per_item_bytes:
                raise ItemQuotaError(key, size, self.quota.per_item_bytes)

    def validate(self, batch: dict[str, Any]) -> None:
        """Run the aggregate check, then the per-item check.

        Both checks always run before the caller writes anything, even if
        the aggregate size already implies every item is small.
        """
        size = self.check_aggregate(batch)
        self.check_items(batch)
        logger.debug(
            f"Batch of {len(batch)} items ({format_bytes(size)}) fits sync quota"
        )


class QuotaSnapshot(msgspec.Struct, frozen=True, kw_only=True):
    """Point-in-time usage of the sync area."""

    bytes_used: int
    total_quota: int
    percent_used: float
    item_count: int
    max_items: int
    is_near_quota: bool
    is_near_item_limit: bool

    @classmethod
    def compute(
        cls, bytes_used: int, item_count: int, quota: SyncQuota
    ) -> QuotaSnapshot:
        """Derive percentages and warning flags from raw usage."""
        return cls(
            bytes_used=bytes_used,
            total_quota=quota.total_bytes,
            percent_used=(bytes_used / quota.total_bytes) * 100,
            item_count=item_count,
            max_items=quota.max_items,
            is_near_quota=bytes_used >= quota.total_bytes * QUOTA_WARNING_THRESHOLD,
            is_near_item_limit=item_count >= quota.max_items * ITEM_WARNING_THRESHOLD,
        )

    @property
    def needs_warning(self) -> bool:
        """Check if either warning threshold has been reached."""
        return self.is_near_quota or self.is_near_item_limit

    def formatted_usage(self) -> str:
        """Render as ``"used / total (percent%)"``."""
        return (
            f"{format_bytes(self.bytes_used)} / {format_bytes(self.total_quota)} "
            f"({self.percent_used:.1f}%)"
        )


class QuotaMonitor:
    """Measures the sync area and stores the latest snapshot in ``state``."""

    def __init__(self, area: StorageArea, state: StorageState):
        self.area = area
        self.state = state

    @property
    def quota(self) -> SyncQuota:
        return self.area.quota or SyncQuota()

    async def refresh(self) -> QuotaSnapshot:
        """Measure every key physically stored in the sync area."""
        bytes_used = await self.area.get_bytes_in_use(None)
        item_count = len(await self.area.keys())

        snapshot = QuotaSnapshot.compute(bytes_used, item_count, self.quota)
        if snapshot.needs_warning:
            logger.warning(f"Sync storage is nearly full: {snapshot.formatted_usage()}")
        else:
            logger.debug(f"Sync storage usage: {snapshot.formatted_usage()}")

        self.state.quota = snapshot
        return snapshot

    def clear(self) -> None:
        """Forget the cached snapshot."""
        self.state.quota = None

    def formatted_usage(self) -> str:
        """Render the cached snapshot, or an empty string when there is none."""
        if self.state.quota is None:
            return ""
        return self.state.quota.formatted_usage()
