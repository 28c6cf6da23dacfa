"""Moving syncable keys between the local and sync areas.

Migrations run when the sync mode flips. Every read and write is awaited
in turn, so a failure always names the exact key it happened on. Nothing
is rolled back on failure and nothing is deleted from the source area on
success: after a migration both areas hold a copy of each moved key.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from btstore.core.keys import is_syncable

from .backends.base import StorageArea, SyncQuota
from .exceptions import QuotaExceededError
from .quota import QuotaGuard
from .results import Direction, MigrationReport, SyncResult
from .state import StorageState

logger = logging.getLogger(__name__)


class MigrationEngine:
    """Moves the syncable subset of keys when sync is toggled."""

    def __init__(
        self,
        local: StorageArea,
        sync: StorageArea,
        state: StorageState,
        guard: QuotaGuard | None = None,
    ):
        self.local = local
        self.sync = sync
        self.state = state
        self.guard = guard or QuotaGuard(sync.quota or SyncQuota())

    async def transition(self, enabled: bool) -> SyncResult:
        """Migrate for a change to ``enabled``; a no-op if already there.

        Never raises: every failure is reported through the result. The
        sync flag itself is left for the caller to persist.
        """
        if enabled == self.state.sync_enabled:
            return SyncResult.ok()

        if enabled:
            return await self.migrate_local_to_sync()
        return await self.migrate_sync_to_local()

    async def migrate_local_to_sync(self) -> SyncResult:
        """Copy syncable local keys to sync, validating quota before any write."""
        report = MigrationReport(direction=Direction.LOCAL_TO_SYNC)

        try:
            batch = await self._collect(self.local, report)
            self.guard.validate(batch)
        except QuotaExceededError as e:
            logger.warning(f"Sync migration rejected: {e}")
            return self._fail(report, str(e))
        except Exception as e:
            logger.error(f"Reading local data for sync migration failed: {e}")
            return self._fail(report, f"Migration failed: {e}")

        for key, value in batch.items():
            try:
                await self.sync.write(key, value)
            except Exception as e:
                logger.error(f"Writing {key} to sync failed: {e}")
                return self._fail(report, f"Migration failed: {e}")
            report.migrated.append(key)
            logger.debug(f"Migrated {key} to sync")

        return self._succeed(report)

    async def migrate_sync_to_local(self) -> SyncResult:
        """Copy syncable sync keys back to local; no quota applies."""
        report = MigrationReport(direction=Direction.SYNC_TO_LOCAL)

        try:
            keys = [key for key in await self.sync.keys() if is_syncable(key)]
            report.candidates = keys

            for key in keys:
                value = await self.sync.read(key)
                if not value:
                    report.skipped.append(key)
                    continue
                await self.local.write(key, value)
                report.migrated.append(key)
                logger.debug(f"Migrated {key} to local")
        except Exception as e:
            logger.error(f"Migrating sync data to local failed: {e}")
            return self._fail(report, f"Migration failed: {e}")

        return self._succeed(report)

    async def _collect(
        self, source: StorageArea, report: MigrationReport
    ) -> dict[str, Any]:
        """Read every syncable key present in ``source``."""
        keys = [key for key in await source.keys() if is_syncable(key)]
        report.candidates = keys

        batch: dict[str, Any] = {}
        for key in keys:
            value = await source.read(key)
            if value:
                batch[key] = value
            else:
                report.skipped.append(key)
        return batch

    def _succeed(self, report: MigrationReport) -> SyncResult:
        report.completed_at = datetime.now()
        logger.info(
            f"Migrated {len(report.migrated)} keys ({report.direction.value})"
        )
        return SyncResult.ok(report)

    def _fail(self, report: MigrationReport, error: str) -> SyncResult:
        report.completed_at = datetime.now()
        report.error = error
        return SyncResult.failure(error, report)
