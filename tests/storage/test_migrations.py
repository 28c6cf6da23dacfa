"""Tests for moving syncable data between areas."""

from datetime import datetime, timedelta

import pytest

from btstore.storage.backends.base import SyncQuota
from btstore.storage.backends.memory import MemoryStorageArea
from btstore.storage.migrations import MigrationEngine
from btstore.storage.results import Direction, MigrationReport
from btstore.storage.state import StorageState


def make_engine(local, sync, sync_enabled=False):
    return MigrationEngine(local, sync, StorageState(sync_enabled=sync_enabled))


class TestMigrationReport:
    """Test migration report bookkeeping."""

    def test_report_creation(self):
        report = MigrationReport(direction=Direction.LOCAL_TO_SYNC)

        assert report.completed_at is None
        assert report.duration is None
        assert report.candidates == []
        assert report.migrated == []
        assert report.error is None

    def test_duration(self):
        started = datetime.now()
        report = MigrationReport(direction=Direction.SYNC_TO_LOCAL, started_at=started)

        report.completed_at = started + timedelta(seconds=2.5)

        assert report.duration == 2.5


class TestNoOpTransition:
    """Test transitions to the current state."""

    @pytest.mark.asyncio
    async def test_enable_when_enabled(self, local_area, sync_area, bookmark_data):
        await local_area.set(bookmark_data)
        engine = make_engine(local_area, sync_area, sync_enabled=True)

        result = await engine.transition(True)

        assert result.success is True
        assert result.report is None
        assert sync_area.writes == []

    @pytest.mark.asyncio
    async def test_disable_when_disabled(self, local_area, sync_area, make_payloads):
        await sync_area.set(make_payloads("trade-history", 2))
        engine = make_engine(local_area, sync_area)
        writes_before = len(local_area.writes)

        result = await engine.transition(False)

        assert result.success is True
        assert len(local_area.writes) == writes_before


class TestLocalToSync:
    """Test enabling sync."""

    @pytest.mark.asyncio
    async def test_copies_only_syncable_keys(self, local_area, sync_area, bookmark_data):
        await local_area.set(bookmark_data)
        await local_area.set({"poe-ninja-cache": {"value": 1, "expiresAt": None}})
        await local_area.write("bt-sync-enabled", "false")
        engine = make_engine(local_area, sync_area)

        result = await engine.transition(True)

        assert result.success is True
        assert await sync_area.get(None) == bookmark_data
        assert sorted(result.report.migrated) == sorted(bookmark_data)

    @pytest.mark.asyncio
    async def test_source_keeps_its_copy(self, local_area, sync_area, bookmark_data):
        """Migrated keys are not deleted from local."""
        await local_area.set(bookmark_data)

        await make_engine(local_area, sync_area).transition(True)

        for key in bookmark_data:
            assert await local_area.read(key) == bookmark_data[key]

    @pytest.mark.asyncio
    async def test_writes_one_key_at_a_time(self, local_area, sync_area, bookmark_data):
        await local_area.set(bookmark_data)

        await make_engine(local_area, sync_area).transition(True)

        assert len(sync_area.writes) == len(bookmark_data)
        assert all(len(write) == 1 for write in sync_area.writes)

    @pytest.mark.asyncio
    async def test_empty_values_are_skipped(self, local_area, sync_area):
        await local_area.set({"trade-history": None, "bookmark-folders": {"value": 1}})

        result = await make_engine(local_area, sync_area).transition(True)

        assert result.success is True
        assert await sync_area.keys() == ["bookmark-folders"]
        assert result.report.skipped == ["trade-history"]

    @pytest.mark.asyncio
    async def test_aggregate_quota_failure_writes_nothing(
        self, local_area, sync_area, make_payloads
    ):
        data = make_payloads("bookmark-folders", 10, size=7000)
        data.update(make_payloads("trade-history", 5, size=7000))
        await local_area.set(data)

        result = await make_engine(local_area, sync_area).transition(True)

        assert result.success is False
        assert "exceeds sync quota (100.0 KB)" in result.error
        assert result.error.startswith("Data size (")
        assert sync_area.writes == []

    @pytest.mark.asyncio
    async def test_item_quota_failure_writes_nothing(
        self, local_area, sync_area, make_payloads
    ):
        await local_area.set(make_payloads("trade-history", 3))
        await local_area.set(make_payloads("bookmark-folders", 1, size=9000))

        result = await make_engine(local_area, sync_area).transition(True)

        assert result.success is False
        assert result.error.startswith('Item "bookmark-folders-0"')
        assert sync_area.writes == []

    @pytest.mark.asyncio
    async def test_write_failure_is_not_rolled_back(
        self, local_area, sync_area, make_payloads
    ):
        """Keys written before a failure stay in the sync area."""
        await local_area.set(make_payloads("trade-history", 5))
        sync_area.fail_on = lambda key: key == "trade-history-2"

        result = await make_engine(local_area, sync_area).transition(True)

        assert result.success is False
        assert result.error == "Migration failed: Write rejected for trade-history-2"
        assert sorted(await sync_area.keys()) == ["trade-history-0", "trade-history-1"]
        assert result.report.migrated == ["trade-history-0", "trade-history-1"]

    @pytest.mark.asyncio
    async def test_read_failure_becomes_result(self, sync_area):
        """Failures while reading never escape as exceptions."""

        class BrokenLocal(MemoryStorageArea):
            async def get(self, keys=None):
                raise RuntimeError("disk unavailable")

        result = await make_engine(BrokenLocal("local"), sync_area).transition(True)

        assert result.success is False
        assert result.error == "Migration failed: disk unavailable"
        assert sync_area.writes == []

    @pytest.mark.asyncio
    async def test_uses_sync_area_quota(self, local_area, bookmark_data):
        sync = MemoryStorageArea("sync", quota=SyncQuota(total_bytes=100))
        await local_area.set(bookmark_data)

        result = await make_engine(local_area, sync).transition(True)

        assert result.success is False
        assert "(100 B)" in result.error


class TestSyncToLocal:
    """Test disabling sync."""

    @pytest.mark.asyncio
    async def test_copies_syncable_keys_back(
        self, local_area, sync_area, make_payloads
    ):
        data = make_payloads("bookmark-trades--folder", 3)
        await sync_area.set(data)
        await sync_area.write("unrelated", {"value": 1, "expiresAt": None})

        result = await make_engine(local_area, sync_area, True).transition(False)

        assert result.success is True
        assert await local_area.get(None) == data

    @pytest.mark.asyncio
    async def test_sync_keeps_its_copy(self, local_area, sync_area, make_payloads):
        data = make_payloads("trade-history", 2)
        await sync_area.set(data)

        await make_engine(local_area, sync_area, True).transition(False)

        assert await sync_area.get(None) == data

    @pytest.mark.asyncio
    async def test_absent_values_are_skipped(self, local_area, sync_area):
        await sync_area.set({"trade-history": None, "bookmark-folders": {"value": 1}})

        result = await make_engine(local_area, sync_area, True).transition(False)

        assert result.success is True
        assert await local_area.keys() == ["bookmark-folders"]
        assert result.report.skipped == ["trade-history"]

    @pytest.mark.asyncio
    async def test_no_quota_check(self, sync_area):
        """Local has no modeled limit, even for large values."""
        local = MemoryStorageArea("local")
        await sync_area.set({"trade-history": "x" * 8000})

        result = await make_engine(local, sync_area, True).transition(False)

        assert result.success is True
        assert await local.read("trade-history") == "x" * 8000

    @pytest.mark.asyncio
    async def test_write_failure_becomes_result(
        self, local_area, sync_area, make_payloads
    ):
        await sync_area.set(make_payloads("trade-history", 3))
        local_area.fail_on = lambda key: key == "trade-history-1"

        result = await make_engine(local_area, sync_area, True).transition(False)

        assert result.success is False
        assert result.error == "Migration failed: Write rejected for trade-history-1"
        assert await local_area.keys() == ["trade-history-0"]
