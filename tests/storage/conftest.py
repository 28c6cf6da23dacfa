"""Shared fixtures for storage tests."""

from datetime import datetime, timezone
from typing import Any

import pytest

from btstore.core.payload import encode
from btstore.storage.backends.base import SyncQuota
from btstore.storage.backends.memory import MemoryStorageArea
from btstore.storage.events import EventBus
from btstore.storage.system import StorageSystem

FIXED_NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


def _make_payloads(prefix: str, count: int, size: int = 20) -> dict[str, Any]:
    """Stored payload mappings for ``count`` keys starting with ``prefix``."""
    return {
        f"{prefix}-{i}": encode("x" * size).to_builtins() for i in range(count)
    }


@pytest.fixture
def make_payloads():
    """Factory for stored payload mappings."""
    return _make_payloads


@pytest.fixture
def fixed_now():
    """The current time seen by the storage system."""
    return FIXED_NOW


@pytest.fixture
def local_area():
    """Empty local area."""
    return MemoryStorageArea("local")


@pytest.fixture
def sync_area():
    """Empty sync area with the default host quota."""
    return MemoryStorageArea("sync", quota=SyncQuota())


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def system(local_area, sync_area, event_bus, fixed_now):
    """Storage system with sync disabled, not yet initialized."""
    return StorageSystem(
        local_area, sync_area, event_bus=event_bus, clock=lambda: fixed_now
    )


@pytest.fixture
def bookmark_data():
    """Ten bookmark folders and five trade history entries within quota."""
    data = _make_payloads("bookmark-folders", 10)
    data.update(_make_payloads("trade-history", 5))
    return data
