"""Split local/sync storage layer.

Provides one storage surface over two host storage areas:

- **Routing**: syncable keys follow the sync mode, everything else stays local
- **Payloads**: values wrapped with an optional read-time expiration
- **Migration**: syncable data copied between areas when sync is toggled
- **Quota**: batches validated against sync limits before any write
- **Monitoring**: snapshots of sync usage with near-limit warnings
- **Event system**: notifications for sync mode and quota changes
"""

# Storage areas
from btstore.storage.backends.base import StorageArea, SyncQuota
from btstore.storage.backends.extension import (
    CallbackStorageArea,
    extension_api,
    open_storage_areas,
)
from btstore.storage.backends.memory import MemoryStorageArea

# Maintenance
from btstore.storage.cleanup import purge_past_leagues

# Event system
from btstore.storage.events import Event, EventBus, EventType

# Errors
from btstore.storage.exceptions import (
    AggregateQuotaError,
    BackendError,
    ItemQuotaError,
    QuotaExceededError,
    StorageError,
)

# Migrations
from btstore.storage.migrations import MigrationEngine

# Quota
from btstore.storage.quota import QuotaGuard, QuotaMonitor, QuotaSnapshot

# Results
from btstore.storage.results import Direction, MigrationReport, SyncResult

# Facade
from btstore.storage.state import StorageState
from btstore.storage.system import StorageSystem

__all__ = [
    # Areas
    "StorageArea",
    "SyncQuota",
    "MemoryStorageArea",
    "CallbackStorageArea",
    "extension_api",
    "open_storage_areas",
    # Maintenance
    "purge_past_leagues",
    # Events
    "Event",
    "EventBus",
    "EventType",
    # Errors
    "StorageError",
    "BackendError",
    "QuotaExceededError",
    "AggregateQuotaError",
    "ItemQuotaError",
    # Migrations
    "MigrationEngine",
    "Direction",
    "MigrationReport",
    "SyncResult",
    # Quota
    "QuotaGuard",
    "QuotaMonitor",
    "QuotaSnapshot",
    # Facade
    "StorageState",
    "StorageSystem",
]
