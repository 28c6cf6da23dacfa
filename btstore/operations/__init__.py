"""Controllers built on top of the storage facade."""

from btstore.operations.sync_settings import SyncSettings

__all__ = ["SyncSettings"]
