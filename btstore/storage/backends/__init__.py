"""Storage area implementations and host bindings."""

from btstore.storage.backends.base import StorageArea, SyncQuota
from btstore.storage.backends.extension import (
    CallbackStorageArea,
    extension_api,
    open_storage_areas,
)
from btstore.storage.backends.memory import MemoryStorageArea

__all__ = [
    "StorageArea",
    "SyncQuota",
    "MemoryStorageArea",
    "CallbackStorageArea",
    "extension_api",
    "open_storage_areas",
]
