"""Exception classes for the storage layer."""

from __future__ import annotations

from btstore.core.sizing import format_bytes


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class BackendError(StorageError):
    """Raised when a storage area rejects an operation."""

    def __init__(self, message: str, area: str | None = None):
        """Initialize with the host message and the failing area name."""
        self.area = area
        super().__init__(message)


class QuotaExceededError(StorageError):
    """Base exception for sync quota violations."""

    def __init__(self, message: str, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(message)


class AggregateQuotaError(QuotaExceededError):
    """Raised when a whole batch is too large for the sync area."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Data size ({format_bytes(size)}) exceeds sync quota "
            f"({format_bytes(limit)})",
            size,
            limit,
        )


class ItemQuotaError(QuotaExceededError):
    """Raised when a single item is too large for the sync area."""

    def __init__(self, key: str, size: int, limit: int):
        self.key = key
        super().__init__(
            f'Item "{key}" ({format_bytes(size)}) exceeds per-item limit '
            f"({format_bytes(limit)})",
            size,
            limit,
        )
