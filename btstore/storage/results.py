"""Result types for sync mode transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Direction(str, Enum):
    """Direction of a migration between areas."""

    LOCAL_TO_SYNC = "local_to_sync"
    SYNC_TO_LOCAL = "sync_to_local"


@dataclass
class MigrationReport:
    """What a migration attempted and what it wrote."""

    direction: Direction
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None
    candidates: list[str] = field(default_factory=list)
    migrated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def duration(self) -> float | None:
        """Get migration duration in seconds."""
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a sync mode change."""

    success: bool
    error: str | None = None
    report: MigrationReport | None = None

    @property
    def failed(self) -> bool:
        """Check if the change failed."""
        return not self.success

    @classmethod
    def ok(cls, report: MigrationReport | None = None) -> SyncResult:
        return cls(success=True, report=report)

    @classmethod
    def failure(cls, error: str, report: MigrationReport | None = None) -> SyncResult:
        return cls(success=False, error=error, report=report)
