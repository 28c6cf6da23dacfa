"""Mutable state shared by the storage facade and its collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .quota import QuotaSnapshot


@dataclass
class StorageState:
    """Current sync mode and the last measured sync usage.

    ``sync_enabled`` is the routing source of truth. ``quota`` is a cached
    read model and is always replaced wholesale.
    """

    sync_enabled: bool = False
    quota: QuotaSnapshot | None = None
