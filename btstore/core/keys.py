"""Logical key formatting and routing between the local and sync areas."""

from __future__ import annotations

from enum import Enum

# Keys starting with any of these may live in the sync area.
SYNCABLE_KEY_PREFIXES: tuple[str, ...] = (
    "bookmark-folders",
    "bookmark-trades--",
    "trade-history",
)

LEAGUE_SEPARATOR = "--"


class Backend(str, Enum):
    """Physical storage area a key lives on."""

    LOCAL = "local"
    SYNC = "sync"


def format_key(key: str, league: str | None = None) -> str:
    """Namespace ``key`` by league (``key--league``) and lower-case it."""
    formatted = key
    if league:
        formatted += f"{LEAGUE_SEPARATOR}{league}"
    return formatted.lower()


def is_syncable(key: str) -> bool:
    """Check whether a formatted key is eligible for the sync area."""
    return any(key.startswith(prefix) for prefix in SYNCABLE_KEY_PREFIXES)


def route(key: str, sync_enabled: bool) -> Backend:
    """Pick the area for a formatted key given the current sync mode."""
    if not sync_enabled:
        return Backend.LOCAL
    return Backend.SYNC if is_syncable(key) else Backend.LOCAL


def league_suffix_of(
    key: str, leagues: list[str] | tuple[str, ...]
) -> str | None:
    """League among ``leagues`` that namespaces ``key``, if any."""
    for league in leagues:
        if key.endswith(f"{LEAGUE_SEPARATOR}{league.lower()}"):
            return league
    return None
