"""Removal of data namespaced by leagues that have ended."""

from __future__ import annotations

import logging

from btstore.config import PAST_LEAGUES
from btstore.core.keys import league_suffix_of

from .backends.base import StorageArea

logger = logging.getLogger(__name__)


async def purge_past_leagues(
    area: StorageArea, past_leagues: tuple[str, ...] | list[str] = PAST_LEAGUES
) -> list[str]:
    """Remove every key namespaced by one of ``past_leagues``; returns them."""
    if not past_leagues:
        return []

    stale = [
        key for key in await area.keys() if league_suffix_of(key, past_leagues)
    ]
    await area.remove(stale)

    if stale:
        logger.info(f"Removed {len(stale)} keys from past leagues in {area.name}")
    return stale
