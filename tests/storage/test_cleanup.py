"""Tests for past league cleanup."""

import pytest

from btstore.storage.backends.memory import MemoryStorageArea
from btstore.storage.cleanup import PAST_LEAGUES, purge_past_leagues


class TestPurgePastLeagues:
    """Test removing keys namespaced by ended leagues."""

    @pytest.mark.asyncio
    async def test_removes_past_league_keys(self):
        area = MemoryStorageArea(
            data={
                "trade-history--blight": 1,
                "bookmark-folders--metamorph": 2,
                "trade-history--standard": 3,
                "bt-sync-enabled": "true",
            }
        )

        removed = await purge_past_leagues(area)

        assert sorted(removed) == ["bookmark-folders--metamorph", "trade-history--blight"]
        assert sorted(await area.keys()) == ["bt-sync-enabled", "trade-history--standard"]

    @pytest.mark.asyncio
    async def test_league_must_be_suffix(self):
        """A league name in the middle of a key is not a match."""
        area = MemoryStorageArea(data={"trade-history--blight-ssf": 1})

        assert await purge_past_leagues(area) == []
        assert await area.keys() == ["trade-history--blight-ssf"]

    @pytest.mark.asyncio
    async def test_no_past_leagues(self):
        area = MemoryStorageArea(data={"trade-history--blight": 1})

        assert await purge_past_leagues(area, ()) == []
        assert await area.keys() == ["trade-history--blight"]

    def test_default_leagues(self):
        assert PAST_LEAGUES == ("blight", "metamorph", "delirium")
