"""
Tests for the answer-panel polling loop.

Run with: python -m pytest backend/tests/test_scraper.py -v
"""

import pytest
from unittest.mock import AsyncMock, Mock

from ether_proxy.scraper import ScrapeState, ScrapeTimeout, read_text, stream_reasoning


def _region(*reads):
    region = Mock()
    region.inner_text = AsyncMock(side_effect=list(reads))
    return region


async def _collect(region, **kwargs):
    kwargs.setdefault("interval", 0)
    return [delta async for delta in stream_reasoning(region, **kwargs)]


class TestScrapeState:

    def test_growth_yields_suffix(self):
        state = ScrapeState()
        assert state.observe("Hel") == "Hel"
        assert state.observe("Hello") == "lo"
        assert state.full == "Hello"

    def test_no_growth_is_none(self):
        state = ScrapeState()
        state.observe("abc")
        assert state.observe("abc") is None
        assert state.observe("ab") is None
        assert state.full == "abc"


class TestStreamReasoning:

    @pytest.mark.asyncio
    async def test_deltas_rebuild_full_text(self):
        reads = ["Think", "Thinking about", "Thinking about it. **CCO**"]
        state = ScrapeState()
        deltas = await _collect(_region(*reads), state=state)
        assert deltas == ["Think", "ing about", " it. **CCO**"]
        assert "".join(deltas) == state.full == reads[-1]

    @pytest.mark.asyncio
    async def test_never_yields_empty(self):
        reads = ["", "a", "a", "ab", "a", "ab **X**"]
        deltas = await _collect(_region(*reads))
        assert all(deltas)
        assert "".join(deltas) == "ab **X**"

    @pytest.mark.asyncio
    async def test_failed_read_is_skipped(self):
        region = _region("step 1", RuntimeError("detached"), "step 1, step 2 **C**")
        deltas = await _collect(region)
        assert deltas == ["step 1", ", step 2 **C**"]
        assert region.inner_text.await_count == 3

    @pytest.mark.asyncio
    async def test_stops_at_completion_marker(self):
        region = _region("**CC**", "**CC** and more")
        deltas = await _collect(region)
        assert deltas == ["**CC**"]
        assert region.inner_text.await_count == 1

    @pytest.mark.asyncio
    async def test_budget_exhaustion_raises(self):
        region = Mock()
        region.inner_text = AsyncMock(return_value="still thinking")
        with pytest.raises(ScrapeTimeout):
            await _collect(region, interval=0.01, max_seconds=0.05)

    @pytest.mark.asyncio
    async def test_read_text_passes_timeout(self):
        region = _region("hi")
        assert await read_text(region, 1234) == "hi"
        region.inner_text.assert_awaited_once_with(timeout=1234)
