"""
Polls Ether0's answer panel and turns its growing text into deltas.

The panel is append-only while the model streams, so each poll we emit
whatever was added past the last length we saw. Polling stops once the
bolded **answer** shows up in the accumulated text.
"""

import asyncio
import time
from dataclasses import dataclass

from playwright.async_api import Locator

from ether_proxy.structure import has_completion


class ScrapeTimeout(Exception):
    pass


@dataclass
class ScrapeState:
    full: str = ""
    previous: str = ""

    def observe(self, text: str) -> str | None:
        """Record a poll. Returns the new suffix, or None if nothing grew."""
        if len(text) <= len(self.previous):
            return None
        delta = text[len(self.previous):]
        self.previous = text
        self.full += delta
        return delta


async def read_text(region: Locator, timeout: int) -> str:
    """innerText of the panel; a failed read counts as empty for this poll."""
    try:
        return await region.inner_text(timeout=timeout) or ""
    except Exception:
        return ""


async def stream_reasoning(
    region: Locator,
    interval: float = 0.3,
    max_seconds: float = 0,
    read_timeout: int = 5000,
    state: ScrapeState | None = None,
):
    """
    Async generator of reasoning deltas. Never yields an empty string.
    Raises ScrapeTimeout if max_seconds > 0 and no answer appeared in time.
    """
    if state is None:
        state = ScrapeState()
    started = time.monotonic()

    while True:
        text = await read_text(region, read_timeout)
        delta = state.observe(text)
        if delta:
            yield delta

        if has_completion(state.full):
            return

        if max_seconds and time.monotonic() - started >= max_seconds:
            raise ScrapeTimeout(
                f"No final answer from Ether0 after {max_seconds:g} seconds"
            )

        await asyncio.sleep(interval)
