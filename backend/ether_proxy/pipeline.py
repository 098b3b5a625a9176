"""
One /ask request end to end: get a page, ask Ether0, relay its reasoning,
then the extracted SMILES and a renderable snippet. Always ends with `done`.
"""

from typing import AsyncGenerator

from ether_proxy.browser_pool import BrowserPool, browser_pool
from ether_proxy.config import Settings, get_settings
from ether_proxy.driver import submit_question
from ether_proxy.interceptor import install_interceptor
from ether_proxy.scraper import ScrapeState, stream_reasoning
from ether_proxy.sse_utils import (
    answer_event,
    done_event,
    error_event,
    reasoning_event,
    structure_event,
)
from ether_proxy.structure import NO_RESULT, extract_structure, render_structure_html


async def ask_streaming(
    question: str,
    pool: BrowserPool | None = None,
    settings: Settings | None = None,
) -> AsyncGenerator[str, None]:
    pool = pool or browser_pool
    settings = settings or get_settings()
    session = None

    try:
        session = await pool.acquire()
        page = session.page
        await install_interceptor(page, settings)

        region = await submit_question(page, question, settings)

        state = ScrapeState()
        async for delta in stream_reasoning(
            region,
            interval=settings.poll_interval,
            max_seconds=settings.scrape_max_seconds,
            read_timeout=settings.read_timeout,
            state=state,
        ):
            yield reasoning_event(delta)

        smiles = extract_structure(state.full)
        yield answer_event(smiles or NO_RESULT)

        if smiles:
            html = render_structure_html(
                smiles,
                settings.smiles_drawer_url,
                escape=settings.escape_structure_html,
            )
            yield structure_event(smiles, html)

    except Exception as e:
        print(f"[ask] Error: {e}")
        yield error_event(str(e) or e.__class__.__name__)

    finally:
        if session is not None:
            try:
                await session.close()
            except Exception as e:
                print(f"[ask] Failed to close session: {e}")

    yield done_event()
