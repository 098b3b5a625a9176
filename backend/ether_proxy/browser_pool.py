"""
Keeps one pre-warmed Chromium around so the first /ask never pays cold start.
Shortly after boot a background task launches a browser and loads Ether0 once.
Requests derive their own context from it; if it is missing or broken they
launch a throwaway browser instead and close it when done.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from ether_proxy.config import ETHER0_URL, Settings, get_settings
from ether_proxy.interceptor import install_interceptor


CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--single-process",
    "--no-zygote",
    "--disable-background-networking",
    "--disable-default-apps",
    "--disable-extensions",
    "--disable-sync",
    "--disable-translate",
    "--blink-settings=imagesEnabled=false",
    "--media-cache-size=0",
    "--disk-cache-size=0",
]


class PoolState(str, Enum):
    COLD = "cold"
    WARMING = "warming"
    READY = "ready"
    FAILED = "failed"


@dataclass
class Session:
    """One browsing context + page handed to a single request.

    owned=True means the request launched the browser itself and must close it.
    Shared sessions only ever close their own context.
    """
    browser: Browser
    context: BrowserContext
    page: Page
    owned: bool
    closed: bool = False

    async def close(self):
        if self.closed:
            return
        self.closed = True
        if self.owned:
            await self.browser.close()
        else:
            await self.context.close()


class BrowserPool:
    def __init__(self, settings: Settings | None = None, launcher=None):
        self._settings = settings
        self._launcher = launcher
        self._playwright = None
        self._playwright_lock = asyncio.Lock()
        self._warm_browser: Browser | None = None
        self._warm_page: Page | None = None
        self._warm_task: asyncio.Task | None = None
        self.state = PoolState.COLD

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    async def launch_browser(self) -> Browser:
        """Launch a Chromium tuned for minimal memory/CPU."""
        if self._launcher is not None:
            return await self._launcher()
        async with self._playwright_lock:
            if self._playwright is None:
                self._playwright = await async_playwright().start()
        return await self._playwright.chromium.launch(
            headless=self.settings.headless,
            args=CHROMIUM_ARGS,
        )

    # ── Warm-up ────────────────────────────────────────────────────────────

    def start_warm_up(self, delay: float | None = None):
        """Schedule the one-time warm-up. Call from server lifespan."""
        if self._warm_task is not None:
            print("[browser-pool] Warm-up already scheduled, skipping")
            return
        if delay is None:
            delay = self.settings.warm_up_delay
        self._warm_task = asyncio.create_task(self.warm_up(delay))

    async def warm_up(self, delay: float = 0):
        """Launch and pre-navigate the shared browser. Only cancellation propagates."""
        if delay:
            await asyncio.sleep(delay)
        self.state = PoolState.WARMING
        browser = None
        try:
            print("[warm-up] Launching Chromium...")
            browser = await self.launch_browser()
            context = await browser.new_context(bypass_csp=True)
            page = await context.new_page()
            await install_interceptor(page, self.settings)

            print("[warm-up] Preloading Ether0...")
            await page.goto(
                ETHER0_URL,
                wait_until="domcontentloaded",
                timeout=self.settings.navigation_timeout,
            )

            self._warm_browser = browser
            # Held so the pre-navigated page (and its loaded app) stays alive
            self._warm_page = page
            self.state = PoolState.READY
            print("[warm-up] Done, browser is ready")
        except asyncio.CancelledError:
            self.state = PoolState.FAILED
            print("[warm-up] Cancelled")
            await self._discard(browser)
            raise
        except Exception as e:
            self.state = PoolState.FAILED
            print(f"[warm-up] Failed: {e}")
            await self._discard(browser)

    async def _discard(self, browser: Browser | None):
        """Close a browser that never made it to ready."""
        if browser is None:
            return
        try:
            await browser.close()
        except Exception as close_err:
            print(f"[warm-up] Failed to close half-started browser: {close_err}")

    # ── Acquisition ────────────────────────────────────────────────────────

    async def try_acquire_warm(self) -> Session | None:
        """Derive a fresh context from the warm browser, or None if we can't."""
        browser = self._warm_browser
        if self.state is not PoolState.READY or browser is None:
            return None
        try:
            context = await browser.new_context(bypass_csp=True)
        except Exception as e:
            print(f"[browser-pool] Warm browser unusable ({e}), falling back")
            return None
        try:
            page = await context.new_page()
        except Exception as e:
            print(f"[browser-pool] Warm browser unusable ({e}), falling back")
            try:
                await context.close()
            except Exception:
                pass
            return None
        return Session(browser=browser, context=context, page=page, owned=False)

    async def acquire(self) -> Session:
        """
        Get a ready page. Uses the warm browser when possible, otherwise
        launches a fresh one (slow path). A failing fresh launch propagates.
        """
        session = await self.try_acquire_warm()
        if session is not None:
            return session

        print(f"[browser-pool] No warm browser (state={self.state.value}), launching fallback")
        browser = await self.launch_browser()
        try:
            context = await browser.new_context(bypass_csp=True)
            page = await context.new_page()
        except Exception:
            await browser.close()
            raise
        return Session(browser=browser, context=context, page=page, owned=True)

    # ── Lifecycle ──────────────────────────────────────────────────────────

    def status(self) -> dict:
        return {"state": self.state.value, "warm": self.state is PoolState.READY}

    async def shutdown(self):
        """Close the warm browser and the Playwright driver on process exit."""
        if self._warm_task is not None and not self._warm_task.done():
            self._warm_task.cancel()
            try:
                await self._warm_task
            except asyncio.CancelledError:
                pass
        if self._warm_browser is not None:
            try:
                await self._warm_browser.close()
            except Exception as e:
                print(f"[browser-pool] Failed to close warm browser: {e}")
            self._warm_browser = None
            self._warm_page = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


# Global singleton
browser_pool = BrowserPool()
