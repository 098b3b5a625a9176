"""
Request blocking for pages we drive.

Ether0 only needs its HTML, scripts and websocket traffic to stream an
answer. Images, fonts and trackers are aborted before they hit the network.
"""

from playwright.async_api import Page, Route

from ether_proxy.config import Settings


def should_block(url: str, extensions: list[str], domains: list[str]) -> bool:
    """True if the URL looks like a binary asset or a tracking endpoint."""
    if any(ext in url for ext in extensions):
        return True
    return any(domain in url for domain in domains)


def make_route_handler(settings: Settings):
    extensions = list(settings.blocked_suffixes)
    domains = list(settings.blocked_domains)

    async def handle_route(route: Route):
        if should_block(route.request.url, extensions, domains):
            await route.abort()
            return
        await route.continue_()

    return handle_route


async def install_interceptor(page: Page, settings: Settings):
    """Apply the blocking policy to every request this page makes."""
    await page.route("**/*", make_route_handler(settings))
