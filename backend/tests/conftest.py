import pytest
from unittest.mock import AsyncMock, Mock

from ether_proxy.config import Settings


def make_page():
    page = Mock()
    page.route = AsyncMock()
    page.goto = AsyncMock()
    return page


def make_context():
    context = Mock()
    context.new_page = AsyncMock(side_effect=lambda: make_page())
    context.close = AsyncMock()
    return context


def make_browser():
    browser = Mock()
    browser.new_context = AsyncMock(side_effect=lambda **kwargs: make_context())
    browser.close = AsyncMock()
    return browser


@pytest.fixture
def settings():
    return Settings(
        warm_up_enabled=False,
        warm_up_delay=0,
        poll_interval=0,
        scrape_max_seconds=5,
    )


@pytest.fixture
def launcher():
    """Async launcher that hands out a new fake browser per call."""
    browsers = []

    async def launch():
        browser = make_browser()
        browsers.append(browser)
        return browser

    launch.browsers = browsers
    return launch
