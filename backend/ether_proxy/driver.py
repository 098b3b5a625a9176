"""
Drives the Ether0 UI: load the app, type the question, submit, and hand back
the locator of the dark answer panel that streams the model's reasoning.
"""

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ether_proxy.config import ETHER0_URL, Settings


QUESTION_INPUT = 'textarea[aria-label*="Ask your chemistry question"]'
SUBMIT_BUTTON = 'button[kind="primary"]:has-text("Submit")'
# Streamlit emits the panel colour either as rgb() or hex depending on build
ANSWER_REGION = (
    'div[style*="background-color: rgb(38, 39, 48)"], '
    'div[style*="background-color: #26272f"]'
)


class DriverError(Exception):
    pass


class NavigationTimeout(DriverError):
    pass


class ElementNotFound(DriverError):
    pass


async def submit_question(page: Page, question: str, settings: Settings) -> Locator:
    print("[ask] Navigating to Ether0...")
    try:
        await page.goto(
            ETHER0_URL,
            wait_until="domcontentloaded",
            timeout=settings.navigation_timeout,
        )
    except PlaywrightTimeoutError as e:
        raise NavigationTimeout(f"Timed out loading {ETHER0_URL}: {e}") from e

    try:
        textarea = await page.wait_for_selector(QUESTION_INPUT, timeout=settings.input_timeout)
    except PlaywrightTimeoutError as e:
        raise ElementNotFound(f"Question input not found: {e}") from e
    await textarea.fill(question)

    try:
        submit = await page.wait_for_selector(SUBMIT_BUTTON, timeout=settings.submit_timeout)
    except PlaywrightTimeoutError as e:
        raise ElementNotFound(f"Submit button not found: {e}") from e
    await submit.click()

    box = page.locator(ANSWER_REGION).first
    try:
        await box.wait_for(state="visible", timeout=settings.answer_timeout)
    except PlaywrightTimeoutError as e:
        raise ElementNotFound(f"Answer panel never appeared: {e}") from e
    return box
