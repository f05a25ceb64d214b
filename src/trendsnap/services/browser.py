"""Playwright session handling shared by the browser based scrapers."""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence, Tuple

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from trendsnap.config import USER_AGENTS
from trendsnap.errors import SetupError
from trendsnap.services.retry import RetryPolicy

__all__ = [
    "BrowserSession",
    "LAUNCH_ARGS",
    "navigate",
    "random_delay_ms",
    "wait_for_markers",
]

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-features=VizDisplayCompositor",
]

VIEWPORT = {"width": 1920, "height": 1080}

HIDE_WEBDRIVER_SCRIPT = (
    "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"
)

#: (selector, timeout in milliseconds)
Marker = Tuple[str, int]


class BrowserSession:
    """Context manager yielding a configured Playwright page.

    Each session gets a random user agent from :data:`USER_AGENTS`, a desktop
    viewport and an init script hiding ``navigator.webdriver``. The context,
    browser and driver are closed on every exit path.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        user_agents: Sequence[str] = USER_AGENTS,
    ) -> None:
        self.headless = headless
        self.user_agent = random.choice(list(user_agents))
        self._playwright = None
        self._browser = None
        self._context = None

    def __enter__(self):
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.headless, args=LAUNCH_ARGS
            )
            self._context = self._browser.new_context(
                user_agent=self.user_agent, viewport=VIEWPORT
            )
            self._context.add_init_script(HIDE_WEBDRIVER_SCRIPT)
            return self._context.new_page()
        except PlaywrightError as exc:
            self.close()
            raise SetupError(f"Could not start browser session: {exc}") from exc

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release context, browser and driver; a failing step does not stop the rest."""

        context, self._context = self._context, None
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None

        for name, release in (
            ("context", context and context.close),
            ("browser", browser and browser.close),
            ("playwright driver", playwright and playwright.stop),
        ):
            if release is None:
                continue
            try:
                release()
            except PlaywrightError as exc:
                logger.warning("Could not close %s cleanly: %s", name, exc)


def navigate(
    page,
    url: str,
    *,
    wait_until: str = "domcontentloaded",
    timeout_ms: int = 30_000,
    policy: RetryPolicy | None = None,
) -> None:
    """Open ``url`` in ``page``, retrying navigation errors.

    Raises :class:`SetupError` when every attempt failed.
    """

    policy = policy or RetryPolicy(max_attempts=2, delay=3.0, retry_on=(PlaywrightError,))
    try:
        policy.call(page.goto, url, wait_until=wait_until, timeout=timeout_ms)
    except PlaywrightError as exc:
        raise SetupError(f"Navigation to {url} failed: {exc}") from exc


def wait_for_markers(page, markers: Sequence[Marker]) -> Optional[str]:
    """Wait for the first marker selector that shows up in the document.

    Markers are tried in order; a timeout moves on to the next one. Returns
    the selector that matched, or ``None`` when all of them timed out. The
    caller proceeds either way.
    """

    for index, (selector, timeout_ms) in enumerate(markers):
        try:
            page.wait_for_selector(selector, timeout=timeout_ms, state="attached")
        except PlaywrightTimeoutError:
            if index + 1 < len(markers):
                logger.warning("Timed out waiting for %s, trying the next marker", selector)
            else:
                logger.warning("Timed out waiting for %s", selector)
            continue
        logger.info("Found marker %s", selector)
        return selector

    if markers:
        logger.warning("No readiness marker appeared, continuing with whatever is loaded")
    return None


def random_delay_ms(low_ms: int, high_ms: int) -> int:
    """Return a random delay in ``[low_ms, high_ms)`` milliseconds."""

    return random.randrange(low_ms, high_ms)
