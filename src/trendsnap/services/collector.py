"""Scroll a lazily loading page until enough items are visible."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from bs4 import BeautifulSoup, Tag

from trendsnap.config import MAX_SCROLL_ATTEMPTS, TARGET_COUNT

__all__ = [
    "CollectionProgress",
    "DomProbe",
    "IncrementalCollector",
    "PageProbe",
    "STOP_ATTEMPTS",
    "STOP_EXHAUSTED",
    "STOP_SUFFICIENT",
    "STOP_TARGET_REACHED",
]

logger = logging.getLogger(__name__)

STOP_SUFFICIENT = "sufficient"
STOP_TARGET_REACHED = "target_reached"
STOP_EXHAUSTED = "exhausted"
STOP_ATTEMPTS = "attempts_exhausted"


class PageProbe(Protocol):
    """What the collector needs to know about, and do to, a page."""

    def count(self) -> int:
        ...

    def scroll(self) -> None:
        ...

    def is_loading(self) -> bool:
        ...


@dataclass
class CollectionProgress:
    """Counts observed while collecting."""

    initial_count: int
    final_count: int
    scrolls: int
    stop_reason: str

    @property
    def scrolled(self) -> bool:
        return self.scrolls > 0


class IncrementalCollector:
    """Best-effort loader for pages that render more items on scroll.

    When ``target`` qualifying items are already visible nothing is touched,
    so the page keeps its original ranking. Otherwise the viewport is moved
    forward in partial steps until the target is met, the count stops
    growing, or ``max_attempts`` scrolls were made. Never raises on a short
    page; the caller extracts whatever is there.
    """

    def __init__(
        self,
        target: int = TARGET_COUNT,
        max_attempts: int = MAX_SCROLL_ATTEMPTS,
        *,
        settle_delay: float = 2.0,
        loading_delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.target = target
        self.max_attempts = max_attempts
        self.settle_delay = settle_delay
        self.loading_delay = loading_delay
        self.sleep = sleep

    def run(self, probe: PageProbe) -> CollectionProgress:
        initial = probe.count()
        logger.info("Page shows %d qualifying items initially", initial)

        if initial >= self.target:
            logger.info("Enough items already visible, not scrolling")
            return CollectionProgress(initial, initial, 0, STOP_SUFFICIENT)

        current = initial
        scrolls = 0
        reason = STOP_ATTEMPTS
        while scrolls < self.max_attempts:
            scrolls += 1
            logger.debug("Scroll %d/%d", scrolls, self.max_attempts)
            probe.scroll()
            self.sleep(self.settle_delay)

            if probe.is_loading():
                logger.debug("Loading indicator active, waiting longer")
                self.sleep(self.loading_delay)

            previous = current
            current = probe.count()
            logger.info("%d qualifying items after scroll %d", current, scrolls)

            if current >= self.target:
                reason = STOP_TARGET_REACHED
                break
            if current == previous:
                logger.warning("Item count did not grow, assuming the end of the list")
                reason = STOP_EXHAUSTED
                break

        return CollectionProgress(initial, current, scrolls, reason)


class DomProbe:
    """:class:`PageProbe` that inspects a Playwright page's rendered HTML.

    ``qualifies`` decides whether a container is a real item rather than a
    layout placeholder; it is source specific.
    """

    def __init__(
        self,
        page,
        container_selector: str,
        qualifies: Callable[[Tag], bool],
        *,
        loading_selector: Optional[str] = None,
        scroll_ratio: float = 0.8,
    ) -> None:
        self.page = page
        self.container_selector = container_selector
        self.qualifies = qualifies
        self.loading_selector = loading_selector
        self.scroll_ratio = scroll_ratio

    def _soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.page.content(), "lxml")

    def count(self) -> int:
        containers = self._soup().select(self.container_selector)
        return sum(1 for container in containers if self.qualifies(container))

    def scroll(self) -> None:
        self.page.evaluate(
            "ratio => window.scrollBy(0, window.innerHeight * ratio)", self.scroll_ratio
        )

    def is_loading(self) -> bool:
        if not self.loading_selector:
            return False
        indicator = self._soup().select_one(self.loading_selector)
        if indicator is None:
            return False
        style = (indicator.get("style") or "").replace(" ", "").lower()
        return "display:none" not in style
