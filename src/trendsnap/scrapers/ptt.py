"""PTT hot articles, read through the PTT Web front end.

The hot list renders lazily. The page is only scrolled when fewer than the
target number of articles are visible, so the ranking order is kept. Field
lookups go through stable semantic classes, attribute selectors and URL
patterns, in that order, instead of generated Vue class names.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional

from bs4 import BeautifulSoup, Tag

from trendsnap.config import OUTPUT_FILES, URLS, ScrapeSettings
from trendsnap.datastore import save_data
from trendsnap.errors import EmptyResultError
from trendsnap.logs import get_scrape_log
from trendsnap.models import CollectionResult, TrendingItem
from trendsnap.services.browser import BrowserSession, navigate, wait_for_markers
from trendsnap.services.collector import DomProbe, IncrementalCollector
from trendsnap.services.dedupe import build_collection_result
from trendsnap.services.extraction import (
    Strategy,
    attr_of,
    first_line_of,
    first_value,
    matching,
    parent_text_of,
    parse_counter,
    text_of,
)

__all__ = ["extract_item", "find_containers", "is_qualifying", "parse_articles", "run"]

log = get_scrape_log(__name__)

SOURCE = "PTT"

CONTAINER_SELECTOR = ".e7-container"
ARTICLE_LINK = 'a[href*="/bbs/"]'
USER_LINK = 'a[href*="/user/"]'
SCORE_MARKER = ".e7-recommendScore"
LOADING_SELECTOR = ".infinite-loading-container .loading-spiral"

READINESS_MARKERS = [
    (CONTAINER_SELECTOR, 15_000),
    (ARTICLE_LINK, 10_000),
    (SCORE_MARKER, 10_000),
]

INITIAL_SETTLE_MS = 8_000
STABLE_WAIT_MS = 5_000
POST_SCROLL_WAIT_MS = 3_000

_PUBLISH_TIME = re.compile(r"(\d{4}/\d{2}/\d{2} \d{2}:\d{2})")
_BRACKETED = re.compile(r"\[\s*([^\[\]]+?)\s*\]")
_HEIGHT_DECLARATION = re.compile(r"(?:^|;)\s*height\s*:", re.IGNORECASE)


def _bracketless(strategy: Strategy) -> Strategy:
    """Prefer the bracketed board name, e.g. ``Gossiping`` from ``[ Gossiping ] 八卦``."""

    def wrapped(node: Tag) -> Optional[str]:
        value = strategy(node)
        if not value:
            return None
        match = _BRACKETED.search(value)
        if match:
            return match.group(1).strip() or None
        return re.sub(r"[\[\]]", "", value).strip() or None

    return wrapped


def _publish_time(node: Tag) -> Optional[str]:
    for element in node.select(".e7-grey-text, .text-no-wrap"):
        match = _PUBLISH_TIME.search(element.get_text(" ", strip=True))
        if match:
            return match.group(1)
    return None


SCORE_STRATEGIES: List[Strategy] = [
    text_of(SCORE_MARKER),
    parent_text_of('[e7description="推文:"]'),
    text_of('[class*="recommend"][class*="Score"]'),
]

COUNT_STRATEGIES: List[Strategy] = [
    text_of(".e7-recommendCount"),
    parent_text_of('[e7description="回應:"]'),
    text_of('[class*="recommend"][class*="Count"]'),
]

TITLE_STRATEGIES: List[Strategy] = [
    text_of(f"{ARTICLE_LINK} .e7-show-if-device-is-not-xs"),
    text_of(f"{ARTICLE_LINK} .e7-show-if-device-is-xs"),
    first_line_of(ARTICLE_LINK),
]

LINK_STRATEGIES: List[Strategy] = [attr_of(ARTICLE_LINK, "href")]

AUTHOR_STRATEGIES: List[Strategy] = [
    text_of(USER_LINK),
    matching(attr_of(USER_LINK, "href"), r"/user/(.+)$"),
]

BOARD_STRATEGIES: List[Strategy] = [
    _bracketless(text_of(".e7-boardName .e7-link-to-article")),
    _bracketless(text_of(".e7-boardName")),
    _bracketless(text_of('[class*="boardName"]')),
    matching(attr_of(ARTICLE_LINK, "href"), r"/bbs/([^/]+)/"),
]

PUBLISH_TIME_STRATEGIES: List[Strategy] = [_publish_time]

IMAGE_STRATEGIES: List[Strategy] = [attr_of(".e7-preview img", "src")]


def is_qualifying(container: Tag) -> bool:
    """A container counts as an article once it has a score and a link."""

    return (
        container.select_one(SCORE_MARKER) is not None
        and container.select_one(ARTICLE_LINK) is not None
    )


def _is_placeholder(container: Tag) -> bool:
    children = container.find_all(recursive=False)
    if len(children) != 1:
        return False
    child = children[0]
    classes = child.get("class") or []
    return (
        _HEIGHT_DECLARATION.search(child.get("style") or "") is not None
        and "e7-left" not in classes
        and "e7-right" not in classes
    )


def _looks_like_article(div: Tag) -> bool:
    has_link = div.select_one(ARTICLE_LINK) is not None
    has_score = (
        div.select_one(SCORE_MARKER) is not None
        or div.select_one('[class*="recommend"]') is not None
        or div.select_one('i[e7description="推文:"]') is not None
    )
    return has_link and has_score


def find_containers(soup: BeautifulSoup) -> List[Tag]:
    """Return article containers in page order."""

    containers = soup.select(CONTAINER_SELECTOR)
    if containers:
        return containers
    log.warn("No %s containers found, falling back to content based search", CONTAINER_SELECTOR)
    return [div for div in soup.find_all("div") if _looks_like_article(div)]


def extract_item(container: Tag) -> Optional[TrendingItem]:
    """Build a :class:`TrendingItem` from one container.

    Returns ``None`` for layout placeholders and containers without an
    article link.
    """

    if _is_placeholder(container) or container.select_one(ARTICLE_LINK) is None:
        return None

    score = parse_counter(first_value(container, SCORE_STRATEGIES, "0"), signed=True)
    count = parse_counter(first_value(container, COUNT_STRATEGIES, "0"), signed=False)

    return TrendingItem(
        title=first_value(container, TITLE_STRATEGIES),
        link=first_value(container, LINK_STRATEGIES),
        author=first_value(container, AUTHOR_STRATEGIES),
        category=first_value(container, BOARD_STRATEGIES),
        score_raw=str(score),
        comment_count_raw=str(count),
        published_at=first_value(container, PUBLISH_TIME_STRATEGIES),
        preview_image_url=first_value(container, IMAGE_STRATEGIES),
    )


def parse_articles(html: str) -> List[TrendingItem]:
    """Extract valid articles from the hot list HTML, in page order."""

    soup = BeautifulSoup(html, "lxml")
    articles: List[TrendingItem] = []
    for index, container in enumerate(find_containers(soup)):
        try:
            item = extract_item(container)
        except Exception as exc:  # noqa: BLE001 - one bad container must not end the run
            log.warn("Skipping container %d: %s", index, exc)
            continue
        if item is None:
            continue
        if not item.is_valid:
            log.debug("Dropping container %d without title or link", index)
            continue
        articles.append(item)
    return articles


def _log_summary(result: CollectionResult, target: int) -> None:
    for index, article in enumerate(result.items[:3], start=1):
        log.info(
            "%d. %s | score %s, comments %s | %s @ %s | %s | image: %s | %s",
            index,
            article.title,
            article.score_raw,
            article.comment_count_raw,
            article.author,
            article.category,
            article.published_at,
            "yes" if article.preview_image_url else "no",
            article.link,
        )
    log.result("Found %d articles, kept %d", result.total_found, result.returned_count)
    if result.returned_count < target:
        log.warn("Target was %d articles but only %d were found", target, result.returned_count)
    else:
        log.success("Collected the top %d articles", result.returned_count)


def run(
    settings: ScrapeSettings,
    *,
    session_factory: Callable[..., object] = BrowserSession,
) -> CollectionResult:
    """Scrape the PTT hot list and write ``ptt-trends.json``."""

    target = settings.target_count
    with session_factory(headless=settings.headless) as page:
        navigate(page, URLS["ptt_hot"])
        page.wait_for_timeout(INITIAL_SETTLE_MS)
        wait_for_markers(page, READINESS_MARKERS)

        collector = IncrementalCollector(
            target,
            settings.max_scroll_attempts,
            sleep=lambda seconds: page.wait_for_timeout(seconds * 1000),
        )
        probe = DomProbe(page, CONTAINER_SELECTOR, is_qualifying, loading_selector=LOADING_SELECTOR)
        progress = collector.run(probe)
        log.result("Collector finished with %d articles (%s)", progress.final_count, progress.stop_reason)

        page.wait_for_timeout(POST_SCROLL_WAIT_MS if progress.scrolled else STABLE_WAIT_MS)
        log.start("Extracting articles in page order")
        html = page.content()

    result = build_collection_result(parse_articles(html), target)
    save_data(OUTPUT_FILES["ptt"], result, data_root=settings.data_root)
    _log_summary(result, target)

    if result.returned_count == 0:
        raise EmptyResultError(SOURCE)
    return result
