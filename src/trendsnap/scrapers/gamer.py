"""Bahamut (gamer.com.tw) home page hot topics."""

from __future__ import annotations

import json
from typing import Callable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from trendsnap.config import OUTPUT_FILES, URLS, ScrapeSettings
from trendsnap.datastore import save_data
from trendsnap.errors import EmptyResultError
from trendsnap.logs import get_scrape_log
from trendsnap.models import GamerTrend
from trendsnap.services.browser import BrowserSession, navigate, wait_for_markers
from trendsnap.services.extraction import attr_of, first_value, parse_counter, text_of

__all__ = ["parse_counters", "parse_item", "parse_trends", "run"]

log = get_scrape_log(__name__)

SOURCE = "Bahamut"

ITEM_SELECTOR = "#postPanel .index-list__column .index-list__item"
READINESS_MARKERS = [
    ("#postPanel .index-list__column", 15_000),
    (".index-list__item", 10_000),
]

SCROLL_TO_PANEL = (
    "() => { const panel = document.querySelector('#postPanel');"
    " if (panel) { panel.scrollIntoView({ behavior: 'smooth' }); } }"
)


def _data_value(cell: Tag) -> str:
    data = cell.find("data")
    return data.get_text(strip=True) if data is not None else "0"


def parse_counters(item: Tag) -> Tuple[int, int, int]:
    """Return ``(gp, bp, comments)`` for a card.

    Cards normally carry the three counters in that order. When fewer cells
    are present each one is identified by its icon instead.
    """

    cells = item.select(".index-card__data")
    if len(cells) >= 3:
        return (
            parse_counter(_data_value(cells[0]), signed=False),
            parse_counter(_data_value(cells[1]), signed=False),
            parse_counter(_data_value(cells[2]), signed=False),
        )

    gp = bp = comments = 0
    for cell in cells:
        icon = cell.select_one(".info__icon")
        if icon is None:
            continue
        classes = icon.get("class") or []
        value = parse_counter(_data_value(cell), signed=False)
        if "icon-gp" in classes and "rotate" in classes:
            bp = value
        elif "icon-gp" in classes:
            gp = value
        elif "icon-message" in classes:
            comments = value
    return gp, bp, comments


def _author(item: Tag, default: str) -> str:
    button = item.select_one("[data-home-bookmark]")
    if button is None:
        return default
    try:
        bookmark = json.loads(button.get("data-home-bookmark") or "")
    except json.JSONDecodeError:
        log.debug("Unreadable bookmark data, using board name as author")
        return default
    if isinstance(bookmark, dict) and bookmark.get("userid"):
        return str(bookmark["userid"])
    return default


def parse_item(item: Tag) -> Optional[GamerTrend]:
    names = [element.get_text(strip=True) for element in item.select(".index-list__name")]
    board_name = names[0] if names else ""
    title = first_value(item, [text_of(".index-list__heading")])
    if not (title and board_name):
        return None

    gp, bp, comments = parse_counters(item)
    return GamerTrend(
        board_name=board_name,
        board_image=first_value(item, [attr_of(".index-list__profile img", "src")]),
        sub_board=names[1] if len(names) > 1 else "",
        title=title,
        content=first_value(item, [text_of(".index-list__msg")]),
        article_image=first_value(item, [attr_of(".index-list__cover img", "src")]),
        gp=gp,
        bp=bp,
        comments=comments,
        link=first_value(item, [attr_of(".index-list__content", "href")]),
        author=_author(item, board_name),
    )


def parse_trends(html: str) -> List[GamerTrend]:
    soup = BeautifulSoup(html, "lxml")
    items = soup.select(ITEM_SELECTOR)
    if not items:
        log.warn("No hot topic cards under #postPanel")
        return []

    trends: List[GamerTrend] = []
    for index, item in enumerate(items):
        try:
            trend = parse_item(item)
        except Exception as exc:  # noqa: BLE001 - one bad card must not end the run
            log.warn("Skipping card %d: %s", index, exc)
            continue
        if trend is not None:
            trends.append(trend)
    return trends


def run(
    settings: ScrapeSettings,
    *,
    session_factory: Callable[..., object] = BrowserSession,
) -> List[GamerTrend]:
    """Scrape the hot topics panel and write ``gamer-trends.json``."""

    with session_factory(headless=settings.headless) as page:
        log.info("Loading Bahamut home page")
        navigate(page, URLS["gamer_home"], wait_until="networkidle")
        wait_for_markers(page, READINESS_MARKERS)
        page.evaluate(SCROLL_TO_PANEL)
        page.wait_for_timeout(2_000)
        html = page.content()

    trends = parse_trends(html)
    save_data(
        OUTPUT_FILES["gamer"],
        {"trends": [trend.to_json_dict() for trend in trends]},
        data_root=settings.data_root,
    )

    log.success("Extraction finished")
    log.result("Found %d hot topics", len(trends))
    for index, trend in enumerate(trends[:3], start=1):
        log.info(
            "%d. %s > %s | %s | gp %d, bp %d, comments %d | %s",
            index,
            trend.board_name,
            trend.sub_board,
            trend.title,
            trend.gp,
            trend.bp,
            trend.comments,
            trend.link,
        )

    if not trends:
        raise EmptyResultError(SOURCE)
    return trends
