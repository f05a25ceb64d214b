"""Google Trends (Taiwan, past four hours) trending searches."""

from __future__ import annotations

import re
from typing import Callable, List, Optional

from bs4 import BeautifulSoup, Tag

from trendsnap.config import OUTPUT_FILES, URLS, ScrapeSettings
from trendsnap.datastore import save_data
from trendsnap.errors import EmptyResultError
from trendsnap.logs import get_scrape_log
from trendsnap.models import GoogleTrend
from trendsnap.services.browser import BrowserSession, navigate, random_delay_ms, wait_for_markers

__all__ = ["parse_row", "parse_trends", "run"]

log = get_scrape_log(__name__)

SOURCE = "Google Trends"

# Lines in the keyword cell that describe the trend rather than name it.
_META_MARKERS = ("次搜尋", "活躍", "持續時間", "·")
_VOLUME = re.compile(r"(\d+[\d,]*\+)")
_STARTED = re.compile(r"(\d+\s*[小時分鐘]+前)")


def _keyword(cell: Tag) -> str:
    for div in cell.find_all("div"):
        text = div.get_text(strip=True)
        if text and not any(marker in text for marker in _META_MARKERS):
            return text
    return ""


def parse_row(row: Tag) -> Optional[GoogleTrend]:
    cells = row.find_all("td")
    if len(cells) <= 3:
        return None

    keyword = _keyword(cells[1])
    volume_match = _VOLUME.search(cells[2].get_text(" ", strip=True))
    started_match = _STARTED.search(cells[3].get_text(" ", strip=True))
    if not (keyword and volume_match and started_match):
        return None

    return GoogleTrend(
        keyword=keyword,
        search_volume=volume_match.group(1),
        started=started_match.group(1),
    )


def parse_trends(html: str) -> List[GoogleTrend]:
    soup = BeautifulSoup(html, "lxml")
    trends: List[GoogleTrend] = []
    for row in soup.select("tbody tr"):
        trend = parse_row(row)
        if trend is not None:
            trends.append(trend)
    return trends


def run(
    settings: ScrapeSettings,
    *,
    session_factory: Callable[..., object] = BrowserSession,
) -> List[GoogleTrend]:
    """Scrape the trending table and write ``google-trends.json``."""

    with session_factory(headless=settings.headless) as page:
        # Random pauses keep the request pattern from looking scripted.
        delay = random_delay_ms(3_000, 13_000)
        log.info("Waiting %d ms before loading the page", delay)
        page.wait_for_timeout(delay)

        navigate(page, URLS["google_trends"])

        delay = random_delay_ms(3_000, 8_000)
        log.info("Waiting %d ms after the page loaded", delay)
        page.wait_for_timeout(delay)

        wait_for_markers(page, [("td", 10_000)])
        html = page.content()

    trends = parse_trends(html)
    save_data(
        OUTPUT_FILES["google"],
        {"trends": [trend.to_json_dict() for trend in trends]},
        data_root=settings.data_root,
    )

    log.success("Extraction finished")
    log.result("Found %d trends", len(trends))
    for trend in trends[:5]:
        log.info("%s | %s | %s", trend.keyword, trend.search_volume, trend.started)

    if not trends:
        raise EmptyResultError(SOURCE)
    return trends
