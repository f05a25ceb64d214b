"""Komica general board: today's top threads.

The catalogue page prints the ranking as plain text inside a ``<pre>``
block, one linked thread per line with ``|`` separated columns::

    12 | No.123 | 24/05/01 | 12:34 | 無題 | first words of the post
"""

from __future__ import annotations

import html as htmllib
import re
from typing import Callable, List, Optional

from bs4 import BeautifulSoup

from trendsnap.config import OUTPUT_FILES, URLS, ScrapeSettings
from trendsnap.datastore import save_data
from trendsnap.errors import EmptyResultError
from trendsnap.logs import get_scrape_log
from trendsnap.models import KomicaTrend
from trendsnap.services.browser import BrowserSession, navigate, wait_for_markers
from trendsnap.services.extraction import parse_counter

__all__ = ["parse_line", "parse_trends", "run"]

log = get_scrape_log(__name__)

SOURCE = "Komica"
HEADING = "Top 50 Threads [Today]"

_HREF = re.compile(r'href="([^"]+)"')
_TAG = re.compile(r"<[^>]*>")


def parse_line(line: str) -> Optional[KomicaTrend]:
    """Parse one line of the ``<pre>`` markup, or return ``None``."""

    line = line.strip()
    link_match = _HREF.search(line)
    if not line or not link_match:
        return None

    raw_text = htmllib.unescape(_TAG.sub("", line)).replace(HEADING, "").strip()
    parts = raw_text.split("|")
    if len(parts) < 6:
        return None

    return KomicaTrend(
        reply_count=parse_counter(parts[0], signed=False),
        date=parts[2].strip(),
        time=parts[3].strip(),
        title=parts[4].strip(),
        description=parts[5].strip(),
        link=htmllib.unescape(link_match.group(1)),
        raw_text=raw_text,
    )


def parse_trends(html: str) -> List[KomicaTrend]:
    soup = BeautifulSoup(html, "lxml")
    block = next((pre for pre in soup.find_all("pre") if HEADING in pre.get_text()), None)
    if block is None:
        log.warn("No <pre> block containing %r", HEADING)
        return []

    trends: List[KomicaTrend] = []
    for line in block.decode_contents().split("\n"):
        trend = parse_line(line)
        if trend is not None:
            trends.append(trend)
    return trends


def run(
    settings: ScrapeSettings,
    *,
    session_factory: Callable[..., object] = BrowserSession,
) -> List[KomicaTrend]:
    """Scrape the catalogue and write ``komica-trends.json``."""

    with session_factory(headless=settings.headless) as page:
        log.info("Loading page")
        # The board is often slow to answer.
        navigate(page, URLS["komica_catlist"], timeout_ms=60_000)
        wait_for_markers(page, [("pre", 10_000)])
        html = page.content()

    trends = parse_trends(html)
    save_data(
        OUTPUT_FILES["komica"],
        {"trends": [trend.to_json_dict() for trend in trends]},
        data_root=settings.data_root,
    )

    log.success("Extraction finished")
    log.result("Found %d threads", len(trends))
    for index, trend in enumerate(trends[:3], start=1):
        log.info(
            "%d. replies %d | %s %s | %s | %s | %s",
            index,
            trend.reply_count,
            trend.date,
            trend.time,
            trend.title,
            trend.description,
            trend.link,
        )

    if not trends:
        raise EmptyResultError(SOURCE)
    return trends
