"""BBC Chinese (traditional) news feed."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

import feedparser
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from trendsnap.config import OUTPUT_FILES, URLS, USER_AGENTS, ScrapeSettings
from trendsnap.datastore import save_data
from trendsnap.errors import EmptyResultError, SetupError
from trendsnap.logs import get_scrape_log
from trendsnap.models import BBCChannel, BBCTrend

__all__ = ["build_session", "parse_feed", "run"]

log = get_scrape_log(__name__)

SOURCE = "BBC"

FEED_REQUEST_TIMEOUT = (10, 60)

_feed_retry = Retry(
    total=3,
    connect=3,
    read=3,
    backoff_factor=1,
    status_forcelist=[429, 500, 502, 503, 504],
    allowed_methods={"GET"},
)


def build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": USER_AGENTS[0],
            "Accept": "application/rss+xml,application/xml;q=0.9,*/*;q=0.8",
        }
    )
    session.mount("https://", HTTPAdapter(max_retries=_feed_retry))
    session.mount("http://", HTTPAdapter(max_retries=_feed_retry))
    return session


def _iso(struct_time: Optional[time.struct_time]) -> str:
    if not struct_time:
        return ""
    return datetime(*struct_time[:6], tzinfo=timezone.utc).isoformat()


def _thumbnail(entry: Any) -> Optional[str]:
    thumbnails = entry.get("media_thumbnail") or []
    for thumbnail in thumbnails:
        url = thumbnail.get("url")
        if url:
            return url
    return None


def _description(entry: Any) -> str:
    content = entry.get("content") or []
    if content and content[0].get("value"):
        return content[0]["value"]
    return entry.get("summary") or entry.get("description") or ""


def parse_feed(feed_content: bytes | str) -> Tuple[BBCChannel, List[BBCTrend]]:
    """Parse raw RSS into the channel block and the list of stories."""

    feed = feedparser.parse(feed_content)
    meta = feed.get("feed", {})
    channel = BBCChannel(
        title=meta.get("title", ""),
        description=meta.get("subtitle", "") or meta.get("description", ""),
        link=meta.get("link", ""),
        last_build_date=_iso(meta.get("updated_parsed")),
        language=meta.get("language"),
        copyright=meta.get("rights"),
    )

    trends = [
        BBCTrend(
            title=entry.get("title", ""),
            description=_description(entry),
            link=entry.get("link", ""),
            pub_date=_iso(entry.get("published_parsed")),
            guid=entry.get("id", ""),
            thumbnail=_thumbnail(entry),
        )
        for entry in feed.get("entries", [])
    ]
    return channel, trends


def run(settings: ScrapeSettings, *, session: requests.Session | None = None) -> List[BBCTrend]:
    """Fetch the feed and write ``bbc-trends.json``."""

    session = session or build_session()
    log.start("Fetching BBC Chinese RSS feed")
    try:
        response = session.get(URLS["bbc_rss"], timeout=FEED_REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise SetupError(f"Could not fetch {URLS['bbc_rss']}: {exc}") from exc

    channel, trends = parse_feed(response.content)
    log.success("RSS feed loaded")
    log.info("Channel: %s (%s)", channel.title, channel.link)
    log.info("Last build: %s", channel.last_build_date)

    save_data(
        OUTPUT_FILES["bbc"],
        {
            "channel": channel.to_json_dict(),
            "trends": [trend.to_json_dict() for trend in trends],
        },
        data_root=settings.data_root,
    )

    log.result("Found %d stories", len(trends))
    for index, trend in enumerate(trends[:3], start=1):
        summary = trend.description[:100] + ("..." if len(trend.description) > 100 else "")
        log.info("%d. %s | %s | %s | %s", index, trend.title, summary, trend.link, trend.pub_date)

    if not trends:
        raise EmptyResultError(SOURCE)
    return trends
