"""Reddit hot listings fetched through the JSON endpoints.

Reddit tends to refuse plain HTTP clients, so the JSON is loaded in a real
browser and read back from the rendered document. A page that does not
contain JSON is treated as a bot check and retried.
"""

from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping

from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError

from trendsnap.config import ScrapeSettings
from trendsnap.datastore import save_data
from trendsnap.errors import BlockedPageError, EmptyResultError, ScrapeError
from trendsnap.logs import get_scrape_log
from trendsnap.models import RedditPost
from trendsnap.services.browser import BrowserSession, navigate
from trendsnap.services.retry import RetryPolicy

__all__ = ["extract_json_text", "fetch_listing", "load_listing", "normalize_posts", "run"]

log = get_scrape_log(__name__)

SOURCE = "Reddit"
PAUSE_BETWEEN_TARGETS = 3.0


def extract_json_text(html: str) -> str:
    """Return the JSON text the browser rendered for a ``.json`` URL."""

    soup = BeautifulSoup(html, "lxml")
    pre = soup.find("pre")
    if pre is not None:
        return pre.get_text()
    body = soup.body or soup
    return body.get_text()


def load_listing(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BlockedPageError(f"Response was not JSON: {text[:80]!r}") from exc
    if not isinstance(data, dict):
        raise BlockedPageError("Response JSON was not a listing object")
    return data


def _created(value: Any) -> str:
    if not isinstance(value, (int, float)):
        return ""
    return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()


def normalize_posts(listing: Mapping[str, Any]) -> List[RedditPost]:
    """Convert a Reddit listing document into :class:`RedditPost` records."""

    children = (listing.get("data") or {}).get("children") or []
    posts: List[RedditPost] = []
    for child in children:
        data = child.get("data") or {}
        if not data.get("id"):
            continue
        thumbnail = data.get("thumbnail") or ""
        posts.append(
            RedditPost(
                id=data["id"],
                title=data.get("title", ""),
                author=data.get("author", ""),
                subreddit=data.get("subreddit", ""),
                score=data.get("score") or 0,
                upvote_ratio=data.get("upvote_ratio") or 0.0,
                num_comments=data.get("num_comments") or 0,
                permalink=data.get("permalink", ""),
                url=data.get("url", ""),
                created_utc=_created(data.get("created_utc")),
                thumbnail=thumbnail if thumbnail.startswith("http") else None,
                is_video=bool(data.get("is_video")),
                is_original_content=bool(data.get("is_original_content")),
            )
        )
    return posts


def fetch_listing(
    url: str,
    settings: ScrapeSettings,
    *,
    session_factory: Callable[..., object] = BrowserSession,
    policy: RetryPolicy | None = None,
) -> Dict[str, Any]:
    """Load ``url`` in a fresh browser session and parse the JSON body."""

    policy = policy or RetryPolicy(max_attempts=3, delay=5.0, backoff=2.0)

    def attempt() -> Dict[str, Any]:
        with session_factory(headless=settings.headless) as page:
            log.info("Fetching %s", url)
            navigate(page, url, wait_until="networkidle")
            try:
                page.wait_for_timeout(2_000)
                html = page.content()
            except PlaywrightError as exc:
                raise BlockedPageError(f"Page for {url} could not be read: {exc}") from exc
        return load_listing(extract_json_text(html))

    return policy.call(attempt)


def run(
    settings: ScrapeSettings,
    *,
    session_factory: Callable[..., object] = BrowserSession,
    policy: RetryPolicy | None = None,
    pause: Callable[[float], None] = time.sleep,
) -> Dict[str, int]:
    """Snapshot every configured listing.

    A failing target is logged and skipped. Returns the post count per written
    file and raises :class:`EmptyResultError` when no target succeeded.
    """

    targets = settings.reddit_targets
    log.start("Fetching %d Reddit listings", len(targets))

    written: Dict[str, int] = {}
    for index, target in enumerate(targets):
        log.info("--- %s ---", target.description)
        try:
            listing = fetch_listing(
                str(target.url), settings, session_factory=session_factory, policy=policy
            )
        except ScrapeError as exc:
            log.error("Failed to fetch %s: %s", target.description, exc)
            continue

        posts = normalize_posts(listing)
        save_data(
            target.filename,
            {
                "source": target.description,
                "total_posts": len(posts),
                "posts": [post.to_json_dict() for post in posts],
            },
            data_root=settings.data_root,
        )
        log.success("Saved %d posts to %s", len(posts), target.filename)
        written[target.filename] = len(posts)

        if index + 1 < len(targets):
            pause(PAUSE_BETWEEN_TARGETS)

    log.result("Fetched %d/%d listings", len(written), len(targets))
    if not written:
        raise EmptyResultError(SOURCE)
    return written
