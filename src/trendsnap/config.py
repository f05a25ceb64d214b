"""Configuration constants and settings models for the trend scrapers."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Mapping

from pydantic import BaseModel, Field, HttpUrl, ValidationError

__all__ = [
    "DEFAULT_DATA_ROOT",
    "MAX_SCROLL_ATTEMPTS",
    "OUTPUT_FILES",
    "REDDIT_TARGETS",
    "RedditTarget",
    "ScrapeSettings",
    "TARGET_COUNT",
    "URLS",
    "USER_AGENTS",
]

DEFAULT_DATA_ROOT = Path("data")

#: Number of items the PTT collector tries to make visible before extraction.
TARGET_COUNT = 20
#: Upper bound on scroll cycles performed by the collector.
MAX_SCROLL_ATTEMPTS = 8

USER_AGENTS = [
    (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_5_2) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.0 Safari/605.1.15"
    ),
    (
        "Mozilla/5.0 (Linux; Android 13; Pixel 6) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/123.0.6312.86 Mobile Safari/537.36"
    ),
    (
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_3 like Mac OS X) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
    ),
    "Mozilla/5.0 (Windows NT 10.0; WOW64; rv:124.0) Gecko/20100101 Firefox/124.0",
]

URLS = {
    "bbc_rss": "https://feeds.bbci.co.uk/zhongwen/trad/rss.xml",
    "google_trends": "https://trends.google.com.tw/trending?geo=TW&hours=4",
    "ptt_hot": "https://www.pttweb.cc/hot/all/today",
    "komica_catlist": "https://gita.komica1.org/00b/catlist.php",
    "gamer_home": "https://www.gamer.com.tw/index.php?ad=N",
    "reddit_all": "https://www.reddit.com/r/all/hot.json?limit=50",
    "reddit_taiwanese": "https://www.reddit.com/r/Taiwanese/hot.json?limit=50",
    "reddit_china_irl": "https://www.reddit.com/r/China_irl/hot.json?limit=50",
}

OUTPUT_FILES = {
    "ptt": "ptt-trends.json",
    "google": "google-trends.json",
    "bbc": "bbc-trends.json",
    "komica": "komica-trends.json",
    "gamer": "gamer-trends.json",
}


class RedditTarget(BaseModel):
    """A single Reddit listing to snapshot."""

    url: HttpUrl
    filename: str
    description: str


REDDIT_TARGETS = [
    RedditTarget(
        url=URLS["reddit_all"],
        filename="reddit-all-hot.json",
        description="Reddit r/all hot posts",
    ),
    RedditTarget(
        url=URLS["reddit_taiwanese"],
        filename="reddit-taiwanese-hot.json",
        description="Reddit r/Taiwanese hot posts",
    ),
    RedditTarget(
        url=URLS["reddit_china_irl"],
        filename="reddit-china-irl-hot.json",
        description="Reddit r/China_irl hot posts",
    ),
]

_FALSE_VALUES = {"0", "false", "no", "off"}


class ScrapeSettings(BaseModel):
    """Run parameters handed to every scraper."""

    data_root: Path = Field(default=DEFAULT_DATA_ROOT, description="Directory for JSON snapshots")
    headless: bool = Field(default=True, description="Launch the browser without a window")
    target_count: int = Field(default=TARGET_COUNT, ge=1, description="Items to keep per PTT run")
    max_scroll_attempts: int = Field(
        default=MAX_SCROLL_ATTEMPTS,
        ge=0,
        description="Maximum number of scroll cycles while waiting for lazy content",
    )
    reddit_targets: List[RedditTarget] = Field(default_factory=lambda: list(REDDIT_TARGETS))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ScrapeSettings":
        """Build settings from ``TRENDSNAP_*`` environment variables."""

        env = os.environ if environ is None else environ
        values: dict = {}
        data_dir = env.get("TRENDSNAP_DATA_DIR", "").strip()
        if data_dir:
            values["data_root"] = Path(data_dir)
        headless = env.get("TRENDSNAP_HEADLESS", "").strip().lower()
        if headless:
            values["headless"] = headless not in _FALSE_VALUES
        return cls(**values)

    @classmethod
    def from_file(cls, path: Path | str) -> "ScrapeSettings":
        """Load settings from a JSON file."""

        config_path = Path(path)
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Settings file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in settings file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Settings file is invalid: {config_path}\n{exc}") from exc

    def dump(self, path: Path | str) -> None:
        """Persist the settings to disk as JSON."""

        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
