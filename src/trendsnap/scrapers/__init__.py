"""Per-site scrapers, each exposing ``run(settings)``."""

from __future__ import annotations

from typing import Any, Callable, Dict

from trendsnap.config import ScrapeSettings

from . import bbc, gamer, google, komica, ptt, reddit

__all__ = ["SCRAPERS", "bbc", "gamer", "google", "komica", "ptt", "reddit"]

SCRAPERS: Dict[str, Callable[[ScrapeSettings], Any]] = {
    "ptt": ptt.run,
    "google": google.run,
    "bbc": bbc.run,
    "komica": komica.run,
    "reddit": reddit.run,
    "gamer": gamer.run,
}
