"""Snapshot scrapers for trending feeds (PTT, Google Trends, BBC, Komica, Reddit, Bahamut)."""

from __future__ import annotations

import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _load_local_env(env_file: Path = _PROJECT_ROOT / ".env") -> None:
    """Export ``KEY=value`` pairs from the checkout's ``.env``.

    Variables already set in the process environment keep their value.
    """

    if not env_file.is_file():
        return

    for line in env_file.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        os.environ.setdefault(key, value.strip())


_load_local_env()

from .config import ScrapeSettings  # noqa: E402,F401
from .errors import BlockedPageError, EmptyResultError, ScrapeError, SetupError  # noqa: E402,F401

__all__ = [
    "BlockedPageError",
    "EmptyResultError",
    "ScrapeError",
    "ScrapeSettings",
    "SetupError",
]
