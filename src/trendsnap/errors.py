"""Exception types raised by the scrapers."""

from __future__ import annotations

__all__ = ["BlockedPageError", "EmptyResultError", "ScrapeError", "SetupError"]


class ScrapeError(Exception):
    """Base class for failures that end a scraper run."""


class SetupError(ScrapeError):
    """The browser could not be started or the target page could not be reached."""


class BlockedPageError(ScrapeError):
    """The site answered with something other than the expected content.

    Typically a bot-check page served in place of a JSON document. Retry
    policies treat this error as transient.
    """


class EmptyResultError(ScrapeError):
    """The full pipeline ran but produced no valid records."""

    def __init__(self, source: str) -> None:
        super().__init__(f"No valid records found for {source}")
        self.source = source
