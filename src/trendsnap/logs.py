"""Progress reporting helpers built on the standard :mod:`logging` module."""

from __future__ import annotations

import logging
from typing import Any

__all__ = ["RESULT", "SUCCESS", "ScrapeLog", "configure_logging", "get_scrape_log"]

#: Level used for counts and summaries.
RESULT = 22
#: Level used when a step completed as expected.
SUCCESS = 25

logging.addLevelName(RESULT, "RESULT")
logging.addLevelName(SUCCESS, "SUCCESS")

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Configure the root logger for command line runs."""

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


class ScrapeLog:
    """Thin category-oriented facade over a :class:`logging.Logger`.

    Scrapers report progress through ``info``, ``success``, ``warn``,
    ``error``, ``start`` and ``result``. Nothing reads these messages back.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def info(self, msg: str, *args: Any) -> None:
        self.logger.info(msg, *args)

    def start(self, msg: str, *args: Any) -> None:
        self.logger.info(msg, *args)

    def success(self, msg: str, *args: Any) -> None:
        self.logger.log(SUCCESS, msg, *args)

    def result(self, msg: str, *args: Any) -> None:
        self.logger.log(RESULT, msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        self.logger.warning(msg, *args)

    def debug(self, msg: str, *args: Any) -> None:
        self.logger.debug(msg, *args)

    def error(self, msg: str, *args: Any, exc_info: bool = False) -> None:
        self.logger.error(msg, *args, exc_info=exc_info)


def get_scrape_log(name: str) -> ScrapeLog:
    """Return a :class:`ScrapeLog` bound to the module logger ``name``."""

    return ScrapeLog(logging.getLogger(name))
