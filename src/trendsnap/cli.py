"""Command line entry point: ``trendsnap <source>``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from trendsnap.config import ScrapeSettings
from trendsnap.errors import EmptyResultError, ScrapeError
from trendsnap.logs import configure_logging
from trendsnap.scrapers import SCRAPERS

__all__ = ["build_parser", "main", "run_source"]

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trendsnap",
        description="Snapshot trending content feeds to JSON files.",
    )
    parser.add_argument("source", choices=[*SCRAPERS, "all"], help="Site to scrape")
    parser.add_argument("--data-dir", type=Path, help="Directory for the JSON snapshots")
    parser.add_argument("--headful", action="store_true", help="Show the browser window")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run_source(name: str, settings: ScrapeSettings) -> int:
    """Run one scraper and translate its outcome into an exit status."""

    logger.info("Running %s scraper", name)
    try:
        SCRAPERS[name](settings)
    except EmptyResultError as exc:
        logger.error("%s", exc)
        return 1
    except ScrapeError as exc:
        logger.error("Scrape of %s failed: %s", name, exc)
        return 1
    except Exception:  # noqa: BLE001 - report any crash as a failed run
        logger.exception("Scrape of %s crashed", name)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    settings = ScrapeSettings.from_env()
    overrides = {}
    if args.data_dir is not None:
        overrides["data_root"] = args.data_dir
    if args.headful:
        overrides["headless"] = False
    if overrides:
        settings = settings.model_copy(update=overrides)

    names: List[str] = list(SCRAPERS) if args.source == "all" else [args.source]
    failures = [name for name in names if run_source(name, settings) != 0]
    if failures:
        logger.error("Failed sources: %s", ", ".join(failures))
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
