"""Run the scrapers from a source checkout: ``python run_trends.py <source|all>``."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from trendsnap.cli import main  # noqa: E402


if __name__ == "__main__":
    sys.exit(main())
