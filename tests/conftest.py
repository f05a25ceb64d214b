from __future__ import annotations

from pathlib import Path

import pytest

from trendsnap.config import ScrapeSettings


@pytest.fixture
def settings(tmp_path: Path) -> ScrapeSettings:
    return ScrapeSettings(data_root=tmp_path)


@pytest.fixture
def no_retry_sleep(monkeypatch) -> list[float]:
    """Record retry waits instead of sleeping."""

    waits: list[float] = []
    monkeypatch.setattr("trendsnap.services.retry.time.sleep", waits.append)
    return waits
