from __future__ import annotations

import json
from pathlib import Path

import pytest

from trendsnap.config import DEFAULT_DATA_ROOT
from trendsnap.datastore import ensure_data_root, resolve_data_root, save_data
from trendsnap.models import CollectionResult, TrendingItem


def test_resolve_data_root_defaults() -> None:
    assert resolve_data_root() == DEFAULT_DATA_ROOT
    assert resolve_data_root("snapshots") == Path("snapshots")


def test_ensure_data_root_creates_directory(tmp_path: Path) -> None:
    root = ensure_data_root(tmp_path / "nested" / "data")

    assert root.is_dir()


def test_save_data_prepends_timestamp(tmp_path: Path) -> None:
    path = save_data("out.json", {"trends": [{"title": "颱風"}]}, data_root=tmp_path)

    text = path.read_text(encoding="utf-8")
    payload = json.loads(text)
    assert list(payload) == ["updated", "trends"]
    assert "颱風" in text


def test_save_data_replaces_blank_timestamp(tmp_path: Path) -> None:
    path = save_data("out.json", {"updated": "", "items": []}, data_root=tmp_path)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["updated"]
    assert list(payload) == ["updated", "items"]


def test_save_data_serializes_models_by_alias(tmp_path: Path) -> None:
    result = CollectionResult(
        total_found=1,
        returned_count=1,
        items=[TrendingItem(title="t", link="/bbs/A/M.1.html", category="A")],
    )

    path = save_data("ptt.json", result, data_root=tmp_path)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["updated"].startswith(result.generated_at.strftime("%Y-%m-%dT%H:%M:%S"))
    assert payload["articles"][0]["board"] == "A"


def test_save_data_reraises_write_errors(tmp_path: Path) -> None:
    (tmp_path / "taken").mkdir()

    with pytest.raises(OSError):
        save_data("taken", {"a": 1}, data_root=tmp_path)


def test_failed_write_keeps_previous_snapshot(tmp_path: Path) -> None:
    save_data("out.json", {"trends": ["kept"]}, data_root=tmp_path)

    with pytest.raises(TypeError):
        save_data("out.json", {"trends": ["partial", object()]}, data_root=tmp_path)

    payload = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
    assert payload["trends"] == ["kept"]
    assert [path.name for path in tmp_path.iterdir()] == ["out.json"]
