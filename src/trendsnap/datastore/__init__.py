"""JSON snapshot files written under the data directory."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Union

from pydantic import BaseModel

from trendsnap.config import DEFAULT_DATA_ROOT

logger = logging.getLogger(__name__)

_Pathish = Union[str, Path]


def resolve_data_root(data_root: _Pathish | None = None) -> Path:
    """Turn an optional directory argument into a :class:`Path`.

    ``None`` means :data:`~trendsnap.config.DEFAULT_DATA_ROOT`. Nothing is
    created here.
    """

    return DEFAULT_DATA_ROOT if data_root is None else Path(data_root)


def ensure_data_root(data_root: _Pathish | None = None) -> Path:
    """Like :func:`resolve_data_root`, but also creates the directory."""

    root = resolve_data_root(data_root)
    root.mkdir(parents=True, exist_ok=True)
    return root


def _with_timestamp(payload: Mapping[str, Any] | BaseModel) -> dict:
    if isinstance(payload, BaseModel):
        data = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        data = dict(payload)

    if not data.get("updated"):
        data.pop("updated", None)
        data = {"updated": datetime.now(timezone.utc).isoformat(), **data}
    return data


def save_data(
    filename: str,
    payload: Mapping[str, Any] | BaseModel,
    *,
    data_root: _Pathish | None = None,
) -> Path:
    """Write ``payload`` as JSON to ``<data_root>/<filename>``.

    Models are serialized through their aliases. An ``updated`` timestamp is
    put first when the payload does not carry one. The document goes to a
    temporary file in the same directory which then replaces the target, so
    a failed write leaves the previous snapshot untouched. Write failures are
    logged and re-raised.
    """

    data = _with_timestamp(payload)
    root = ensure_data_root(data_root)
    full_path = root / filename

    fd, tmp_name = tempfile.mkstemp(prefix=f".{filename}.", suffix=".tmp", dir=root)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=2)
        tmp_path.replace(full_path)
    except (OSError, TypeError, ValueError):
        logger.error("Failed to save data to %s", full_path)
        tmp_path.unlink(missing_ok=True)
        raise

    logger.info("Data saved to %s", full_path)
    return full_path


__all__ = ["ensure_data_root", "resolve_data_root", "save_data"]
