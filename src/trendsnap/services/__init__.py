"""Service layer entry points for trendsnap."""

from __future__ import annotations

from .collector import CollectionProgress, DomProbe, IncrementalCollector  # noqa: F401
from .dedupe import build_collection_result, dedupe_by_key  # noqa: F401
from .retry import RetryPolicy  # noqa: F401

__all__ = [
    "CollectionProgress",
    "DomProbe",
    "IncrementalCollector",
    "RetryPolicy",
    "build_collection_result",
    "dedupe_by_key",
]
