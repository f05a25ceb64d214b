"""
Deduplication and truncation of collected items.
"""
from __future__ import annotations

from typing import Callable, Hashable, Iterable, List, Sequence, TypeVar

from trendsnap.models import CollectionResult, TrendingItem

__all__ = ["build_collection_result", "dedupe_by_key"]

T = TypeVar("T")


def dedupe_by_key(items: Iterable[T], key_fn: Callable[[T], Hashable]) -> List[T]:
    seen = set()
    result: List[T] = []
    for item in items:
        key = key_fn(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def build_collection_result(items: Sequence[TrendingItem], target: int) -> CollectionResult:
    """Drop invalid and repeated items, then keep the first ``target``.

    ``total_found`` counts the valid items after deduplication and before
    truncation.
    """

    valid = [item for item in items if item.is_valid]
    unique = dedupe_by_key(valid, lambda item: item.link)
    kept = unique[:target]
    return CollectionResult(total_found=len(unique), returned_count=len(kept), items=kept)
