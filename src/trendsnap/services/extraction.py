"""Field extraction building blocks.

A field is read with an ordered list of strategies. Each strategy takes an
item container and returns a value or ``None``; the first non-empty value
wins. Strategies never raise for missing markup.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, Sequence

from bs4 import Tag

__all__ = [
    "COUNTER_SENTINELS",
    "Strategy",
    "attr_of",
    "first_line_of",
    "first_value",
    "matching",
    "parent_text_of",
    "parse_counter",
    "text_of",
]

Strategy = Callable[[Tag], Optional[str]]

#: Placeholder texts some sources print instead of a zero count.
COUNTER_SENTINELS = frozenset({"", "-", "X"})

_SIGNED_INT = re.compile(r"-?\d+")
_UNSIGNED_INT = re.compile(r"\d+")


def first_value(node: Tag, strategies: Iterable[Strategy], default: str = "") -> str:
    """Return the first non-empty result of ``strategies`` applied to ``node``."""

    for strategy in strategies:
        value = strategy(node)
        if value:
            return value
    return default


def text_of(selector: str) -> Strategy:
    def strategy(node: Tag) -> Optional[str]:
        element = node.select_one(selector)
        if element is None:
            return None
        return element.get_text(strip=True) or None

    return strategy


def attr_of(selector: str, attribute: str) -> Strategy:
    def strategy(node: Tag) -> Optional[str]:
        element = node.select_one(selector)
        if element is None:
            return None
        value = element.get(attribute)
        return value.strip() if isinstance(value, str) and value.strip() else None

    return strategy


def parent_text_of(selector: str) -> Strategy:
    """Read the text of the parent of the element matched by ``selector``.

    Used for counters rendered as ``<span><i description="..."/>12</span>``.
    """

    def strategy(node: Tag) -> Optional[str]:
        element = node.select_one(selector)
        if element is None or element.parent is None:
            return None
        return element.parent.get_text(strip=True) or None

    return strategy


def first_line_of(selector: str) -> Strategy:
    def strategy(node: Tag) -> Optional[str]:
        element = node.select_one(selector)
        if element is None:
            return None
        for line in element.get_text("\n").split("\n"):
            if line.strip():
                return line.strip()
        return None

    return strategy


def matching(strategy: Strategy, pattern: str, group: int = 1) -> Strategy:
    """Apply ``pattern`` to the result of ``strategy`` and keep ``group``."""

    compiled = re.compile(pattern)

    def wrapped(node: Tag) -> Optional[str]:
        value = strategy(node)
        if not value:
            return None
        match = compiled.search(value)
        return match.group(group).strip() if match else None

    return wrapped


def parse_counter(
    text: Optional[str],
    *,
    signed: bool = True,
    sentinels: Sequence[str] = COUNTER_SENTINELS,
) -> int:
    """Interpret a popularity counter.

    Sentinel placeholders and texts without digits give ``0``; otherwise the
    first integer substring is used.
    """

    value = (text or "").strip()
    if value in sentinels:
        return 0
    match = (_SIGNED_INT if signed else _UNSIGNED_INT).search(value)
    return int(match.group(0)) if match else 0
