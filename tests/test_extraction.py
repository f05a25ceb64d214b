from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from trendsnap.services.extraction import (
    attr_of,
    first_line_of,
    first_value,
    matching,
    parent_text_of,
    parse_counter,
    text_of,
)


def node(html: str):
    return BeautifulSoup(f"<div id='root'>{html}</div>", "lxml").select_one("#root")


@pytest.mark.parametrize(
    "text, signed, expected",
    [
        ("-", True, 0),
        ("X", True, 0),
        ("", True, 0),
        (None, True, 0),
        ("推 42", True, 42),
        ("-7", True, -7),
        ("-7", False, 7),
        ("no digits", True, 0),
        (" 12 comments, 3 shares ", False, 12),
    ],
)
def test_parse_counter(text, signed, expected) -> None:
    assert parse_counter(text, signed=signed) == expected


def test_first_value_uses_first_non_empty_strategy() -> None:
    root = node('<span class="a"></span><span class="b">second</span><span class="c">third</span>')

    value = first_value(root, [text_of(".missing"), text_of(".a"), text_of(".b"), text_of(".c")])

    assert value == "second"


def test_first_value_falls_back_to_default() -> None:
    assert first_value(node("<p></p>"), [text_of(".missing")], "0") == "0"


def test_attr_and_parent_text_strategies() -> None:
    root = node('<span><i e7description="推文:"></i>35</span><a class="link" href=" /x "></a>')

    assert parent_text_of('[e7description="推文:"]')(root) == "35"
    assert attr_of(".link", "href")(root) == "/x"
    assert attr_of(".link", "title")(root) is None


def test_first_line_skips_blank_lines() -> None:
    root = node('<a class="t">\n\n  Headline  \n<span>sub line</span></a>')

    assert first_line_of(".t")(root) == "Headline"


def test_matching_extracts_group_from_attribute() -> None:
    root = node('<a href="/bbs/Gossiping/M.1.html">x</a>')

    assert matching(attr_of("a", "href"), r"/bbs/([^/]+)/")(root) == "Gossiping"
    assert matching(attr_of("a", "href"), r"/user/(.+)$")(root) is None
