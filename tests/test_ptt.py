from __future__ import annotations

import json

import pytest
from bs4 import BeautifulSoup

from fakes import FakePage, FakeSession, PlaywrightError
from trendsnap.errors import EmptyResultError, SetupError
from trendsnap.scrapers import ptt


def card(index: int, *, link: str | None = None, score: str = "12", count: str = "3") -> str:
    link = link or f"/bbs/Gossiping/M.{index}.A.html"
    return f"""
    <div class="e7-container">
      <div class="e7-left">
        <span class="e7-recommendScore">{score}</span>
        <span class="e7-recommendCount">{count}</span>
      </div>
      <div class="e7-right">
        <a href="{link}">
          <span class="e7-show-if-device-is-not-xs">Title {index}</span>
          <span class="e7-show-if-device-is-xs">Short {index}</span>
        </a>
        <div class="e7-boardName"><span class="e7-link-to-article">[ Gossiping ]</span></div>
        <a href="/user/writer{index}">writer{index}</a>
        <span class="e7-grey-text">2024/05/01 12:{index:02d}</span>
        <div class="e7-preview"><img src="https://i.imgur.com/{index}.jpg"></div>
      </div>
    </div>
    """


def page_with(cards: list[str]) -> str:
    return "<html><body><div id='list'>" + "".join(cards) + "</div></body></html>"


def test_extracts_all_fields_from_primary_selectors() -> None:
    [article] = ptt.parse_articles(page_with([card(1, score="-5", count="17")]))

    assert article.title == "Title 1"
    assert article.link == "/bbs/Gossiping/M.1.A.html"
    assert article.author == "writer1"
    assert article.category == "Gossiping"
    assert article.score_raw == "-5"
    assert article.comment_count_raw == "17"
    assert article.published_at == "2024/05/01 12:01"
    assert article.preview_image_url == "https://i.imgur.com/1.jpg"


def test_sentinel_counters_become_zero() -> None:
    [article] = ptt.parse_articles(page_with([card(1, score="X", count="-")]))

    assert article.score_raw == "0"
    assert article.comment_count_raw == "0"


def test_fallback_strategies_fill_missing_fields() -> None:
    html = page_with(
        [
            """
            <div class="e7-container">
              <div class="e7-left">
                <span class="e7-recommendScore"></span>
                <span><i e7description="推文:"></i>88</span>
                <span><i e7description="回應:"></i>9</span>
              </div>
              <div class="e7-right">
                <a href="/bbs/Stock/M.2.A.html">
                  Plain headline
                  second line
                </a>
                <a href="/user/quietuser"></a>
              </div>
            </div>
            """
        ]
    )

    [article] = ptt.parse_articles(html)

    assert article.title == "Plain headline"
    assert article.score_raw == "88"
    assert article.comment_count_raw == "9"
    assert article.author == "quietuser"
    assert article.category == "Stock"
    assert article.published_at == ""
    assert article.preview_image_url == ""


def test_placeholders_and_untitled_containers_are_dropped() -> None:
    html = page_with(
        [
            card(1),
            '<div class="e7-container"><div style="height: 160px;"></div></div>',
            '<div class="e7-container"><span class="e7-recommendScore">3</span>'
            '<a href="/bbs/Board/M.9.A.html"></a></div>',
            card(2),
        ]
    )

    articles = ptt.parse_articles(html)

    assert [article.title for article in articles] == ["Title 1", "Title 2"]


def test_content_search_is_used_without_containers() -> None:
    html = """
    <div class="row">
      <span class="recommend-score">5</span>
      <a href="/bbs/Baseball/M.3.A.html">Game tonight</a>
    </div>
    """

    [article] = ptt.parse_articles(html)

    assert article.title == "Game tonight"
    assert article.category == "Baseball"


def test_is_qualifying_requires_score_and_link() -> None:
    soup = BeautifulSoup(page_with([card(1)]), "lxml")
    container = soup.select_one(".e7-container")
    assert ptt.is_qualifying(container)

    container.select_one(".e7-recommendScore").decompose()
    assert not ptt.is_qualifying(container)


def test_run_without_scrolling_keeps_page_order(settings) -> None:
    cards = [card(i) for i in range(22)]
    cards[17] = card(17, link="/bbs/Gossiping/M.5.A.html")
    page = FakePage(page_with(cards), present=[".e7-container"])
    session = FakeSession(page)

    result = ptt.run(settings, session_factory=session)

    assert page.scrolls == 0
    assert page.waits[0] == ptt.INITIAL_SETTLE_MS
    assert page.waits[-1] == ptt.STABLE_WAIT_MS
    assert result.total_found == 21
    assert result.returned_count == 20
    assert session.closed == 1

    payload = json.loads((settings.data_root / "ptt-trends.json").read_text(encoding="utf-8"))
    assert payload["total_found"] == 21
    assert payload["returned_count"] == 20
    assert payload["updated"]
    assert payload["articles"][0]["title"] == "Title 0"
    assert len(payload["articles"]) == 20


def test_run_scrolls_when_too_few_articles(settings) -> None:
    snapshots = [
        page_with([card(i) for i in range(5)]),
        page_with([card(i) for i in range(12)]),
        page_with([card(i) for i in range(25)]),
    ]
    page = FakePage(snapshots, present=['a[href*="/bbs/"]'])

    result = ptt.run(settings, session_factory=FakeSession(page))

    assert page.scrolls == 2
    assert page.selector_waits == [".e7-container", 'a[href*="/bbs/"]']
    assert page.waits[-1] == ptt.POST_SCROLL_WAIT_MS
    assert result.total_found == 25
    assert result.returned_count == 20


def test_run_with_no_articles_fails_after_writing(settings) -> None:
    session = FakeSession(FakePage("<html><body></body></html>"))

    with pytest.raises(EmptyResultError):
        ptt.run(settings, session_factory=session)

    payload = json.loads((settings.data_root / "ptt-trends.json").read_text(encoding="utf-8"))
    assert payload["articles"] == []
    assert session.closed == 1


def test_run_releases_session_when_navigation_fails(settings, no_retry_sleep) -> None:
    page = FakePage("", goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
    session = FakeSession(page)

    with pytest.raises(SetupError):
        ptt.run(settings, session_factory=session)

    assert len(page.gotos) == 2
    assert session.closed == 1
    assert not (settings.data_root / "ptt-trends.json").exists()


def test_board_name_is_taken_from_bracket_group() -> None:
    html = page_with([card(1).replace("[ Gossiping ]", "[ Gossiping ] 八卦")])

    [article] = ptt.parse_articles(html)

    assert article.category == "Gossiping"


@pytest.mark.parametrize("style", ["line-height: 1.5", "max-height: 400px", "min-height:2em"])
def test_single_wrapper_with_other_height_styles_is_an_article(style) -> None:
    html = page_with(
        [
            f'<div class="e7-container"><div style="{style}">'
            '<span class="e7-recommendScore">7</span>'
            '<a href="/bbs/Tech_Job/M.4.A.html">Interview notes</a>'
            "</div></div>"
        ]
    )

    [article] = ptt.parse_articles(html)

    assert article.title == "Interview notes"
    assert article.score_raw == "7"
