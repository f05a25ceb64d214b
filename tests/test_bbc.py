from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
import requests

from trendsnap.errors import EmptyResultError, SetupError
from trendsnap.scrapers import bbc

FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>BBC News 中文</title>
    <description>BBC News 中文 - 主頁</description>
    <link>https://www.bbc.com/zhongwen/trad</link>
    <lastBuildDate>Wed, 01 May 2024 10:00:00 GMT</lastBuildDate>
    <language>zh-hant</language>
    <copyright>Copyright BBC</copyright>
    <item>
      <title>新聞標題一</title>
      <description>摘要一</description>
      <link>https://www.bbc.com/zhongwen/trad/world-1</link>
      <guid isPermaLink="false">world-1</guid>
      <pubDate>Wed, 01 May 2024 09:30:00 GMT</pubDate>
      <media:thumbnail width="240" height="135" url="https://ichef.bbci.co.uk/1.jpg"/>
    </item>
    <item>
      <title>新聞標題二</title>
      <description>摘要二</description>
      <link>https://www.bbc.com/zhongwen/trad/world-2</link>
      <guid isPermaLink="false">world-2</guid>
    </item>
  </channel>
</rss>
"""

EMPTY_FEED = """<?xml version="1.0"?><rss version="2.0"><channel><title>x</title></channel></rss>"""


class DummyResponse:
    def __init__(self, content: str, status_code: int = 200) -> None:
        self.content = content.encode("utf-8")
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


def test_parse_feed_reads_channel_and_items() -> None:
    channel, trends = bbc.parse_feed(FEED.encode("utf-8"))

    assert channel.title == "BBC News 中文"
    assert channel.link == "https://www.bbc.com/zhongwen/trad"
    assert channel.last_build_date == "2024-05-01T10:00:00+00:00"
    assert channel.language == "zh-hant"

    first, second = trends
    assert first.title == "新聞標題一"
    assert first.description == "摘要一"
    assert first.guid == "world-1"
    assert first.pub_date == "2024-05-01T09:30:00+00:00"
    assert first.thumbnail == "https://ichef.bbci.co.uk/1.jpg"
    assert second.pub_date == ""
    assert "thumbnail" not in second.to_json_dict()


def test_run_writes_channel_and_trends(settings) -> None:
    session = SimpleNamespace(get=lambda url, timeout: DummyResponse(FEED))

    trends = bbc.run(settings, session=session)

    assert len(trends) == 2
    payload = json.loads((settings.data_root / "bbc-trends.json").read_text(encoding="utf-8"))
    assert payload["channel"]["title"] == "BBC News 中文"
    assert payload["trends"][0]["pubDate"] == "2024-05-01T09:30:00+00:00"


def test_run_reports_http_errors_as_setup_failures(settings) -> None:
    session = SimpleNamespace(get=lambda url, timeout: DummyResponse("", status_code=503))

    with pytest.raises(SetupError):
        bbc.run(settings, session=session)


def test_run_with_empty_feed_is_a_failure(settings) -> None:
    session = SimpleNamespace(get=lambda url, timeout: DummyResponse(EMPTY_FEED))

    with pytest.raises(EmptyResultError):
        bbc.run(settings, session=session)


def test_build_session_mounts_retry_adapter() -> None:
    session = bbc.build_session()

    adapter = session.get_adapter("https://feeds.bbci.co.uk/")
    assert adapter.max_retries.total == 3
    assert 503 in adapter.max_retries.status_forcelist
