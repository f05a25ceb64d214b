"""Domain models used across the application."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """Base model whose JSON form uses the camelCase names of the snapshots."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TrendingItem(Record):
    """One normalized entry of a PTT hot list."""

    title: str
    link: str
    author: str = ""
    category: str = Field(default="", alias="board")
    score_raw: str = Field(default="0", alias="recommendScore")
    comment_count_raw: str = Field(default="0", alias="recommendCount")
    published_at: str = Field(default="", alias="publishTime")
    preview_image_url: str = Field(default="", alias="imageUrl")

    @property
    def is_valid(self) -> bool:
        """Return ``True`` when both identity fields are present."""

        return bool(self.title.strip() and self.link.strip())


class CollectionResult(Record):
    """Outcome of a single collection run, written once to disk."""

    generated_at: datetime = Field(default_factory=utcnow, alias="updated")
    total_found: int
    returned_count: int
    items: List[TrendingItem] = Field(default_factory=list, alias="articles")


class GoogleTrend(Record):
    keyword: str = Field(alias="googleTrend")
    search_volume: str = Field(alias="searchVolume")
    started: str


class BBCChannel(Record):
    title: str = ""
    description: str = ""
    link: str = ""
    last_build_date: str = Field(default="", alias="lastBuildDate")
    language: Optional[str] = None
    copyright: Optional[str] = None


class BBCTrend(Record):
    title: str
    description: str
    link: str
    pub_date: str = Field(alias="pubDate")
    guid: str
    thumbnail: Optional[str] = None


class KomicaTrend(Record):
    reply_count: int = Field(alias="replyCount")
    date: str
    time: str
    title: str
    description: str
    link: str
    raw_text: str = Field(alias="rawText")


class RedditPost(Record):
    id: str
    title: str
    author: str
    subreddit: str
    score: int = 0
    upvote_ratio: float = Field(default=0.0, alias="upvoteRatio")
    num_comments: int = Field(default=0, alias="numComments")
    permalink: str
    url: str
    created_utc: str = Field(alias="createdUtc")
    thumbnail: Optional[str] = None
    is_video: bool = Field(default=False, alias="isVideo")
    is_original_content: bool = Field(default=False, alias="isOriginalContent")


class GamerTrend(Record):
    board_name: str = Field(alias="boardName")
    board_image: str = Field(default="", alias="boardImage")
    sub_board: str = Field(default="", alias="subBoard")
    title: str
    content: str = ""
    article_image: str = Field(default="", alias="articleImage")
    gp: int = 0
    bp: int = 0
    comments: int = 0
    link: str = ""
    author: str = ""
