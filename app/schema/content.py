"""Pydantic models for aggregated feed content."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt, TypeAdapter


class ContentKind(str, Enum):
    """Kinds of content a channel can contribute to the feed."""

    LONG_FORM = "long_form"
    SHORTS = "shorts"
    COMMUNITY = "community"


class _FeedItemBase(BaseModel):
    id: str
    channel_id: str
    channel_name: str
    published_at: datetime


class LongFormVideo(_FeedItemBase):
    kind: Literal["long_form"] = "long_form"
    title: str
    thumbnail: str = ""
    view_count: str = ""
    duration: str = "Video"


class ShortFormVideo(_FeedItemBase):
    kind: Literal["shorts"] = "shorts"
    title: str
    thumbnail: str = ""
    view_count: str = ""
    duration: str = "Short"


class CommunityPost(_FeedItemBase):
    kind: Literal["community"] = "community"
    content: str
    thumbnail: str = ""


ContentItem = Annotated[Union[LongFormVideo, ShortFormVideo, CommunityPost], Field(discriminator="kind")]

content_items_adapter: TypeAdapter[list[ContentItem]] = TypeAdapter(list[ContentItem])


class FetchSettings(BaseModel):
    """Per-fetch limits applied uniformly to every channel."""

    max_items_per_channel: PositiveInt = 10
    time_range_days: NonNegativeInt = 30


class FeedSnapshot(BaseModel):
    """Ordered feed items plus the time they were captured (``None`` when empty)."""

    items: list[ContentItem] = Field(default_factory=list)
    captured_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items


class ChannelFailure(BaseModel):
    channel_id: str
    error: str


class FeedResponse(BaseModel):
    items: list[ContentItem]
    captured_at: datetime | None
    needs_refresh: bool


class RefreshResponse(BaseModel):
    items: list[ContentItem]
    failures: list[ChannelFailure]
    captured_at: datetime | None = None


class WatchedToggleResponse(BaseModel):
    item_id: str
    watched: bool


class WatchedListResponse(BaseModel):
    item_ids: list[str]
