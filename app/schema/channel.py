"""Pydantic models for channel management API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.schema.content import ContentItem, ContentKind


class ChannelCreateRequest(BaseModel):
    """Inbound payload to start tracking a channel."""

    identifier: str = Field(..., min_length=1, description="YouTube channel handle, URL, or UC id")


class ContentPreferences(BaseModel):
    long_form: bool
    shorts: bool
    community: bool


class ChannelResponse(BaseModel):
    """Representation of a tracked channel."""

    external_id: str
    title: str
    thumbnail: str = ""
    upload_feed_id: str | None = None
    preferences: ContentPreferences


class ChannelListResponse(BaseModel):
    """Wrapper containing tracked channels."""

    channels: list[ChannelResponse]


class PreferenceUpdateRequest(BaseModel):
    kind: ContentKind
    enabled: bool


class ChannelSearchResult(BaseModel):
    channel_id: str
    title: str
    thumbnail: str = ""


class ChannelSearchResponse(BaseModel):
    results: list[ChannelSearchResult]


class ChannelFeedGroup(BaseModel):
    """Feed items grouped under the channel that published them."""

    channel: ChannelResponse
    items: list[ContentItem]
