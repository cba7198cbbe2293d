"""Fetch, classify and filter the content of a single tracked channel."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Channel
from app.schema.content import CommunityPost, ContentItem, ContentKind, FetchSettings, LongFormVideo, ShortFormVideo
from app.services.channel_registry import forget_upload_feed_id, is_kind_enabled, resolve_upload_feed_id
from app.services.classifier import classify
from app.services.detail_fetcher import fetch_durations
from app.services.time_window import within_window
from app.services.youtube_client import CredentialMissing, UpstreamRequestFailed, YouTubeClient

logger = logging.getLogger(__name__)

COMMUNITY_ACTIVITY_TYPE = "community"
COMMUNITY_ID_PREFIX_LENGTH = 50
COMMUNITY_PLACEHOLDER = "Community post"
# The upload feed cannot be filtered by kind, so over-fetch to leave room for exclusions.
FEED_OVERFETCH_FACTOR = 2


@dataclass(slots=True)
class ChannelFetchResult:
    """Outcome of fetching one channel; failures carry no items."""

    channel_id: str
    items: list[ContentItem] = field(default_factory=list)
    error: str | None = None
    credential_required: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.credential_required


async def _fetch_videos(
    session: AsyncSession,
    client: YouTubeClient,
    channel: Channel,
    fetch_settings: FetchSettings,
    now: datetime,
) -> list[ContentItem]:
    upload_feed_id = await resolve_upload_feed_id(session, client, channel)
    if not upload_feed_id:
        return []

    limit = fetch_settings.max_items_per_channel * FEED_OVERFETCH_FACTOR
    try:
        entries = await client.list_feed_items(upload_feed_id, limit)
    except UpstreamRequestFailed as exc:
        if exc.status_code == 404:
            await forget_upload_feed_id(session, channel)
        raise
    if not entries:
        return []

    durations = await fetch_durations(client, [entry.item_id for entry in entries])

    videos: list[ContentItem] = []
    for entry in entries:
        if not within_window(entry.published_at, fetch_settings.time_range_days, now=now):
            continue

        classification = classify(durations.get(entry.item_id))
        if not is_kind_enabled(channel, classification.kind):
            continue

        model = ShortFormVideo if classification.kind == ContentKind.SHORTS else LongFormVideo
        videos.append(
            model(
                id=entry.item_id,
                title=entry.title,
                thumbnail=entry.thumbnail,
                channel_id=channel.external_id,
                channel_name=channel.title,
                published_at=entry.published_at,
                duration=classification.duration_label,
            )
        )
    return videos


async def _fetch_community_posts(
    client: YouTubeClient,
    channel: Channel,
    fetch_settings: FetchSettings,
    now: datetime,
) -> list[ContentItem]:
    activities = await client.list_activity(channel.external_id, fetch_settings.max_items_per_channel)

    posts: list[ContentItem] = []
    for activity in activities:
        if activity.type != COMMUNITY_ACTIVITY_TYPE:
            continue
        if not within_window(activity.published_at, fetch_settings.time_range_days, now=now):
            continue

        post_id = activity.activity_id or activity.description[:COMMUNITY_ID_PREFIX_LENGTH]
        if not post_id:
            continue
        posts.append(
            CommunityPost(
                id=post_id,
                content=activity.description or COMMUNITY_PLACEHOLDER,
                thumbnail=activity.thumbnail,
                channel_id=channel.external_id,
                channel_name=channel.title,
                published_at=activity.published_at,
            )
        )
    return posts


async def fetch_channel_content(
    session: AsyncSession,
    client: YouTubeClient,
    channel: Channel,
    fetch_settings: FetchSettings,
    *,
    now: datetime | None = None,
) -> list[ContentItem]:
    """Return the channel's items that match its preferences and the time window.

    Raises ``CredentialMissing`` before any request when no API key is set and
    lets upstream failures propagate to the caller.
    """

    if not client.has_credential:
        raise CredentialMissing("YouTube API key is not configured")

    now = now or datetime.now(timezone.utc)
    items: list[ContentItem] = []
    if is_kind_enabled(channel, ContentKind.LONG_FORM) or is_kind_enabled(channel, ContentKind.SHORTS):
        items.extend(await _fetch_videos(session, client, channel, fetch_settings, now))
    if is_kind_enabled(channel, ContentKind.COMMUNITY):
        items.extend(await _fetch_community_posts(client, channel, fetch_settings, now))
    return items


async def fetch_channel_result(
    session: AsyncSession,
    client: YouTubeClient,
    channel: Channel,
    fetch_settings: FetchSettings,
    *,
    now: datetime | None = None,
) -> ChannelFetchResult:
    """Run ``fetch_channel_content`` and convert any failure into a per-channel result."""

    channel_id = channel.external_id
    try:
        items = await fetch_channel_content(session, client, channel, fetch_settings, now=now)
    except CredentialMissing:
        return ChannelFetchResult(channel_id=channel_id, credential_required=True)
    except Exception as exc:  # noqa: BLE001 - one channel must not abort the refresh
        logger.exception("Fetching content failed", extra={"channel_id": channel_id})
        return ChannelFetchResult(channel_id=channel_id, error=str(exc) or exc.__class__.__name__)

    logger.info("Fetched %s items for channel %s", len(items), channel.title)
    return ChannelFetchResult(channel_id=channel_id, items=items)
