"""Helpers for managing tracked YouTube channels and their content preferences."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Channel
from app.schema.content import ContentKind
from app.services.channel_resolver import CHANNEL_ID_REGEX
from app.services.youtube_client import YouTubeClient

logger = logging.getLogger(__name__)

_PREFERENCE_COLUMNS = {
    ContentKind.LONG_FORM: "long_form_enabled",
    ContentKind.SHORTS: "shorts_enabled",
    ContentKind.COMMUNITY: "community_enabled",
}


class ChannelNotFound(LookupError):
    """Raised when an operation targets a channel that is not tracked."""


class DuplicateChannel(ValueError):
    """Raised when adding a channel that is already tracked."""


def is_kind_enabled(channel: Channel, kind: ContentKind | str) -> bool:
    return bool(getattr(channel, _PREFERENCE_COLUMNS[ContentKind(kind)]))


async def list_channels(session: AsyncSession) -> Sequence[Channel]:
    """Return all tracked channels in the order they were added."""

    result = await session.scalars(select(Channel).order_by(Channel.created_at, Channel.id))
    return list(result)


async def get_channel(session: AsyncSession, channel_id: str) -> Channel | None:
    """Fetch a channel by external identifier."""

    if not CHANNEL_ID_REGEX.match(channel_id):
        return None
    return await session.scalar(select(Channel).where(Channel.external_id == channel_id))


async def add_channel(
    session: AsyncSession,
    *,
    channel_id: str,
    title: str,
    thumbnail: str = "",
    upload_feed_id: str | None = None,
) -> Channel:
    """Start tracking a channel with default preferences (long-form and shorts on, community off)."""

    if not CHANNEL_ID_REGEX.match(channel_id):
        raise ValueError(f"Invalid channel id: {channel_id}")

    existing = await session.scalar(select(Channel).where(Channel.external_id == channel_id))
    if existing is not None:
        raise DuplicateChannel(f"Channel {channel_id} is already tracked")

    channel = Channel(
        external_id=channel_id,
        title=title or channel_id,
        thumbnail=thumbnail,
        upload_feed_id=upload_feed_id or None,
        long_form_enabled=True,
        shorts_enabled=True,
        community_enabled=False,
    )
    session.add(channel)
    await session.flush()
    return channel


async def remove_channel(session: AsyncSession, channel_id: str) -> bool:
    """Stop tracking a channel; returns True when a row was removed."""

    channel = await get_channel(session, channel_id)
    if channel is None:
        return False

    await session.delete(channel)
    await session.flush()
    return True


async def update_preference(
    session: AsyncSession,
    channel_id: str,
    kind: ContentKind | str,
    enabled: bool,
) -> Channel:
    channel = await get_channel(session, channel_id)
    if channel is None:
        raise ChannelNotFound(f"Channel {channel_id} is not tracked")

    setattr(channel, _PREFERENCE_COLUMNS[ContentKind(kind)], enabled)
    await session.flush()
    return channel


async def resolve_upload_feed_id(session: AsyncSession, client: YouTubeClient, channel: Channel) -> str | None:
    """Return the channel's upload feed id, looking it up once and caching it on the row.

    An empty lookup is not cached so a later call can retry. Concurrent
    resolutions write the same value, so the last writer wins.
    """

    if channel.upload_feed_id:
        return channel.upload_feed_id

    upload_feed_id = await client.resolve_upload_feed(channel.external_id)
    if not upload_feed_id:
        logger.warning("No upload feed found for channel %s", channel.external_id)
        return None

    channel.upload_feed_id = upload_feed_id
    await session.flush()
    return upload_feed_id


async def forget_upload_feed_id(session: AsyncSession, channel: Channel) -> None:
    """Drop a cached upload feed id that the upstream no longer recognises."""

    if channel.upload_feed_id is None:
        return
    logger.info("Clearing stale upload feed %s for channel %s", channel.upload_feed_id, channel.external_id)
    channel.upload_feed_id = None
    await session.flush()
