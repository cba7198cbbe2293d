"""Aggregate channel content into the cached feed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Channel
from app.schema.content import ContentItem
from app.services.channel_fetcher import ChannelFetchResult, fetch_channel_result
from app.services.channel_registry import list_channels
from app.services.feed_cache import read_feed, write_feed
from app.services.feed_merge import merge_items
from app.services.settings_store import get_fetch_settings
from app.services.youtube_client import YouTubeClient

logger = logging.getLogger(__name__)

_refresh_lock = asyncio.Lock()


class RefreshInProgress(RuntimeError):
    """Raised when a refresh is requested while another one is running."""


@dataclass(slots=True)
class RefreshOutcome:
    items: list[ContentItem] = field(default_factory=list)
    failures: list[ChannelFetchResult] = field(default_factory=list)
    credential_required: bool = False
    captured_at: datetime | None = None


@dataclass(slots=True)
class FeedView:
    items: list[ContentItem]
    captured_at: datetime | None
    needs_refresh: bool


def _collect(results: Iterable[ChannelFetchResult]) -> tuple[list[ContentItem], list[ChannelFetchResult]]:
    items: list[ContentItem] = []
    failures: list[ChannelFetchResult] = []
    for result in results:
        if result.ok:
            items.extend(result.items)
        else:
            failures.append(result)
    return items, failures


async def _refresh(
    session: AsyncSession,
    client: YouTubeClient,
    channels: Sequence[Channel],
    seed: Sequence[ContentItem],
) -> RefreshOutcome:
    if not client.has_credential:
        return RefreshOutcome(items=list(seed), credential_required=True)

    fetch_settings = await get_fetch_settings(session)
    results = [await fetch_channel_result(session, client, channel, fetch_settings) for channel in channels]
    fresh, failures = _collect(results)

    merged = merge_items(seed, fresh)
    snapshot = await write_feed(session, merged)
    logger.info(
        "Refresh complete: %s channels, %s items, %s failures",
        len(channels),
        len(merged),
        len(failures),
    )
    return RefreshOutcome(
        items=merged,
        failures=failures,
        credential_required=any(result.credential_required for result in failures),
        captured_at=snapshot.captured_at if snapshot else None,
    )


async def _exclusive(run: Callable[[], Awaitable[RefreshOutcome]]) -> RefreshOutcome:
    if _refresh_lock.locked():
        raise RefreshInProgress("A feed refresh is already running")
    async with _refresh_lock:
        return await run()


async def refresh_all(session: AsyncSession, client: YouTubeClient) -> RefreshOutcome:
    """Fetch every tracked channel and replace the cached feed with the result."""

    async def _run() -> RefreshOutcome:
        channels = await list_channels(session)
        if not channels:
            return RefreshOutcome(credential_required=not client.has_credential)
        return await _refresh(session, client, channels, seed=[])

    return await _exclusive(_run)


async def refresh_channel(session: AsyncSession, client: YouTubeClient, channel: Channel) -> RefreshOutcome:
    """Fetch one channel and merge its items into the cached feed."""

    async def _run() -> RefreshOutcome:
        snapshot = await read_feed(session)
        return await _refresh(session, client, [channel], seed=snapshot.items)

    return await _exclusive(_run)


async def load_feed(session: AsyncSession, *, channel_id: str | None = None) -> FeedView:
    """Return cached items for tracked channels, flagging when a refresh is due."""

    snapshot = await read_feed(session)
    tracked = {channel.external_id for channel in await list_channels(session)}
    items = [
        item
        for item in snapshot.items
        if item.channel_id in tracked and (channel_id is None or item.channel_id == channel_id)
    ]
    return FeedView(items=items, captured_at=snapshot.captured_at, needs_refresh=snapshot.is_empty)


def group_by_channel(
    channels: Sequence[Channel],
    items: Sequence[ContentItem],
) -> list[tuple[Channel, list[ContentItem]]]:
    """Group feed items under their channel, in registry order, skipping empty channels."""

    grouped: list[tuple[Channel, list[ContentItem]]] = []
    for channel in channels:
        channel_items = [item for item in items if item.channel_id == channel.external_id]
        if channel_items:
            grouped.append((channel, channel_items))
    return grouped
