"""Persisted feed snapshot with a 24 hour freshness window."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.schema.content import ContentItem, FeedSnapshot, content_items_adapter
from app.services.settings_store import get_value, put_value

logger = logging.getLogger(__name__)

FEED_CACHE_KEY = "feed_snapshot"
FRESHNESS_WINDOW = timedelta(hours=24)


async def read_feed(session: AsyncSession, *, now: datetime | None = None) -> FeedSnapshot:
    """Return the cached snapshot while it is fresh, otherwise an empty one."""

    row = await get_value(session, FEED_CACHE_KEY)
    if row is None:
        return FeedSnapshot()

    try:
        captured_at = datetime.fromisoformat(row.value["captured_at"])
        items = content_items_adapter.validate_python(row.value["items"])
    except (KeyError, TypeError, ValueError, ValidationError):
        logger.warning("Discarding unreadable feed cache entry")
        return FeedSnapshot()

    if captured_at.tzinfo is None:
        captured_at = captured_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now - captured_at >= FRESHNESS_WINDOW:
        return FeedSnapshot()
    return FeedSnapshot(items=items, captured_at=captured_at)


async def write_feed(
    session: AsyncSession,
    items: Sequence[ContentItem],
    *,
    now: datetime | None = None,
) -> FeedSnapshot | None:
    """Persist ``items`` with a new capture time; an empty feed never replaces the cache."""

    if not items:
        return None

    captured_at = now or datetime.now(timezone.utc)
    payload = {
        "captured_at": captured_at.isoformat(),
        "items": content_items_adapter.dump_python(list(items), mode="json"),
    }
    await put_value(session, FEED_CACHE_KEY, payload)
    return FeedSnapshot(items=list(items), captured_at=captured_at)
