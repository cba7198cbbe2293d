"""Shared fixtures: an in-memory database and a scripted YouTube client."""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Sequence

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db.models import Base
from app.services.youtube_client import ActivityEntry, FeedEntry, UpstreamRequestFailed


def _memory_db_url() -> str:
    return f"sqlite+aiosqlite:///file:channel_feed_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


@pytest_asyncio.fixture
async def session() -> AsyncIterator[AsyncSession]:
    engine = create_async_engine(_memory_db_url(), future=True, connect_args={"uri": True})
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
    async with SessionLocal() as session:
        yield session
        await session.rollback()

    await engine.dispose()


class FakeYouTubeClient:
    """Stands in for ``YouTubeClient`` with canned per-channel responses."""

    def __init__(self, api_key: str | None = "test-key") -> None:
        self.api_key = api_key
        self.upload_feeds: dict[str, str | None] = {}
        self.feed_items: dict[str, list[FeedEntry]] = {}
        self.durations: dict[str, str] = {}
        self.activities: dict[str, list[ActivityEntry]] = {}
        self.failing_channels: set[str] = set()
        self.feed_status_errors: dict[str, int] = {}
        self.calls: list[tuple[str, object]] = []

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    async def resolve_upload_feed(self, channel_id: str) -> str | None:
        self.calls.append(("resolve_upload_feed", channel_id))
        if channel_id in self.failing_channels:
            raise UpstreamRequestFailed(f"boom for {channel_id}")
        return self.upload_feeds.get(channel_id)

    async def list_feed_items(self, feed_id: str, limit: int) -> list[FeedEntry]:
        self.calls.append(("list_feed_items", (feed_id, limit)))
        if feed_id in self.feed_status_errors:
            raise UpstreamRequestFailed("feed gone", status_code=self.feed_status_errors[feed_id])
        return self.feed_items.get(feed_id, [])[:limit]

    async def get_item_details(self, item_ids: Sequence[str]) -> dict[str, str]:
        self.calls.append(("get_item_details", list(item_ids)))
        return {item_id: self.durations[item_id] for item_id in item_ids if item_id in self.durations}

    async def list_activity(self, channel_id: str, limit: int) -> list[ActivityEntry]:
        self.calls.append(("list_activity", (channel_id, limit)))
        return self.activities.get(channel_id, [])[:limit]

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)


@pytest.fixture
def fake_client() -> FakeYouTubeClient:
    return FakeYouTubeClient()
