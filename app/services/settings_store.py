"""Persisted operator settings: fetch limits and the YouTube API key."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.models import StoredValue
from app.schema.content import FetchSettings

FETCH_SETTINGS_KEY = "fetch_settings"
API_KEY_KEY = "youtube_api_key"


async def get_value(session: AsyncSession, key: str) -> StoredValue | None:
    return await session.get(StoredValue, key)


async def put_value(session: AsyncSession, key: str, value: Any) -> StoredValue:
    """Insert or replace a stored value."""

    row = await session.get(StoredValue, key)
    if row is None:
        row = StoredValue(key=key, value=value)
        session.add(row)
    else:
        row.value = value
    await session.flush()
    return row


def default_fetch_settings() -> FetchSettings:
    return FetchSettings(
        max_items_per_channel=settings.default_max_items_per_channel,
        time_range_days=settings.default_time_range_days,
    )


async def get_fetch_settings(session: AsyncSession) -> FetchSettings:
    row = await get_value(session, FETCH_SETTINGS_KEY)
    if row is None:
        return default_fetch_settings()
    return FetchSettings.model_validate(row.value)


async def save_fetch_settings(session: AsyncSession, fetch_settings: FetchSettings) -> FetchSettings:
    await put_value(session, FETCH_SETTINGS_KEY, fetch_settings.model_dump())
    return fetch_settings


async def get_api_key(session: AsyncSession) -> str | None:
    """Return the stored API key, falling back to ``APP_YOUTUBE_API_KEY``."""

    row = await get_value(session, API_KEY_KEY)
    if row is not None and row.value:
        return row.value
    return settings.youtube_api_key


async def save_api_key(session: AsyncSession, api_key: str) -> None:
    await put_value(session, API_KEY_KEY, api_key.strip())
