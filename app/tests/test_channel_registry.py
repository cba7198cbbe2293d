"""Tests for the channel registry helpers."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Channel
from app.schema.content import ContentKind
from app.services import channel_registry


@pytest.mark.asyncio
async def test_add_channel_uses_default_preferences(session: AsyncSession) -> None:
    channel_id = "UC" + "A" * 22
    channel = await channel_registry.add_channel(session, channel_id=channel_id, title="Demo")

    assert isinstance(channel, Channel)
    assert channel.external_id == channel_id
    assert channel_registry.is_kind_enabled(channel, ContentKind.LONG_FORM) is True
    assert channel_registry.is_kind_enabled(channel, ContentKind.SHORTS) is True
    assert channel_registry.is_kind_enabled(channel, ContentKind.COMMUNITY) is False
    assert channel.upload_feed_id is None


@pytest.mark.asyncio
async def test_add_channel_rejects_duplicates(session: AsyncSession) -> None:
    channel_id = "UC" + "A" * 22
    await channel_registry.add_channel(session, channel_id=channel_id, title="Demo")

    with pytest.raises(channel_registry.DuplicateChannel):
        await channel_registry.add_channel(session, channel_id=channel_id, title="Again")


@pytest.mark.asyncio
async def test_add_channel_rejects_invalid_identifier(session: AsyncSession) -> None:
    with pytest.raises(ValueError, match="Invalid channel id"):
        await channel_registry.add_channel(session, channel_id="invalid", title="Nope")


@pytest.mark.asyncio
async def test_list_and_remove_channel(session: AsyncSession) -> None:
    first = "UC" + "B" * 22
    second = "UC" + "D" * 22
    await channel_registry.add_channel(session, channel_id=first, title="First")
    await channel_registry.add_channel(session, channel_id=second, title="Second")

    channels = await channel_registry.list_channels(session)
    assert [ch.external_id for ch in channels] == [first, second]

    assert await channel_registry.remove_channel(session, first) is True
    assert await channel_registry.remove_channel(session, first) is False

    channels = await channel_registry.list_channels(session)
    assert [ch.external_id for ch in channels] == [second]


@pytest.mark.asyncio
async def test_update_preference(session: AsyncSession) -> None:
    channel_id = "UC" + "E" * 22
    await channel_registry.add_channel(session, channel_id=channel_id, title="Demo")

    channel = await channel_registry.update_preference(session, channel_id, "community", True)
    assert channel.community_enabled is True

    channel = await channel_registry.update_preference(session, channel_id, ContentKind.SHORTS, False)
    assert channel.shorts_enabled is False


@pytest.mark.asyncio
async def test_update_preference_unknown_channel(session: AsyncSession) -> None:
    with pytest.raises(channel_registry.ChannelNotFound):
        await channel_registry.update_preference(session, "UC" + "Z" * 22, ContentKind.SHORTS, False)


@pytest.mark.asyncio
async def test_resolve_upload_feed_id_caches_once(session: AsyncSession, fake_client) -> None:
    channel_id = "UC" + "F" * 22
    channel = await channel_registry.add_channel(session, channel_id=channel_id, title="Demo")
    fake_client.upload_feeds[channel_id] = "UU" + "F" * 22

    assert await channel_registry.resolve_upload_feed_id(session, fake_client, channel) == "UU" + "F" * 22
    assert await channel_registry.resolve_upload_feed_id(session, fake_client, channel) == "UU" + "F" * 22
    assert fake_client.count("resolve_upload_feed") == 1

    stored = await channel_registry.get_channel(session, channel_id)
    assert stored is not None and stored.upload_feed_id == "UU" + "F" * 22


@pytest.mark.asyncio
async def test_resolve_upload_feed_id_does_not_cache_empty_result(session: AsyncSession, fake_client) -> None:
    channel_id = "UC" + "G" * 22
    channel = await channel_registry.add_channel(session, channel_id=channel_id, title="Demo")

    assert await channel_registry.resolve_upload_feed_id(session, fake_client, channel) is None
    fake_client.upload_feeds[channel_id] = "UU" + "G" * 22
    assert await channel_registry.resolve_upload_feed_id(session, fake_client, channel) == "UU" + "G" * 22
    assert fake_client.count("resolve_upload_feed") == 2
