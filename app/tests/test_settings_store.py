import pytest
from pydantic import ValidationError

from app.schema.content import FetchSettings
from app.services import settings_store


@pytest.mark.asyncio
async def test_fetch_settings_default_then_round_trip(session, monkeypatch) -> None:
    monkeypatch.setattr(settings_store.settings, "default_max_items_per_channel", 5)
    monkeypatch.setattr(settings_store.settings, "default_time_range_days", 7)
    assert await settings_store.get_fetch_settings(session) == FetchSettings(max_items_per_channel=5, time_range_days=7)

    await settings_store.save_fetch_settings(session, FetchSettings(max_items_per_channel=50, time_range_days=0))
    assert await settings_store.get_fetch_settings(session) == FetchSettings(max_items_per_channel=50, time_range_days=0)


def test_fetch_settings_validation() -> None:
    with pytest.raises(ValidationError):
        FetchSettings(max_items_per_channel=0)
    with pytest.raises(ValidationError):
        FetchSettings(time_range_days=-1)


@pytest.mark.asyncio
async def test_api_key_falls_back_to_environment(session, monkeypatch) -> None:
    monkeypatch.setattr(settings_store.settings, "youtube_api_key", "env-key")
    assert await settings_store.get_api_key(session) == "env-key"

    await settings_store.save_api_key(session, "  stored-key ")
    assert await settings_store.get_api_key(session) == "stored-key"


@pytest.mark.asyncio
async def test_api_key_missing(session, monkeypatch) -> None:
    monkeypatch.setattr(settings_store.settings, "youtube_api_key", None)
    assert await settings_store.get_api_key(session) is None
