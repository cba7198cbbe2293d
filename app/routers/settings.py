"""API endpoints for fetch settings and the YouTube API key."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from app.schema.content import FetchSettings
from app.schema.settings import ApiKeyRequest, SettingsResponse
from app.services.settings_store import get_api_key, get_fetch_settings, save_api_key, save_fetch_settings

router = APIRouter(prefix="/settings", tags=["settings"])


async def _current(session: AsyncSession) -> SettingsResponse:
    return SettingsResponse(
        fetch=await get_fetch_settings(session),
        api_key_configured=bool(await get_api_key(session)),
    )


@router.get("", response_model=SettingsResponse)
async def read_settings(session: AsyncSession = Depends(get_session)) -> SettingsResponse:
    return await _current(session)


@router.put("/fetch", response_model=SettingsResponse)
async def update_fetch_settings(
    payload: FetchSettings,
    session: AsyncSession = Depends(get_session),
) -> SettingsResponse:
    await save_fetch_settings(session, payload)
    await session.commit()
    return await _current(session)


@router.put("/api-key", response_model=SettingsResponse)
async def update_api_key(
    payload: ApiKeyRequest,
    session: AsyncSession = Depends(get_session),
) -> SettingsResponse:
    await save_api_key(session, payload.api_key)
    await session.commit()
    return await _current(session)
