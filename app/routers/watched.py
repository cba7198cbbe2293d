"""API endpoints for watched markers."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from app.schema.content import WatchedListResponse, WatchedToggleResponse
from app.services.watched import list_watched, toggle_watched

router = APIRouter(prefix="/watched", tags=["watched"])


@router.get("", response_model=WatchedListResponse)
async def list_watched_items(session: AsyncSession = Depends(get_session)) -> WatchedListResponse:
    return WatchedListResponse(item_ids=await list_watched(session))


@router.post("/{item_id}/toggle", response_model=WatchedToggleResponse)
async def toggle_watched_item(item_id: str, session: AsyncSession = Depends(get_session)) -> WatchedToggleResponse:
    watched = await toggle_watched(session, item_id)
    await session.commit()
    return WatchedToggleResponse(item_id=item_id, watched=watched)
