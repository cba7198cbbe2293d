"""API endpoints serving and refreshing the aggregated feed."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from app.routers.channels import CREDENTIAL_REQUIRED_DETAIL, channel_response
from app.schema.channel import ChannelFeedGroup
from app.schema.content import ChannelFailure, FeedResponse, RefreshResponse
from app.services.channel_registry import list_channels
from app.services.feed_service import RefreshInProgress, group_by_channel, load_feed, refresh_all
from app.services.youtube_client import YouTubeClient, get_youtube_client

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=FeedResponse)
async def get_feed(
    channel_id: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> FeedResponse:
    view = await load_feed(session, channel_id=channel_id)
    return FeedResponse(items=view.items, captured_at=view.captured_at, needs_refresh=view.needs_refresh)


@router.get("/by-channel", response_model=list[ChannelFeedGroup])
async def get_feed_by_channel(session: AsyncSession = Depends(get_session)) -> list[ChannelFeedGroup]:
    view = await load_feed(session)
    channels = await list_channels(session)
    return [
        ChannelFeedGroup(channel=channel_response(channel), items=items)
        for channel, items in group_by_channel(channels, view.items)
    ]


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_feed(
    session: AsyncSession = Depends(get_session),
    client: YouTubeClient = Depends(get_youtube_client),
) -> RefreshResponse:
    try:
        outcome = await refresh_all(session, client)
    except RefreshInProgress as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    if outcome.credential_required:
        raise HTTPException(status_code=status.HTTP_428_PRECONDITION_REQUIRED, detail=CREDENTIAL_REQUIRED_DETAIL)

    await session.commit()
    return RefreshResponse(
        items=outcome.items,
        failures=[
            ChannelFailure(channel_id=failure.channel_id, error=failure.error or "unknown error")
            for failure in outcome.failures
        ],
        captured_at=outcome.captured_at,
    )
