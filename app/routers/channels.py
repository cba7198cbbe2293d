"""API endpoints for managing tracked YouTube channels."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Channel
from app.db.session import get_session
from app.schema.channel import (
    ChannelCreateRequest,
    ChannelListResponse,
    ChannelResponse,
    ChannelSearchResponse,
    ChannelSearchResult,
    ContentPreferences,
    PreferenceUpdateRequest,
)
from app.services.channel_registry import (
    ChannelNotFound,
    DuplicateChannel,
    add_channel,
    get_channel,
    list_channels,
    remove_channel,
    update_preference,
)
from app.services.channel_resolver import ChannelResolutionError, extract_channel_id
from app.services.feed_service import RefreshInProgress, refresh_channel
from app.services.youtube_client import CredentialMissing, UpstreamRequestFailed, YouTubeClient, get_youtube_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/channels", tags=["channels"])

CREDENTIAL_REQUIRED_DETAIL = "A YouTube API key is required; set it under /settings/api-key"


def channel_response(channel: Channel) -> ChannelResponse:
    return ChannelResponse(
        external_id=channel.external_id,
        title=channel.title,
        thumbnail=channel.thumbnail,
        upload_feed_id=channel.upload_feed_id,
        preferences=ContentPreferences(
            long_form=channel.long_form_enabled,
            shorts=channel.shorts_enabled,
            community=channel.community_enabled,
        ),
    )


@router.get("", response_model=ChannelListResponse)
async def list_tracked_channels(session: AsyncSession = Depends(get_session)) -> ChannelListResponse:
    channels = await list_channels(session)
    return ChannelListResponse(channels=[channel_response(channel) for channel in channels])


@router.get("/search", response_model=ChannelSearchResponse)
async def search_channels(
    q: str = Query(..., min_length=1),
    client: YouTubeClient = Depends(get_youtube_client),
) -> ChannelSearchResponse:
    try:
        profiles = await client.search_channels(q)
    except CredentialMissing as exc:
        raise HTTPException(status_code=status.HTTP_428_PRECONDITION_REQUIRED, detail=CREDENTIAL_REQUIRED_DETAIL) from exc
    except UpstreamRequestFailed as exc:
        logger.warning("Channel search failed for %r: %s", q, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return ChannelSearchResponse(
        results=[
            ChannelSearchResult(channel_id=profile.channel_id, title=profile.title, thumbnail=profile.thumbnail)
            for profile in profiles
        ]
    )


@router.post("", response_model=ChannelResponse, status_code=status.HTTP_201_CREATED)
async def add_tracked_channel(
    payload: ChannelCreateRequest,
    session: AsyncSession = Depends(get_session),
    client: YouTubeClient = Depends(get_youtube_client),
) -> ChannelResponse:
    try:
        channel_id = await extract_channel_id(payload.identifier, client)
        profile = await client.get_channel_profile(channel_id)
    except CredentialMissing as exc:
        raise HTTPException(status_code=status.HTTP_428_PRECONDITION_REQUIRED, detail=CREDENTIAL_REQUIRED_DETAIL) from exc
    except ChannelResolutionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except UpstreamRequestFailed as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found on YouTube")

    try:
        channel = await add_channel(
            session,
            channel_id=profile.channel_id,
            title=profile.title,
            thumbnail=profile.thumbnail,
            upload_feed_id=profile.upload_feed_id,
        )
    except DuplicateChannel as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    await session.commit()

    # Seed the feed with the new channel's content; failures only mean an emptier feed.
    try:
        outcome = await refresh_channel(session, client, channel)
    except RefreshInProgress:
        logger.info("Skipping seed fetch for %s; a refresh is already running", channel.external_id)
    else:
        for failure in outcome.failures:
            logger.warning("Seed fetch for %s failed: %s", failure.channel_id, failure.error)
        await session.commit()

    return channel_response(channel)


@router.patch("/{channel_id}/preferences", response_model=ChannelResponse)
async def update_channel_preferences(
    channel_id: str,
    payload: PreferenceUpdateRequest,
    session: AsyncSession = Depends(get_session),
) -> ChannelResponse:
    try:
        channel = await update_preference(session, channel_id, payload.kind, payload.enabled)
    except ChannelNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    await session.commit()
    return channel_response(channel)


@router.delete("/{channel_id}", response_model=ChannelResponse)
async def delete_channel(
    channel_id: str,
    session: AsyncSession = Depends(get_session),
) -> ChannelResponse:
    channel = await get_channel(session, channel_id)
    if channel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not tracked")

    response = channel_response(channel)
    await remove_channel(session, channel_id)
    await session.commit()
    return response
