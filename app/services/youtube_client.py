"""Thin async wrapper over the YouTube Data API v3 endpoints the feed relies on."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_session
from app.services.settings_store import get_api_key

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50
MAX_DETAIL_IDS = 50


class CredentialMissing(RuntimeError):
    """Raised when no YouTube API key is configured."""


class UpstreamRequestFailed(RuntimeError):
    """Raised when a YouTube Data API call fails or returns an unusable body."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class FeedEntry:
    item_id: str
    title: str
    thumbnail: str
    published_at: datetime


@dataclass(slots=True)
class ActivityEntry:
    activity_id: str
    type: str
    description: str
    thumbnail: str
    published_at: datetime


@dataclass(slots=True)
class ChannelProfile:
    channel_id: str
    title: str
    thumbnail: str
    upload_feed_id: str | None


def parse_timestamp(raw: str) -> datetime:
    """Parse an RFC 3339 timestamp from the API into an aware datetime."""

    value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def snippet_thumbnail(snippet: dict[str, Any], *sizes: str) -> str:
    thumbnails = snippet.get("thumbnails") or {}
    for size in sizes or ("high", "medium", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


class YouTubeClient:
    """Issue YouTube Data API requests with a shared ``httpx.AsyncClient``."""

    def __init__(
        self,
        api_key: str | None,
        http: httpx.AsyncClient,
        *,
        base_url: str | None = None,
    ) -> None:
        self.api_key = api_key
        self._http = http
        self._base_url = (base_url or settings.youtube_api_base).rstrip("/")

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    async def _get(self, resource: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise CredentialMissing("YouTube API key is not configured")

        url = f"{self._base_url}/{resource}"
        try:
            response = await self._http.get(
                url,
                params={**params, "key": self.api_key},
                timeout=settings.youtube_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamRequestFailed(
                f"YouTube Data API {resource} returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamRequestFailed(f"Unable to contact YouTube Data API ({resource})") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamRequestFailed(f"Invalid response from YouTube Data API ({resource})") from exc
        if not isinstance(payload, dict):
            raise UpstreamRequestFailed(f"Invalid response from YouTube Data API ({resource})")
        return payload

    async def _paged_items(self, resource: str, params: dict[str, Any], limit: int) -> list[dict[str, Any]]:
        """Follow ``nextPageToken`` until ``limit`` items were collected.

        Stops early on an empty page or a token that was already requested.
        """

        items: list[dict[str, Any]] = []
        seen_tokens: set[str] = set()
        page_token: str | None = None
        while len(items) < limit:
            page_params = {**params, "maxResults": min(MAX_PAGE_SIZE, limit - len(items))}
            if page_token:
                page_params["pageToken"] = page_token
                seen_tokens.add(page_token)
            payload = await self._get(resource, page_params)
            page_items = payload.get("items") or []
            items.extend(page_items)
            page_token = payload.get("nextPageToken")
            if not page_items or not page_token or page_token in seen_tokens:
                break
        return items[:limit]

    async def resolve_upload_feed(self, channel_id: str) -> str | None:
        payload = await self._get("channels", {"part": "contentDetails", "id": channel_id})
        for item in payload.get("items") or []:
            uploads = ((item.get("contentDetails") or {}).get("relatedPlaylists") or {}).get("uploads")
            if uploads:
                return uploads
        return None

    async def get_channel_profile(self, channel_id: str) -> ChannelProfile | None:
        payload = await self._get("channels", {"part": "snippet,contentDetails", "id": channel_id})
        for item in payload.get("items") or []:
            snippet = item.get("snippet") or {}
            uploads = ((item.get("contentDetails") or {}).get("relatedPlaylists") or {}).get("uploads")
            return ChannelProfile(
                channel_id=item.get("id") or channel_id,
                title=snippet.get("title") or channel_id,
                thumbnail=snippet_thumbnail(snippet),
                upload_feed_id=uploads or None,
            )
        return None

    async def resolve_handle(self, handle: str) -> str | None:
        payload = await self._get("channels", {"part": "id", "forHandle": handle})
        for item in payload.get("items") or []:
            if item.get("id"):
                return item["id"]
        return None

    async def list_feed_items(self, feed_id: str, limit: int) -> list[FeedEntry]:
        """Return up to ``limit`` upload-feed entries, newest first."""

        raw_items = await self._paged_items("playlistItems", {"part": "snippet", "playlistId": feed_id}, limit)
        entries: list[FeedEntry] = []
        for item in raw_items:
            snippet = item.get("snippet") or {}
            item_id = (snippet.get("resourceId") or {}).get("videoId")
            published = snippet.get("publishedAt")
            if not item_id or not published:
                logger.debug("Skipping upload feed entry without id or timestamp in %s", feed_id)
                continue
            entries.append(
                FeedEntry(
                    item_id=item_id,
                    title=snippet.get("title") or "",
                    thumbnail=snippet_thumbnail(snippet, "medium"),
                    published_at=parse_timestamp(published),
                )
            )
        return entries

    async def get_item_details(self, item_ids: Sequence[str]) -> dict[str, str]:
        """Return ``{video_id: ISO-8601 duration}`` for at most 50 ids."""

        if len(item_ids) > MAX_DETAIL_IDS:
            raise ValueError(f"At most {MAX_DETAIL_IDS} ids per detail request, got {len(item_ids)}")
        if not item_ids:
            return {}

        payload = await self._get("videos", {"part": "contentDetails", "id": ",".join(item_ids)})
        durations: dict[str, str] = {}
        for item in payload.get("items") or []:
            duration = (item.get("contentDetails") or {}).get("duration")
            if item.get("id") and duration:
                durations[item["id"]] = duration
        return durations

    async def list_activity(self, channel_id: str, limit: int) -> list[ActivityEntry]:
        raw_items = await self._paged_items("activities", {"part": "snippet", "channelId": channel_id}, limit)
        entries: list[ActivityEntry] = []
        for item in raw_items:
            snippet = item.get("snippet") or {}
            published = snippet.get("publishedAt")
            if not published:
                continue
            entries.append(
                ActivityEntry(
                    activity_id=item.get("id") or "",
                    type=snippet.get("type") or "",
                    description=snippet.get("description") or "",
                    thumbnail=snippet_thumbnail(snippet, "medium"),
                    published_at=parse_timestamp(published),
                )
            )
        return entries

    async def search_channels(self, query: str, limit: int = 10) -> list[ChannelProfile]:
        payload = await self._get(
            "search",
            {"part": "snippet", "q": query, "type": "channel", "maxResults": min(limit, MAX_PAGE_SIZE)},
        )
        results: list[ChannelProfile] = []
        for item in payload.get("items") or []:
            snippet = item.get("snippet") or {}
            channel_id = (item.get("id") or {}).get("channelId") or snippet.get("channelId")
            if not channel_id:
                continue
            results.append(
                ChannelProfile(
                    channel_id=channel_id,
                    title=snippet.get("title") or channel_id,
                    thumbnail=snippet_thumbnail(snippet),
                    upload_feed_id=None,
                )
            )
        return results


async def get_youtube_client(session: AsyncSession = Depends(get_session)) -> AsyncIterator[YouTubeClient]:
    """FastAPI dependency yielding a client bound to the configured API key."""

    api_key = await get_api_key(session)
    async with httpx.AsyncClient(headers={"User-Agent": "channel-feed/0.1"}) as http:
        yield YouTubeClient(api_key, http)
