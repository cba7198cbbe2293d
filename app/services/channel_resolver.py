"""Utilities for normalising YouTube channel identifiers."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlparse

if TYPE_CHECKING:
    from app.services.youtube_client import YouTubeClient

CHANNEL_ID_REGEX = re.compile(r"^UC[0-9A-Za-z_-]{22}$")


class ChannelResolutionError(ValueError):
    """Raised when a channel identifier cannot be normalised."""


def _channel_id_from_url(identifier: str) -> str | None:
    parsed = urlparse(identifier)
    # Feed URLs carry the id as a query parameter
    channel_ids = parse_qs(parsed.query).get("channel_id")
    if channel_ids and CHANNEL_ID_REGEX.match(channel_ids[-1]):
        return channel_ids[-1]

    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) >= 2 and parts[-2] == "channel" and CHANNEL_ID_REGEX.match(parts[-1]):
        return parts[-1]
    if parts and parts[-1].startswith("@"):
        return parts[-1]
    return None


async def extract_channel_id(raw: str, client: YouTubeClient) -> str:
    """Normalise user-supplied channel identifiers into canonical YouTube channel IDs.

    Supports:
      * Raw channel IDs (starting with UC)
      * YouTube feed URLs containing `channel_id`
      * Standard channel URLs (`/channel/UC...`) and handle URLs (`/@name`)
      * Channel handles (`@name`), looked up through the Data API

    """

    identifier = raw.strip()
    if not identifier:
        raise ChannelResolutionError("Empty channel identifier")

    if CHANNEL_ID_REGEX.match(identifier):
        return identifier

    if identifier.startswith("http://") or identifier.startswith("https://"):
        candidate = _channel_id_from_url(identifier)
        if candidate is None:
            raise ChannelResolutionError("Unsupported YouTube URL format")
        identifier = candidate
        if CHANNEL_ID_REGEX.match(identifier):
            return identifier

    if identifier.startswith("@"):
        handle = identifier.lstrip("@").strip()
        if not handle:
            raise ChannelResolutionError("Invalid YouTube channel handle")
        channel_id = await client.resolve_handle(handle)
        if not channel_id or not CHANNEL_ID_REGEX.match(channel_id):
            raise ChannelResolutionError("Channel handle not found")
        return channel_id

    raise ChannelResolutionError("Unsupported channel identifier format")
