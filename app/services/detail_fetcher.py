"""Batched duration lookups for upload-feed entries."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from app.services.youtube_client import MAX_DETAIL_IDS, UpstreamRequestFailed, YouTubeClient

logger = logging.getLogger(__name__)

DETAIL_BATCH_SIZE = MAX_DETAIL_IDS


def batched(item_ids: Sequence[str], size: int = DETAIL_BATCH_SIZE) -> list[list[str]]:
    return [list(item_ids[start : start + size]) for start in range(0, len(item_ids), size)]


async def fetch_durations(client: YouTubeClient, item_ids: Sequence[str]) -> dict[str, str]:
    """Return ``{item_id: duration_code}`` using one detail request per 50 ids.

    A failed batch contributes nothing; its items fall back to the unknown
    duration default while the remaining batches still run.
    """

    durations: dict[str, str] = {}
    for batch in batched(item_ids):
        try:
            durations.update(await client.get_item_details(batch))
        except UpstreamRequestFailed as exc:
            logger.warning("Duration lookup failed for %s ids: %s", len(batch), exc)
    return durations
