"""Run one full feed refresh from the command line."""

from __future__ import annotations

import asyncio
import logging
import sys

import httpx

from app.db.init_db import init_models
from app.db.session import SessionLocal, engine
from app.services.feed_service import RefreshInProgress, refresh_all
from app.services.settings_store import get_api_key
from app.services.youtube_client import YouTubeClient


async def run_refresh() -> int:
    await init_models(engine)
    async with SessionLocal() as session:
        api_key = await get_api_key(session)
        async with httpx.AsyncClient(headers={"User-Agent": "channel-feed/0.1"}) as http:
            try:
                outcome = await refresh_all(session, YouTubeClient(api_key, http))
            except RefreshInProgress:
                print("A refresh is already running.")
                return 1

        if outcome.credential_required:
            print("No YouTube API key configured; set APP_YOUTUBE_API_KEY or PUT /settings/api-key.")
            return 2

        await session.commit()

    for failure in outcome.failures:
        print(f"Channel {failure.channel_id} failed: {failure.error}")
    print(f"Feed refreshed with {len(outcome.items)} items.")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(run_refresh()))
