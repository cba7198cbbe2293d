"""Watched markers keyed by bare item id, independent of the cached feed."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import WatchedItem


async def is_watched(session: AsyncSession, item_id: str) -> bool:
    return await session.get(WatchedItem, item_id) is not None


async def toggle_watched(session: AsyncSession, item_id: str) -> bool:
    """Flip the watched marker for ``item_id`` and return the new state."""

    existing = await session.get(WatchedItem, item_id)
    if existing is not None:
        await session.delete(existing)
        await session.flush()
        return False

    session.add(WatchedItem(item_id=item_id))
    await session.flush()
    return True


async def list_watched(session: AsyncSession) -> list[str]:
    result = await session.scalars(select(WatchedItem.item_id).order_by(WatchedItem.created_at))
    return list(result)
