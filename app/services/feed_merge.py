"""Merge freshly fetched items into an existing feed."""

from __future__ import annotations

from collections.abc import Iterable

from app.schema.content import ContentItem

FeedKey = tuple[str, str, str]


def composite_key(item: ContentItem) -> FeedKey:
    """Identity of an item in the feed: (kind, channel id, item id)."""

    return (item.kind, item.channel_id, item.id)


def merge_items(existing: Iterable[ContentItem], incoming: Iterable[ContentItem]) -> list[ContentItem]:
    """Insert or overwrite ``incoming`` by composite key and sort newest first.

    Overwritten entries keep their original position before sorting, so
    ties in ``published_at`` keep a stable order across repeated merges.
    """

    merged: dict[FeedKey, ContentItem] = {composite_key(item): item for item in existing}
    for item in incoming:
        merged[composite_key(item)] = item
    return sorted(merged.values(), key=lambda item: item.published_at, reverse=True)
