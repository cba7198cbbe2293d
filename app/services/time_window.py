from __future__ import annotations

from datetime import datetime, timedelta, timezone


def window_cutoff(time_range_days: int, *, now: datetime | None = None) -> datetime | None:
    """Return the oldest admissible timestamp, or ``None`` when the window is unbounded."""

    if time_range_days <= 0:
        return None
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=time_range_days)


def within_window(published_at: datetime, time_range_days: int, *, now: datetime | None = None) -> bool:
    cutoff = window_cutoff(time_range_days, now=now)
    if cutoff is None:
        return True
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)
    if cutoff.tzinfo is None:
        cutoff = cutoff.replace(tzinfo=timezone.utc)
    return published_at >= cutoff
