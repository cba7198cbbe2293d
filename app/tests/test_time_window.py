from datetime import datetime, timedelta, timezone

from app.services.time_window import window_cutoff, within_window

NOW = datetime(2024, 7, 16, 12, 0, tzinfo=timezone.utc)


def test_zero_days_admits_everything():
    assert window_cutoff(0, now=NOW) is None
    assert within_window(datetime(1990, 1, 1, tzinfo=timezone.utc), 0, now=NOW)
    assert within_window(NOW + timedelta(days=365), 0, now=NOW)


def test_window_excludes_older_items_and_includes_boundary():
    boundary = NOW - timedelta(days=7)
    assert within_window(boundary, 7, now=NOW)
    assert within_window(NOW - timedelta(days=1), 7, now=NOW)
    assert not within_window(boundary - timedelta(seconds=1), 7, now=NOW)


def test_naive_timestamps_are_treated_as_utc():
    naive = (NOW - timedelta(days=2)).replace(tzinfo=None)
    assert within_window(naive, 3, now=NOW)
    assert not within_window(naive, 1, now=NOW)
