"""Classify uploads as long-form videos or shorts from their duration code."""

from __future__ import annotations

import re
from dataclasses import dataclass

from app.schema.content import ContentKind

SHORTS_MAX_SECONDS = 60
SHORT_LABEL = "Short"
UNKNOWN_DURATION_LABEL = "Video"

_DURATION_RE = re.compile(r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$")


@dataclass(frozen=True, slots=True)
class Classification:
    kind: ContentKind
    duration_label: str
    total_seconds: int | None


def duration_to_seconds(code: str | None) -> int | None:
    """Convert an ISO-8601 duration (``PT4M5S``) into seconds; ``None`` when unparseable."""

    if not code:
        return None
    match = _DURATION_RE.match(code.strip().upper())
    if not match or not any(match.groups()):
        return None
    days, hours, minutes, seconds = (int(part or 0) for part in match.groups())
    return ((days * 24 + hours) * 60 + minutes) * 60 + seconds


def format_duration(total_seconds: int) -> str:
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def classify(duration_code: str | None) -> Classification:
    total_seconds = duration_to_seconds(duration_code)
    if total_seconds is None:
        return Classification(ContentKind.LONG_FORM, UNKNOWN_DURATION_LABEL, None)
    if total_seconds <= SHORTS_MAX_SECONDS:
        return Classification(ContentKind.SHORTS, SHORT_LABEL, total_seconds)
    return Classification(ContentKind.LONG_FORM, format_duration(total_seconds), total_seconds)
