"""
Timezone and timestamp helpers.

Timestamps are stored in UTC. Published documents render them in the
configured zone (game-day fans read Eastern time) as ISO 8601 with offset.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

# Descending thresholds for relative_time(); first one that fits wins.
_RELATIVE_UNITS: tuple[tuple[int, str], ...] = (
    (31536000, "year"),
    (2592000, "month"),
    (604800, "week"),
    (86400, "day"),
    (3600, "hour"),
    (60, "minute"),
)


def now_utc() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and normalize aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_iso(value: datetime, tz: tzinfo | None = None) -> str:
    """Render ``value`` as second-precision ISO 8601 with offset, e.g. 2025-01-05T19:07:00-05:00."""
    aware = ensure_utc(value)
    if tz is not None:
        aware = aware.astimezone(tz)
    return aware.replace(microsecond=0).isoformat()


def relative_time(timestamp: datetime, now: datetime | None = None) -> str:
    """Describe how long ago ``timestamp`` was, in English.

    Under a minute is "just now"; a single day is "yesterday"; everything
    else is "<n> <unit>[s] ago" using the largest unit that fits.

    Examples:
        59s   -> "just now"
        60s   -> "1 minute ago"
        86400 -> "yesterday"
        2d    -> "2 days ago"
    """
    if now is None:
        now = now_utc()

    diff = int((ensure_utc(now) - ensure_utc(timestamp)).total_seconds())
    if diff < 60:
        return "just now"

    for seconds, label in _RELATIVE_UNITS:
        count = diff // seconds
        if count >= 1:
            if label == "day" and count == 1:
                return "yesterday"
            plural = "s" if count > 1 else ""
            return f"{count} {label}{plural} ago"

    return "just now"
