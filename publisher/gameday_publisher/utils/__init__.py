"""Common utilities for the feed publisher."""

from .atomic_write import write_json_atomic
from .datetime_utils import ensure_utc, format_iso, now_utc, relative_time

__all__ = [
    "ensure_utc",
    "format_iso",
    "now_utc",
    "relative_time",
    "write_json_atomic",
]
