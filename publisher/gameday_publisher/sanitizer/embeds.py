"""YouTube embed URL derivation."""

from __future__ import annotations

import re

NOCOOKIE_EMBED_BASE = "https://www.youtube-nocookie.com/embed/"

# Checked in order; the first match supplies the video ID
_VIDEO_ID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/watch\?v=([a-zA-Z0-9_-]+)"),
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]+)"),
    re.compile(r"/embed/([a-zA-Z0-9_-]+)"),
)


def extract_video_id(url: str) -> str | None:
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def youtube_embed_url(url: str | None) -> str | None:
    """Map a watch/short/embed URL onto the privacy-enhanced nocookie player.

    Does not check protocol or host; run validate_url(url, "youtube") first.
    """
    if not url:
        return None
    video_id = extract_video_id(url)
    if video_id is None:
        return None
    return f"{NOCOOKIE_EMBED_BASE}{video_id}"
