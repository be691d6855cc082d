"""Ingestion-time content filters: markup allowlist, link allowlist, video embeds."""

from .embeds import youtube_embed_url
from .links import UrlContext, validate_url
from .markup import sanitize_html

__all__ = [
    "UrlContext",
    "sanitize_html",
    "validate_url",
    "youtube_embed_url",
]
