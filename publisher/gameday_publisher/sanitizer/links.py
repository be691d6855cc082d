"""HTTPS link validation with per-context domain allowlists."""

from __future__ import annotations

from typing import Literal

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from ..config import settings

UrlContext = Literal["nhl_goal", "youtube", "general"]

# Hosts match exactly or as a proper subdomain ("x.nhl.com", never "evilnhl.com")
ALLOWED_DOMAINS: dict[str, tuple[str, ...]] = {
    "nhl_goal": ("nhl.com", "www.nhl.com"),
    "youtube": (
        "youtube.com",
        "www.youtube.com",
        "youtu.be",
        "youtube-nocookie.com",
        "www.youtube-nocookie.com",
    ),
}

_HTTP_URL = TypeAdapter(AnyHttpUrl)


def host_is_allowed(host: str, allowed_domains: tuple[str, ...]) -> bool:
    host = host.lower().rstrip(".")
    return any(
        host == domain or host.endswith("." + domain)
        for domain in allowed_domains
    )


def _parsed_host(url: str) -> str | None:
    """Structural check: scheme and host must both be present."""
    if any(ch.isspace() for ch in url):
        return None
    try:
        parsed = _HTTP_URL.validate_python(url)
    except ValidationError:
        return None
    return parsed.host or None


def validate_url(
    url: str | None,
    context: UrlContext | str = "general",
    max_length: int | None = None,
) -> str | None:
    """Return the trimmed ``url`` if it is acceptable for ``context``, else None.

    Every context requires https. ``general`` accepts any well-formed URL;
    ``nhl_goal`` and ``youtube`` also restrict the host.
    """
    if url is None:
        return None
    url = url.strip()
    if not url:
        return None

    limit = max_length if max_length is not None else settings.limits.max_url_length
    if len(url) > limit:
        return None

    if not url.lower().startswith("https://"):
        return None

    host = _parsed_host(url)
    if host is None:
        return None

    allowed_domains = ALLOWED_DOMAINS.get(context)
    if allowed_domains is not None and not host_is_allowed(host, allowed_domains):
        return None

    return url
