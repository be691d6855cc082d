"""
Allowlist HTML sanitizer for operator-authored update snippets.

The parsed fragment is rebuilt into a fresh tree rather than edited in
place. For every node:

- allowed element: copied with only its allowlisted attributes, then its
  children are filtered the same way
- any other element: dropped, its filtered children take its place
- text: copied
- comments, doctypes, CDATA, processing instructions: dropped

The rebuilt fragment is serialized and passed through a final regex
scrub for script blocks, inline event handlers and javascript: hrefs.
"""

from __future__ import annotations

import html
import re
from typing import Any

from bs4 import BeautifulSoup, NavigableString, ParserRejectedMarkup, Tag
from bs4.element import PageElement, PreformattedString

from ..config import settings
from ..logging import logger

ALLOWED_TAGS: frozenset[str] = frozenset(
    {"a", "p", "br", "strong", "em", "ul", "ol", "li", "blockquote"}
)

ALLOWED_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "rel", "target"}),
}

BLOCKED_HREF_PREFIXES: tuple[str, ...] = ("javascript:", "data:", "vbscript:", "file:")

_SCRIPT_BLOCK_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE | re.MULTILINE)
_EVENT_HANDLER_RE = re.compile(r"""\s*on\w+\s*=\s*["'][^"']*["']""", re.IGNORECASE)
_JAVASCRIPT_HREF_RE = re.compile(r"""href\s*=\s*["']javascript:[^"']*["']""", re.IGNORECASE)
_URL_IGNORED_CHARS_RE = re.compile(r"[\x00-\x20]")


def is_safe_href(value: str) -> bool:
    """Reject dangerous schemes and any absolute URL that is not https.

    Relative paths and fragments carry no scheme and are allowed.
    """
    # Browsers ignore embedded tabs/newlines in schemes ("java\tscript:")
    url = _URL_IGNORED_CHARS_RE.sub("", value)
    lowered = url.lower()
    if lowered.startswith(BLOCKED_HREF_PREFIXES):
        return False
    if "://" in url and not lowered.startswith("https://"):
        return False
    return True


def _clean_attributes(tag_name: str, attrs: dict[str, Any]) -> dict[str, Any]:
    allowed = ALLOWED_ATTRIBUTES.get(tag_name, frozenset())
    kept: dict[str, Any] = {}
    for name, value in attrs.items():
        name = name.lower()
        if name not in allowed:
            continue
        if name == "href":
            href = value if isinstance(value, str) else " ".join(value)
            if not is_safe_href(href):
                continue
        kept[name] = value
    return kept


def _is_text(node: PageElement) -> bool:
    # Comment, CData, Doctype, Declaration and ProcessingInstruction are all
    # PreformattedString subclasses; script/style bodies are plain text here.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def _filter_children(node: Tag, factory: BeautifulSoup) -> list[PageElement]:
    filtered: list[PageElement] = []
    for child in node.children:
        if isinstance(child, Tag):
            name = child.name.lower()
            if name in ALLOWED_TAGS:
                clean = factory.new_tag(name, attrs=_clean_attributes(name, dict(child.attrs)))
                for grandchild in _filter_children(child, factory):
                    clean.append(grandchild)
                filtered.append(clean)
            else:
                filtered.extend(_filter_children(child, factory))
        elif _is_text(child):
            filtered.append(NavigableString(str(child)))
    return filtered


def _strip_javascript(markup: str) -> str:
    markup = _SCRIPT_BLOCK_RE.sub("", markup)
    markup = _EVENT_HANDLER_RE.sub("", markup)
    return _JAVASCRIPT_HREF_RE.sub("", markup)


def sanitize_html(raw: str | None, max_length: int | None = None) -> str | None:
    """Return the safe subset of ``raw`` markup, or None when nothing is left.

    Input beyond ``max_length`` characters (default 1000) is cut off before
    parsing. Malformed markup is tolerated, never raised on.
    """
    if raw is None or not raw.strip():
        return None

    limit = max_length if max_length is not None else settings.limits.max_markup_length
    if len(raw) > limit:
        raw = raw[:limit]

    try:
        # Wrapping keeps bare text and multiple top-level nodes under one root
        source = BeautifulSoup(f"<div>{raw}</div>", "html.parser")
    except ParserRejectedMarkup:
        logger.warning("markup_rejected_by_parser", length=len(raw))
        escaped = html.escape(raw, quote=False).strip()
        return escaped or None

    factory = BeautifulSoup("", "html.parser")
    container = factory.new_tag("div")
    for node in _filter_children(source, factory):
        container.append(node)

    result = _strip_javascript(container.decode_contents()).strip()
    return result or None
