"""HTML sanitization for author-submitted post bodies."""

from __future__ import annotations

import logging

import bleach
from bleach.css_sanitizer import CSSSanitizer

logger = logging.getLogger(__name__)

ALLOWED_TAGS: frozenset[str] = frozenset(
    {
        "a", "b", "blockquote", "br", "caption", "cite", "code", "col", "colgroup",
        "dd", "div", "dl", "dt", "em", "figcaption", "figure",
        "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "li", "ol", "p",
        "pre", "q", "s", "small", "span", "strike", "strong", "sub", "sup",
        "table", "tbody", "td", "tfoot", "th", "thead", "tr", "u", "ul",
    }
)

ALLOWED_ATTRIBUTES: dict[str, list[str]] = {
    "*": ["style"],
    "a": ["href", "title", "target", "rel"],
    "img": ["src", "alt", "title", "width", "height"],
    "code": ["class"],
    "pre": ["class"],
    "td": ["colspan", "rowspan"],
    "th": ["colspan", "rowspan"],
}

ALLOWED_PROTOCOLS: frozenset[str] = frozenset({"http", "https", "mailto"})

ALLOWED_CSS_PROPERTIES: frozenset[str] = frozenset(
    {
        "color", "background-color", "font-weight", "font-style", "text-align",
        "text-decoration", "width", "height",
    }
)

_css_sanitizer = CSSSanitizer(allowed_css_properties=ALLOWED_CSS_PROPERTIES)


def _attribute_filter(tag: str, name: str, value: str) -> bool:
    # Images may only be loaded over the web, never data: or javascript: URLs.
    if tag == "img" and name == "src":
        return value.lower().startswith(("http://", "https://"))
    allowed = ALLOWED_ATTRIBUTES.get(tag, []) + ALLOWED_ATTRIBUTES["*"]
    return name in allowed


def sanitize(raw_html: str | None) -> str:
    """Return ``raw_html`` restricted to the blog formatting allowlist.

    Blank input yields an empty string. The function never raises: if the
    cleaner itself fails, all markup is stripped instead.
    """
    if raw_html is None or not raw_html.strip():
        return ""
    try:
        return bleach.clean(
            raw_html,
            tags=ALLOWED_TAGS,
            attributes=_attribute_filter,
            protocols=ALLOWED_PROTOCOLS,
            css_sanitizer=_css_sanitizer,
            strip=True,
        )
    except Exception:  # pragma: no cover - bleach is total over str input
        logger.exception("HTML sanitizer failed; falling back to plain text")
        return strip_all(raw_html)


def strip_all(raw_html: str | None) -> str:
    """Remove every tag and return plain text only."""
    if raw_html is None or not raw_html.strip():
        return ""
    return bleach.clean(raw_html, tags=set(), attributes={}, strip=True)
