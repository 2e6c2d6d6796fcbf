# src/blogpress/utils/slug.py
"""URL slug helpers."""

from __future__ import annotations

import re
import unicodedata

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")

FALLBACK_SLUG = "post"


def slugify(text: str | None) -> str:
    """Return a lower-case, dash-separated ASCII slug.

    Example: ``"How to Prepare for IGCSE Physics!"`` becomes
    ``"how-to-prepare-for-igcse-physics"``.
    """
    if not text or not text.strip():
        return ""
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    cleaned = _NON_WORD.sub("", normalized).strip().lower()
    return _SEPARATORS.sub("-", cleaned).strip("-")


def candidate_slugs(title: str):
    """Yield ``base``, ``base-1``, ``base-2``, ... for a title."""
    base = slugify(title) or FALLBACK_SLUG
    yield base
    counter = 1
    while True:
        yield f"{base}-{counter}"
        counter += 1
