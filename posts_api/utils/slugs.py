"""URL slug helpers for post titles."""

from __future__ import annotations

from collections.abc import Iterable
import re
import unicodedata

FALLBACK_SLUG = "post"
SLUG_MAX_LENGTH = 200

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lowercase ASCII slug with single hyphens between words."""
    normalized = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    slug = _NON_ALPHANUMERIC.sub("-", normalized.lower()).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].rstrip("-")
    return slug or FALLBACK_SLUG


def unique_slug(title: str, existing_slugs: Iterable[str] = ()) -> str:
    """Return the slug for ``title``, suffixed with ``-2``, ``-3``... until unused."""
    base = slugify(title)
    taken = set(existing_slugs)
    if base not in taken:
        return base

    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"
