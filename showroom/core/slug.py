"""SEO slugs for product URLs.

Slugs are never stored. They are derived from the English name and the
item number, and resolved by scanning the active catalog.
"""

import re
from collections.abc import Iterable
from typing import Protocol, TypeVar

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


class Sluggable(Protocol):
    """Anything exposing a derived slug (e.g. a Product row)."""

    @property
    def slug(self) -> str: ...


S = TypeVar("S", bound=Sluggable)


def derive_slug(name_en: str, item_no: str) -> str:
    """Derive a product slug.

    The name is lower-cased, every run of characters outside [a-z0-9]
    becomes one hyphen, and edge hyphens are stripped. The item number is
    only lower-cased.

    Non-ASCII letters collapse to hyphens, and a name with no ASCII
    alphanumerics yields "-{item_no}". Both are accepted.

    Example:
        >>> derive_slug("S/2 Storage Ottoman", "VWF24A2064CG-18")
        's-2-storage-ottoman-vwf24a2064cg-18'
    """
    cleaned = _NON_ALNUM_RUN.sub("-", name_en.lower()).strip("-")
    return f"{cleaned}-{item_no.lower()}"


def resolve_slug(candidates: Iterable[S], slug: str) -> S | None:
    """Return the first candidate whose derived slug equals ``slug``.

    Callers pass active products in a deterministic order; the first
    match wins when two products derive the same slug.
    """
    for candidate in candidates:
        if candidate.slug == slug:
            return candidate
    return None


def find_slug_collisions(candidates: Iterable[S], slug: str) -> list[S]:
    """Return every candidate deriving ``slug``."""
    return [candidate for candidate in candidates if candidate.slug == slug]
