from __future__ import annotations

from collections.abc import Iterable

from .models import Category

# First match wins: a restaurant that also carries a cafe tag stays a restaurant.
_PRIORITY: tuple[tuple[frozenset[str], Category], ...] = (
    (frozenset({"restaurant"}), Category.RESTAURANT),
    (frozenset({"cafe"}), Category.CAFE),
    (frozenset({"movie_theater"}), Category.MOVIE),
    (frozenset({"art_gallery", "museum"}), Category.CULTURE),
    (frozenset({"tourist_attraction"}), Category.ATTRACTION),
)


def classify(raw_types: Iterable[str] | None) -> Category:
    """Map provider type tags onto the closed category taxonomy."""
    if not raw_types:
        return Category.OTHER
    tags = set(raw_types)
    for wanted, category in _PRIORITY:
        if tags & wanted:
            return category
    return Category.OTHER
