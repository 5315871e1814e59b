"""
Candidate aggregation with progressive relaxation.

Each tier widens the search radius and lowers the quality floor; results are
deduplicated by place id across tiers so the first sighting of a place wins.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from .classifier import classify
from .client import search_nearby
from .config import DEFAULT_PLACES_CONFIG, PlacesConfig
from .models import Anchor, Candidate, Category, PlaceQuery, RawPlace

logger = logging.getLogger(__name__)

_PLACEHOLDERS: dict[str, Candidate] = {
    "cafe": Candidate(
        id="placeholder-cafe-1",
        name="안양 감성 카페",
        category=Category.CAFE,
        address="안양시 만안구",
        latitude=37.3942,
        longitude=126.9569,
        rating=4.5,
    ),
    "restaurant": Candidate(
        id="placeholder-restaurant-1",
        name="안양 한식 맛집",
        category=Category.RESTAURANT,
        address="안양시 동안구",
        latitude=37.4016,
        longitude=126.9228,
        rating=4.2,
    ),
    "movie": Candidate(
        id="placeholder-movie-1",
        name="안양 영화관",
        category=Category.MOVIE,
        address="안양시 동안구",
        latitude=37.3980,
        longitude=126.9300,
        rating=4.0,
    ),
    "attraction": Candidate(
        id="placeholder-attraction-1",
        name="안양예술공원",
        category=Category.ATTRACTION,
        address="안양시 만안구 석수동",
        latitude=37.4173,
        longitude=126.9181,
        rating=4.3,
    ),
}


def placeholder_candidates(query: PlaceQuery) -> list[Candidate]:
    """Fixed stand-ins returned when no Places API key is configured."""
    place_type = query.place_type
    picked: list[Candidate] = []
    if "restaurant" in place_type or "cafe" in place_type:
        picked += [_PLACEHOLDERS["cafe"], _PLACEHOLDERS["restaurant"]]
    if "movie_theater" in place_type or "art_gallery" in place_type:
        picked.append(_PLACEHOLDERS["movie"])
    if "tourist_attraction" in place_type or "museum" in place_type:
        picked.append(_PLACEHOLDERS["attraction"])
    return picked


def to_candidate(raw: RawPlace, category: Category | None = None) -> Candidate:
    rating = None if raw.rating is None else max(0.0, min(5.0, raw.rating))
    return Candidate(
        id=raw.id,
        name=raw.name,
        category=category or classify(raw.types),
        address=raw.address,
        latitude=raw.latitude,
        longitude=raw.longitude,
        rating=rating,
        review_count=None if raw.review_count is None else max(0, raw.review_count),
    )


def _filter_new(
    raw_places: Iterable[RawPlace],
    min_rating: float,
    min_reviews: int,
    seen_ids: set[str],
    locality_token: str | None = None,
) -> list[Candidate]:
    """Apply the quality floor and locality check, skipping ids already seen.

    Places without coordinates are dropped here so every candidate can be routed.
    """
    fresh: list[Candidate] = []
    for raw in raw_places:
        if raw.id in seen_ids:
            continue
        if raw.latitude is None or raw.longitude is None:
            logger.warning("Skipping place %s without coordinates", raw.id)
            continue
        if locality_token and (not raw.address or locality_token not in raw.address):
            continue
        if (raw.rating or 0.0) < min_rating or (raw.review_count or 0) < min_reviews:
            continue
        fresh.append(to_candidate(raw))
        seen_ids.add(raw.id)
    return fresh


def _search(latitude: float, longitude: float, radius_m: int, query: PlaceQuery, config: PlacesConfig) -> list[RawPlace]:
    try:
        return search_nearby(
            latitude, longitude, radius_m, query.place_type, query.keyword, config=config,
        )
    except Exception:
        logger.warning("Place search raised for %s, treating as empty", query, exc_info=True)
        return []


def aggregate(
    anchor: Anchor,
    query: PlaceQuery,
    desired_count: int,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> list[Candidate]:
    """
    Collect up to ``max(12, desired_count * 3)`` candidates around ``anchor``.

    Tiers are tried in order and the loop stops as soon as the target is met.
    The locality filter only applies when searching the default city anchor.
    """
    if not config.api_key:
        logger.warning("Google Places API key not configured, returning placeholder places")
        return placeholder_candidates(query)

    target_max = config.target_max(desired_count)
    locality = config.locality_token if anchor.is_default else None
    seen_ids: set[str] = set()
    aggregated: list[Candidate] = []

    for tier in config.tiers:
        radius = int(anchor.radius_m * tier.radius_scale)
        raw_places = _search(anchor.latitude, anchor.longitude, radius, query, config)
        fresh = _filter_new(raw_places, tier.min_rating, tier.min_reviews, seen_ids, locality)
        aggregated.extend(fresh)
        logger.info(
            "Places fetched %s/%s (radius=%sm, rating>=%s, reviews>=%s): +%d (agg=%d)",
            query.place_type, query.keyword, radius, tier.min_rating, tier.min_reviews,
            len(fresh), len(aggregated),
        )
        if len(aggregated) >= target_max:
            break

    return aggregated[:target_max]


def aggregate_near(
    latitude: float,
    longitude: float,
    radius_m: int,
    query: PlaceQuery,
    desired_count: int,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> list[Candidate]:
    """Single-tier search around an explicit point; no locality filter, at most ``desired_count``."""
    if not config.api_key:
        logger.warning("Google Places API key not configured, returning placeholder places")
        return placeholder_candidates(query)[:desired_count]

    base = config.tiers[0]
    raw_places = _search(latitude, longitude, radius_m, query, config)
    fresh = _filter_new(raw_places, base.min_rating, base.min_reviews, set())
    logger.info(
        "Places fetched near (%s, %s) %s/%s (radius=%sm): %d",
        latitude, longitude, query.place_type, query.keyword, radius_m, len(fresh),
    )
    return fresh[:desired_count]
