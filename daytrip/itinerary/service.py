"""
Itinerary generation: preferences in, recommended places and a route out.

Responsibilities:
- Resolve the search anchor (selected station or the city centre)
- Gather the food, culture and dated-event pools
- Hand the pools to the selection engine and sequence the result
- Record an analytics event per generation
"""
from __future__ import annotations

import logging
import random
import time
from collections.abc import Iterable

from ..analytics.store import record_event
from ..festivals.store import events_on
from ..llm.groq_client import rank_places
from ..places.aggregator import aggregate, aggregate_near
from ..places.config import DEFAULT_PLACES_CONFIG, PlacesConfig
from ..places.models import Anchor, Candidate, PlaceQuery
from ..stations.store import resolve_station
from .geo import distance_km
from .models import CultureType, ItineraryRequest, ItineraryResponse, PreferenceSpec
from .preferences import normalize_preferences
from .routing import sequence
from .selection import Assist, CandidatePool, select_places

logger = logging.getLogger(__name__)

# Food pools smaller than this trigger the alternate-keyword supplement
SPARSE_FOOD_POOL = 3


def default_anchor(config: PlacesConfig = DEFAULT_PLACES_CONFIG) -> Anchor:
    return Anchor(
        name="default",
        latitude=config.default_latitude,
        longitude=config.default_longitude,
        radius_m=config.default_radius_m,
        is_default=True,
    )


def resolve_anchor(prefs: PreferenceSpec, config: PlacesConfig = DEFAULT_PLACES_CONFIG) -> Anchor:
    """Station coordinates when the selected station is known, else the city centre."""
    if not prefs.station:
        return default_anchor(config)

    station = resolve_station(prefs.station)
    if station is None:
        logger.warning("Station not found: %s, using default location", prefs.station)
        return default_anchor(config)

    logger.info("Using station %s (%s, %s)", station.name, station.latitude, station.longitude)
    return Anchor(
        name=station.name,
        latitude=station.latitude,
        longitude=station.longitude,
        radius_m=config.station_radius_m,
    )


def _merge(into: list[Candidate], seen: set[str], found: Iterable[Candidate]) -> None:
    for candidate in found:
        if candidate.id not in seen:
            seen.add(candidate.id)
            into.append(candidate)


def _search(anchor: Anchor, query: PlaceQuery, desired: int, config: PlacesConfig) -> list[Candidate]:
    if anchor.is_default:
        return aggregate(anchor, query, desired, config)
    return aggregate_near(anchor.latitude, anchor.longitude, anchor.radius_m, query, desired, config)


def gather_food(prefs: PreferenceSpec, anchor: Anchor, config: PlacesConfig = DEFAULT_PLACES_CONFIG) -> list[Candidate]:
    n = prefs.num_places
    pool: list[Candidate] = []
    seen: set[str] = set()
    for food in prefs.foods:
        _merge(pool, seen, _search(anchor, food.query, n, config))

    if len(pool) >= SPARSE_FOOD_POOL:
        return pool

    logger.info("Food pool sparse (%d), searching alternate keywords", len(pool))
    city = default_anchor(config)
    for food in prefs.foods:
        # Types without alternates retry their own keyword city-wide
        for keyword in food.meta.alt_keywords or (food.meta.keyword,):
            query = PlaceQuery(food.meta.place_type, keyword)
            _merge(pool, seen, aggregate(city, query, max(n * 2, 12), config))
            if len(pool) >= n * 2:
                return pool
    return pool


def gather_culture(prefs: PreferenceSpec, anchor: Anchor, config: PlacesConfig = DEFAULT_PLACES_CONFIG) -> list[Candidate]:
    if prefs.primary_culture is CultureType.FESTIVAL:
        logger.info("Festival selected, culture search replaced by dated events")
        return []

    pool: list[Candidate] = []
    seen: set[str] = set()
    for culture in prefs.cultures:
        for query in culture.queries:
            _merge(pool, seen, _search(anchor, query, prefs.num_places, config))
    return pool


def gather_events(prefs: PreferenceSpec, anchor: Anchor, config: PlacesConfig = DEFAULT_PLACES_CONFIG) -> list[Candidate]:
    """Festivals running on the visit date within walking range of the anchor."""
    try:
        running = events_on(prefs.date)
    except Exception:
        logger.warning("Festival lookup failed for %s", prefs.date, exc_info=True)
        return []

    return [
        event for event in running
        if event.has_coordinates
        and distance_km(anchor.latitude, anchor.longitude, event.latitude, event.longitude) <= config.festival_radius_km
    ]


def build_pool(prefs: PreferenceSpec, anchor: Anchor, config: PlacesConfig = DEFAULT_PLACES_CONFIG) -> CandidatePool:
    pool = CandidatePool(
        food=tuple(gather_food(prefs, anchor, config)),
        culture=tuple(gather_culture(prefs, anchor, config)),
        events=tuple(gather_events(prefs, anchor, config)),
    )
    logger.info(
        "Candidate pools -> food: %d, culture: %d, events: %d",
        len(pool.food), len(pool.culture), len(pool.events),
    )
    return pool


def create_itinerary(
    request: ItineraryRequest,
    rng: random.Random | None = None,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
    assist: Assist | None = rank_places,
) -> ItineraryResponse:
    start_time = time.time()

    prefs = normalize_preferences(request)
    anchor = resolve_anchor(prefs, config)
    pool = build_pool(prefs, anchor, config)

    # Fallback searches always go through the tiered city-wide aggregator
    city = default_anchor(config)
    result = select_places(
        pool,
        prefs,
        fetch=lambda query, desired: aggregate(city, query, desired, config),
        assist=assist,
    )

    places = list(result.candidates)
    route = sequence(places, rng)[: prefs.num_places]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("itinerary", {
        "foods": [f.value for f in prefs.foods],
        "cultures": [c.value for c in prefs.cultures],
        "station": anchor.name if not anchor.is_default else None,
        "requested": result.requested,
        "returned": len(result),
        "assist_picks": result.assisted,
        "response_time_ms": elapsed_ms,
    })

    return ItineraryResponse(recommended_places=places, optimized_route=route)
