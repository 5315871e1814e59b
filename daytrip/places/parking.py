from __future__ import annotations

import logging

from ..itinerary.geo import distance_km
from .aggregator import to_candidate
from .client import search_nearby
from .config import DEFAULT_PLACES_CONFIG, PlacesConfig
from .models import Candidate, Category

logger = logging.getLogger(__name__)

MAX_PARKING_RESULTS = 50


def search_parking(
    latitude: float,
    longitude: float,
    radius_m: int = 1000,
    max_results: int = 10,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> list[Candidate]:
    """Parking lots around a point, nearest first."""
    if not config.api_key:
        logger.warning("Google Places API key not configured, returning empty list for parking")
        return []

    limit = max(1, min(max_results, MAX_PARKING_RESULTS))
    seen: set[str] = set()
    lots: list[Candidate] = []
    for raw in search_nearby(latitude, longitude, radius_m, "parking", config=config):
        if raw.id in seen:
            continue
        seen.add(raw.id)
        lots.append(to_candidate(raw, category=Category.PARKING))

    def _distance(lot: Candidate) -> float:
        if not lot.has_coordinates:
            return float("inf")
        return distance_km(latitude, longitude, lot.latitude, lot.longitude)

    lots.sort(key=_distance)
    return lots[:limit]
