from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class SearchTier:
    """One step of the relaxation search: radius multiplier and quality floor."""

    radius_scale: float
    min_rating: float
    min_reviews: int


DEFAULT_TIERS: tuple[SearchTier, ...] = (
    SearchTier(radius_scale=1.0, min_rating=4.0, min_reviews=20),
    SearchTier(radius_scale=1.3, min_rating=3.8, min_reviews=10),
    SearchTier(radius_scale=1.6, min_rating=3.5, min_reviews=0),
)


@dataclass(frozen=True)
class PlacesConfig:
    api_key: str = os.getenv("GOOGLE_PLACES_API_KEY", "")
    nearby_url: str = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    details_url: str = "https://places.googleapis.com/v1/places"
    language: str = "ko"
    timeout: float = 10.0

    # City centre used when no station is selected
    default_latitude: float = 37.3942
    default_longitude: float = 126.9569
    default_radius_m: int = 10000
    station_radius_m: int = 1000
    locality_token: str = "안양"

    tiers: tuple[SearchTier, ...] = DEFAULT_TIERS
    min_target: int = 12
    target_multiplier: int = 3
    festival_radius_km: float = 2.0

    def target_max(self, desired_count: int) -> int:
        return max(self.min_target, desired_count * self.target_multiplier)


DEFAULT_PLACES_CONFIG = PlacesConfig()
