from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    RESTAURANT = "RESTAURANT"
    CAFE = "CAFE"
    MOVIE = "MOVIE"
    CULTURE = "CULTURE"
    ATTRACTION = "ATTRACTION"
    FESTIVAL = "FESTIVAL"
    PARKING = "PARKING"
    OTHER = "OTHER"


@dataclass(frozen=True)
class RawPlace:
    """A single place-search hit, decoupled from the provider's JSON shape."""

    id: str
    name: str
    types: tuple[str, ...] = ()
    address: str | None = None
    rating: float | None = None
    review_count: int | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class PlaceQuery:
    place_type: str
    keyword: str


@dataclass(frozen=True)
class Anchor:
    name: str
    latitude: float
    longitude: float
    radius_m: int
    is_default: bool = False


class Candidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    category: Category = Category.OTHER
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    review_count: int | None = Field(default=None, ge=0)
    image_url: str | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def is_restaurant(self) -> bool:
        return self.category is Category.RESTAURANT


class PlaceDetails(BaseModel):
    place_id: str
    name: str | None = None
    category: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    rating: float | None = None
    user_rating_count: int | None = None
    overview: str | None = None
    open_now: bool | None = None
    opening_hours: list[str] = Field(default_factory=list)
    phone: str | None = None
    parking_options: list[str] = Field(default_factory=list)
    photo_urls: list[str] = Field(default_factory=list)
