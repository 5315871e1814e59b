from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from ..places.models import Candidate, PlaceQuery


@dataclass(frozen=True)
class _SearchMeta:
    display_name: str
    place_type: str
    keyword: str
    alt_keywords: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()


# Per-enum metadata, registered below once the tables exist
_META_TABLES: dict[type, dict] = {}


class _Lookup(str, Enum):
    """Enum whose members resolve from their value or Korean display name."""

    @property
    def meta(self) -> _SearchMeta:
        return _META_TABLES[type(self)][self]

    @property
    def display_name(self) -> str:
        return self.meta.display_name

    @classmethod
    def lookup(cls, token: str | None):
        """Return the matching member, or ``None`` for an unknown token."""
        if token is None:
            return None
        cleaned = token.strip()
        for member in cls:
            meta = member.meta
            if cleaned.lower() == member.value or cleaned in (meta.display_name, *meta.aliases):
                return member
        return None


class FoodType(_Lookup):
    CAFE = "cafe"
    KOREAN = "korean"
    CHINESE = "chinese"
    WESTERN = "western"
    JAPANESE = "japanese"
    OTHER = "other"

    @property
    def query(self) -> PlaceQuery:
        return PlaceQuery(self.meta.place_type, self.meta.keyword)

    @property
    def is_restaurant_class(self) -> bool:
        return self.meta.place_type == "restaurant"


class CultureType(_Lookup):
    MOVIE = "movie"
    PERFORMANCE = "performance"
    EXPERIENCE = "experience"
    FESTIVAL = "festival"
    OTHER = "other"

    @property
    def queries(self) -> tuple[PlaceQuery, ...]:
        return tuple(PlaceQuery(part, self.meta.keyword) for part in self.meta.place_type.split("|"))


class TransportType(_Lookup):
    PUBLIC = "public"
    CAR = "car"
    WALK = "walk"
    OTHER = "other"


class PeopleCount(_Lookup):
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR_PLUS = "4+"


_FOOD_META: dict[FoodType, _SearchMeta] = {
    FoodType.CAFE: _SearchMeta("카페", "cafe", "카페", aliases=("감성카페",)),
    FoodType.KOREAN: _SearchMeta("한식", "restaurant", "한식", ("한식", "밥집", "백반")),
    FoodType.CHINESE: _SearchMeta("중식", "restaurant", "중식", ("중식", "중국집", "짜장면")),
    FoodType.WESTERN: _SearchMeta("양식", "restaurant", "양식", ("양식", "파스타", "스테이크")),
    FoodType.JAPANESE: _SearchMeta("일식", "restaurant", "일식", ("일식", "스시", "라멘")),
    FoodType.OTHER: _SearchMeta("기타", "restaurant", "맛집"),
}

_CULTURE_META: dict[CultureType, _SearchMeta] = {
    CultureType.MOVIE: _SearchMeta("영화", "movie_theater", "영화관"),
    CultureType.PERFORMANCE: _SearchMeta("공연/전시", "art_gallery|museum", "전시관"),
    CultureType.EXPERIENCE: _SearchMeta("체험", "tourist_attraction", "체험"),
    CultureType.FESTIVAL: _SearchMeta("지역축제", "tourist_attraction", "축제"),
    CultureType.OTHER: _SearchMeta("기타", "tourist_attraction", "문화시설"),
}

_TRANSPORT_META: dict[TransportType, _SearchMeta] = {
    TransportType.PUBLIC: _SearchMeta("대중교통", "", ""),
    TransportType.CAR: _SearchMeta("자동차", "", ""),
    TransportType.WALK: _SearchMeta("도보", "", ""),
    TransportType.OTHER: _SearchMeta("기타", "", ""),
}

_PEOPLE_META: dict[PeopleCount, _SearchMeta] = {
    PeopleCount.ONE: _SearchMeta("1인", "", ""),
    PeopleCount.TWO: _SearchMeta("2인", "", ""),
    PeopleCount.THREE: _SearchMeta("3인", "", ""),
    PeopleCount.FOUR_PLUS: _SearchMeta("4인 이상", "", "", aliases=("4인이상",)),
}

_META_TABLES.update({
    FoodType: _FOOD_META,
    CultureType: _CULTURE_META,
    TransportType: _TRANSPORT_META,
    PeopleCount: _PEOPLE_META,
})


@dataclass(frozen=True)
class PreferenceSpec:
    num_places: int
    foods: tuple[FoodType, ...]
    cultures: tuple[CultureType, ...]
    transport: TransportType = TransportType.OTHER
    date: dt.date = field(default_factory=dt.date.today)
    people_count: PeopleCount | None = None
    station: str | None = None

    @property
    def primary_food(self) -> FoodType:
        return self.foods[0] if self.foods else FoodType.OTHER

    @property
    def primary_culture(self) -> CultureType:
        return self.cultures[0] if self.cultures else CultureType.OTHER

    @property
    def is_restaurant_class(self) -> bool:
        return any(food.is_restaurant_class for food in self.foods)

    @property
    def ranking_food(self) -> FoodType:
        """First restaurant-class food when one was chosen, else the primary food."""
        for food in self.foods:
            if food.is_restaurant_class:
                return food
        return self.primary_food


@dataclass(frozen=True)
class SelectionResult:
    candidates: tuple[Candidate, ...]
    requested: int
    assisted: int = 0

    def __len__(self) -> int:
        return len(self.candidates)

    @property
    def is_short(self) -> bool:
        return len(self.candidates) < self.requested


class ItineraryRequest(BaseModel):
    date: str | None = Field(default=None, description="Visit date, YYYY-MM-DD")
    people_count: str | None = None
    food: str | None = Field(default=None, description="Single food choice (legacy)")
    culture: str | None = Field(default=None, description="Single culture choice (legacy)")
    foods: list[str] = Field(default_factory=list)
    cultures: list[str] = Field(default_factory=list)
    transport: str | None = None
    num_places: int = Field(default=4, ge=1, le=10)
    selected_station: str | None = None


class RouteStep(BaseModel):
    order_index: int = Field(..., ge=1)
    name: str
    latitude: float
    longitude: float


class ItineraryResponse(BaseModel):
    recommended_places: list[Candidate]
    optimized_route: list[RouteStep]
