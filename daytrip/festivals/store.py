from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

from ..places.models import Candidate, Category

logger = logging.getLogger(__name__)

FESTIVAL_RATING = 5.0


@dataclass(frozen=True)
class Festival:
    id: int
    name: str
    start_date: dt.date
    end_date: dt.date
    latitude: float | None = None
    longitude: float | None = None
    location: str | None = None
    address: str | None = None
    description: str | None = None
    category: str | None = None
    image_url: str | None = None

    def runs_on(self, day: dt.date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_candidate(self) -> Candidate:
        return Candidate(
            id=f"festival-{self.id}",
            name=self.name,
            category=Category.FESTIVAL,
            address=self.address or self.location,
            latitude=self.latitude,
            longitude=self.longitude,
            rating=FESTIVAL_RATING,
            image_url=self.image_url,
        )


_festivals: list[Festival] = []


def add_festival(festival: Festival) -> None:
    _festivals.append(festival)


def get_festivals() -> list[Festival]:
    return _festivals


def clear_festivals() -> None:
    _festivals.clear()


def events_on(day: dt.date) -> list[Candidate]:
    """Festivals running on ``day``, as FESTIVAL candidates."""
    running = [f.to_candidate() for f in _festivals if f.runs_on(day)]
    logger.info("Found %d festivals for requested date: %s", len(running), day)
    return running


def seed_festivals() -> None:
    """Load the 2025 Anyang festival calendar (idempotent)."""
    if _festivals:
        return
    for festival in (
        Festival(1, "2025 안양충훈벚꽃축제", dt.date(2025, 4, 5), dt.date(2025, 4, 6),
                 37.3942, 126.9569, "충훈동 충훈2교 및 벚꽃길 일대", "안양시 만안구 충훈동",
                 "충훈동 충훈2교 및 벚꽃길 일대에서 열리는 봄맞이 벚꽃축제", "자연생태"),
        Festival(2, "제34회 안양예술제", dt.date(2025, 5, 2), dt.date(2025, 5, 3),
                 37.3902, 126.9506, "평촌중앙공원", "안양시 동안구 평촌중앙공원",
                 "평촌중앙공원에서 열리는 문화예술 축제", "문화예술"),
        Festival(3, "제22회 안양스마T움축제", dt.date(2025, 5, 31), dt.date(2025, 6, 1),
                 37.3960, 126.9540, "안양체육관", "안양시 동안구 안양체육관",
                 "안양체육관에서 열리는 스마트 기술 축제", "문화예술"),
        Festival(4, "2025 안양춤축제", dt.date(2025, 9, 26), dt.date(2025, 9, 28),
                 37.3902, 126.9506, "평촌중앙공원, 삼덕공원", "안양시 동안구 평촌중앙공원",
                 "평촌중앙공원과 삼덕공원에서 열리는 춤 축제", "문화예술"),
        Festival(5, "먹거리 한마당", dt.date(2025, 9, 26), dt.date(2025, 9, 28),
                 37.3902, 126.9506, "평촌중앙공원 다목적운동장", "안양시 동안구 평촌중앙공원",
                 "평촌중앙공원 다목적운동장에서 열리는 음식 축제", "문화예술"),
        Festival(6, "안양1번가 넘버원 페스티벌", dt.date(2025, 10, 17), dt.date(2025, 10, 18),
                 37.4016, 126.9228, "안양1번가 일원", "안양시 만안구 안양1번가",
                 "안양1번가 일원에서 열리는 주민화합 축제", "주민화합"),
    ):
        add_festival(festival)


seed_festivals()
