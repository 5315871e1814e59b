from __future__ import annotations

import datetime as dt
import logging
import re

from .models import CultureType, FoodType, ItineraryRequest, PeopleCount, PreferenceSpec, TransportType

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def _resolve_many(tokens: list[str], single: str | None, enum_cls, fallback):
    """Resolve multi-select tokens (or the legacy single value); unknowns become ``fallback``."""
    raw = [t for t in tokens if t and t.strip()] or ([single] if single and single.strip() else [])
    resolved = []
    for token in raw:
        member = enum_cls.lookup(token)
        if member is None:
            logger.warning("Unknown %s preference %r, treating as %s", enum_cls.__name__, token, fallback.name)
            member = fallback
        if member not in resolved:
            resolved.append(member)
    return tuple(resolved)


def parse_visit_date(value: str | None) -> dt.date:
    if not value:
        return dt.date.today()
    try:
        return dt.date.fromisoformat(value.strip())
    except ValueError:
        logger.warning("Invalid date format: %s, using today", value)
        return dt.date.today()


def normalize_preferences(request: ItineraryRequest) -> PreferenceSpec:
    foods = _resolve_many(request.foods, request.food, FoodType, FoodType.OTHER)
    cultures = _resolve_many(request.cultures, request.culture, CultureType, CultureType.OTHER)

    transport_token = _WHITESPACE_RE.sub("", request.transport) if request.transport else None
    transport = TransportType.lookup(transport_token) or TransportType.OTHER

    station = request.selected_station.strip() if request.selected_station else None

    return PreferenceSpec(
        num_places=request.num_places,
        foods=foods or (FoodType.OTHER,),
        cultures=cultures or (CultureType.OTHER,),
        transport=transport,
        date=parse_visit_date(request.date),
        people_count=PeopleCount.lookup(request.people_count),
        station=station or None,
    )
