"""
Composition-constrained selection.

Restaurant and non-restaurant slots are each filled by folding an ordered list
of candidate sources: the ranking-model picks first, then the pooled search
results, then fresh fallback searches. A source is only consulted while its
stage still has open slots, so fallback searches cost nothing once the quota
is met. Whatever is still missing afterwards is backfilled from the combined
pool by score.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import reduce
from typing import Any

from ..llm.groq_client import rank_places
from ..places.models import Candidate, PlaceQuery
from .models import CultureType, FoodType, PreferenceSpec, SelectionResult
from .scoring import rank

logger = logging.getLogger(__name__)

Fetch = Callable[[PlaceQuery, int], list[Candidate]]
Assist = Callable[[dict[str, Any], list[dict[str, Any]], int], list[str]]
Accept = Callable[[Candidate], bool]

FALLBACK_FOODS: tuple[FoodType, ...] = (
    FoodType.KOREAN,
    FoodType.JAPANESE,
    FoodType.CHINESE,
    FoodType.WESTERN,
    FoodType.OTHER,
)


@dataclass(frozen=True)
class CandidatePool:
    """Candidates gathered per preference dimension."""

    food: tuple[Candidate, ...] = ()
    culture: tuple[Candidate, ...] = ()
    events: tuple[Candidate, ...] = ()

    def combined(self) -> list[Candidate]:
        seen: set[str] = set()
        merged: list[Candidate] = []
        for candidate in (*self.food, *self.culture, *self.events):
            if candidate.id not in seen:
                seen.add(candidate.id)
                merged.append(candidate)
        return merged


@dataclass(frozen=True)
class SlotSource:
    label: str
    produce: Callable[[], Iterable[Candidate]]


def _is_restaurant(candidate: Candidate) -> bool:
    return candidate.is_restaurant


def _is_not_restaurant(candidate: Candidate) -> bool:
    return not candidate.is_restaurant


def fill_slots(
    sources: Sequence[SlotSource],
    quota: int,
    accept: Accept,
    taken_ids: frozenset[str] = frozenset(),
) -> tuple[Candidate, ...]:
    """Fold ``sources`` into at most ``quota`` accepted candidates with unique ids."""

    def step(picked: tuple[Candidate, ...], source: SlotSource) -> tuple[Candidate, ...]:
        if len(picked) >= quota:
            return picked
        try:
            offered = list(source.produce())
        except Exception:
            logger.warning("Candidate source %s failed, skipping", source.label, exc_info=True)
            return picked

        blocked = set(taken_ids) | {c.id for c in picked}
        additions: list[Candidate] = []
        for candidate in offered:
            if len(picked) + len(additions) >= quota:
                break
            if candidate.id in blocked or not accept(candidate):
                continue
            blocked.add(candidate.id)
            additions.append(candidate)

        if additions:
            logger.info("Filled %d slot(s) from %s", len(additions), source.label)
        return picked + tuple(additions)

    return reduce(step, sources, ())[:quota]


def desired_restaurant_count(prefs: PreferenceSpec) -> int:
    if not prefs.is_restaurant_class:
        return 0
    return 2 if prefs.num_places >= 4 else 1


def _assist_preferences(prefs: PreferenceSpec) -> dict[str, Any]:
    return {
        "people_count": prefs.people_count.display_name if prefs.people_count else None,
        "transport": prefs.transport.display_name,
        "foods": [prefs.ranking_food.display_name],
        "cultures": [c.display_name for c in prefs.cultures],
        "date": prefs.date.isoformat(),
    }


def _assist_picks(
    candidates: list[Candidate],
    prefs: PreferenceSpec,
    assist: Assist | None,
) -> list[Candidate]:
    """Candidates proposed by the ranking model, in its order; unknown ids are dropped."""
    if assist is None or not candidates:
        return []
    payload = [
        {
            "id": c.id,
            "name": c.name,
            "category": c.category.value,
            "rating": c.rating,
            "address": c.address,
        }
        for c in candidates
    ]
    try:
        ranked_ids = assist(_assist_preferences(prefs), payload, prefs.num_places)
    except Exception:
        logger.warning("Ranking assist failed, using pool order", exc_info=True)
        return []

    by_id = {c.id: c for c in candidates}
    picks = [by_id[rid] for rid in ranked_ids if rid in by_id]
    if len(picks) < len(ranked_ids):
        logger.warning("Ranking assist returned %d unknown id(s)", len(ranked_ids) - len(picks))
    return picks


def _fetch_all(fetch: Fetch, queries: Iterable[PlaceQuery], desired: int) -> list[Candidate]:
    merged: list[Candidate] = []
    seen: set[str] = set()
    for query in queries:
        for candidate in fetch(query, desired):
            if candidate.id not in seen:
                seen.add(candidate.id)
                merged.append(candidate)
    return merged


def restaurant_sources(
    assisted: list[Candidate],
    pool: CandidatePool,
    prefs: PreferenceSpec,
    fetch: Fetch,
) -> list[SlotSource]:
    n = prefs.num_places
    sources = [
        SlotSource("assist", lambda: assisted),
        SlotSource("food pool", lambda: pool.food),
    ]
    for food in FALLBACK_FOODS:
        if food is prefs.primary_food:
            continue
        sources.append(SlotSource(f"fallback food {food.value}", lambda food=food: fetch(food.query, max(n, 6))))
    return sources


# Non-restaurant sweep once the preferred culture is exhausted
_NON_RESTAURANT_SWEEP: tuple[tuple[PlaceQuery, bool], ...] = (
    (PlaceQuery("movie_theater", "영화관"), False),
    (PlaceQuery("art_gallery", "전시관"), False),
    (PlaceQuery("museum", "전시관"), False),
    (PlaceQuery("tourist_attraction", "체험"), True),
    (PlaceQuery("cafe", "카페"), True),
)


def non_restaurant_sources(
    assisted: list[Candidate],
    pool: CandidatePool,
    prefs: PreferenceSpec,
    fetch: Fetch,
) -> list[SlotSource]:
    n = prefs.num_places
    food, culture = prefs.ranking_food, prefs.primary_culture

    preferred = list(pool.culture)
    if culture is CultureType.FESTIVAL:
        preferred += pool.events

    sources = [
        SlotSource("assist", lambda: assisted),
        SlotSource("culture pool", lambda: preferred),
        SlotSource(
            f"broadened {culture.value}",
            lambda: rank(_fetch_all(fetch, culture.queries, max(n * 3, 10)), food, culture),
        ),
    ]
    for query, widen in _NON_RESTAURANT_SWEEP:
        desired = max(n, 6) if widen else n
        sources.append(
            SlotSource(f"fallback {query.place_type}", lambda query=query, desired=desired: fetch(query, desired))
        )
    return sources


def select_places(
    pool: CandidatePool,
    prefs: PreferenceSpec,
    fetch: Fetch,
    assist: Assist | None = rank_places,
) -> SelectionResult:
    """
    Pick ``prefs.num_places`` candidates honouring the restaurant composition rule.

    The result is short only when the pool and every fallback search together
    hold fewer distinct places than requested.
    """
    n = prefs.num_places
    desired_restaurants = desired_restaurant_count(prefs)
    desired_others = n - desired_restaurants

    combined = pool.combined()
    assisted = _assist_picks(combined, prefs, assist)

    restaurants = fill_slots(
        restaurant_sources(assisted, pool, prefs, fetch),
        desired_restaurants,
        _is_restaurant,
    )
    others = fill_slots(
        non_restaurant_sources(assisted, pool, prefs, fetch),
        desired_others,
        _is_not_restaurant,
        taken_ids=frozenset(c.id for c in restaurants),
    )
    chosen = restaurants + others

    if len(chosen) < n:
        taken = frozenset(c.id for c in chosen)
        food, culture = prefs.ranking_food, prefs.primary_culture
        backfill = [
            SlotSource("backfill non-restaurants", lambda: rank(combined, food, culture)),
        ]
        chosen += fill_slots(backfill, n - len(chosen), _is_not_restaurant, taken)
        taken = frozenset(c.id for c in chosen)
        backfill = [
            SlotSource("backfill restaurants", lambda: rank(combined, food, culture)),
        ]
        chosen += fill_slots(backfill, n - len(chosen), _is_restaurant, taken)

    chosen = chosen[:n]
    assisted_ids = {c.id for c in assisted}
    result = SelectionResult(
        candidates=chosen,
        requested=n,
        assisted=sum(1 for c in chosen if c.id in assisted_ids),
    )
    logger.info(
        "Enforced composition -> restaurants: %d, nonRestaurants: %d (N=%d)",
        sum(1 for c in chosen if c.is_restaurant),
        sum(1 for c in chosen if not c.is_restaurant),
        n,
    )
    if result.is_short:
        logger.warning("Only %d of %d places available after all fallbacks", len(chosen), n)
    return result
