import random

import pytest

from daytrip.itinerary.models import CultureType, FoodType, PreferenceSpec
from daytrip.itinerary.selection import CandidatePool, SlotSource, desired_restaurant_count, fill_slots, select_places
from daytrip.places.models import Candidate, Category

A = Candidate(id="A", name="A", category=Category.RESTAURANT, rating=4.5, latitude=37.39, longitude=126.95)
B = Candidate(id="B", name="B", category=Category.RESTAURANT, rating=4.0, latitude=37.40, longitude=126.96)
C = Candidate(id="C", name="C", category=Category.CULTURE, rating=4.8, latitude=37.41, longitude=126.92)
D = Candidate(id="D", name="D", category=Category.CAFE, rating=4.2, latitude=37.38, longitude=126.93)


def _prefs(n=4, foods=(FoodType.KOREAN,), cultures=(CultureType.OTHER,)):
    return PreferenceSpec(num_places=n, foods=foods, cultures=cultures)


def _candidate(pid, category, rating=4.0):
    return Candidate(id=pid, name=pid, category=category, rating=rating)


def _no_fetch(query, desired):
    return []


class RecordingFetch:
    """Fake aggregator that answers by keyword and remembers what was asked."""

    def __init__(self, answers=None):
        self.answers = answers or {}
        self.calls = []

    def __call__(self, query, desired):
        self.calls.append((query.place_type, query.keyword, desired))
        return list(self.answers.get((query.place_type, query.keyword), []))


def _ids(result):
    return [c.id for c in result.candidates]


def test_mixed_pool_scenario():
    pool = CandidatePool(food=(A, B, D), culture=(C,))

    result = select_places(pool, _prefs(), _no_fetch, assist=None)

    assert _ids(result) == ["A", "B", "C", "D"]
    assert len(result) == 4
    assert not result.is_short


def test_unknown_assist_ids_fall_back_to_pool():
    pool = CandidatePool(food=(A, B, D), culture=(C,))

    result = select_places(pool, _prefs(), _no_fetch, assist=lambda prefs, cands, limit: ["nope-1", "nope-2"])

    assert sorted(_ids(result)) == ["A", "B", "C", "D"]
    assert result.assisted == 0


def test_assist_error_falls_back_to_pool():
    def broken(prefs, cands, limit):
        raise RuntimeError("model unavailable")

    pool = CandidatePool(food=(A, B, D), culture=(C,))

    result = select_places(pool, _prefs(), _no_fetch, assist=broken)

    assert _ids(result) == ["A", "B", "C", "D"]


def test_assist_picks_come_first_within_each_stage():
    seen = {}

    def assist(prefs, cands, limit):
        seen["ids"] = [c["id"] for c in cands]
        seen["limit"] = limit
        seen["foods"] = prefs["foods"]
        return ["C", "B"]

    pool = CandidatePool(food=(A, B, D), culture=(C,))

    result = select_places(pool, _prefs(), _no_fetch, assist=assist)

    assert _ids(result) == ["B", "A", "C", "D"]
    assert result.assisted == 2
    assert seen == {"ids": ["A", "B", "D", "C"], "limit": 4, "foods": ["한식"]}


def test_single_candidate_pool_is_short():
    result = select_places(CandidatePool(culture=(C,)), _prefs(), _no_fetch, assist=None)

    assert _ids(result) == ["C"]
    assert result.requested == 4
    assert result.is_short


def test_empty_pool_and_no_fallbacks():
    result = select_places(CandidatePool(), _prefs(n=2), _no_fetch, assist=None)

    assert _ids(result) == []
    assert result.is_short


@pytest.mark.parametrize("n, expected", [(1, 1), (2, 1), (3, 1), (4, 2), (6, 2), (10, 2)])
def test_restaurant_quota_by_size(n, expected):
    assert desired_restaurant_count(_prefs(n=n)) == expected


def test_cafe_only_food_has_no_restaurant_quota():
    assert desired_restaurant_count(_prefs(foods=(FoodType.CAFE,))) == 0


def test_composition_with_surplus_pool():
    food = tuple(_candidate(f"r{i}", Category.RESTAURANT, 4.0 + i / 10) for i in range(5))
    culture = tuple(_candidate(f"c{i}", Category.CULTURE) for i in range(5))

    four = select_places(CandidatePool(food=food, culture=culture), _prefs(n=4), _no_fetch, assist=None)
    three = select_places(CandidatePool(food=food, culture=culture), _prefs(n=3), _no_fetch, assist=None)

    assert sum(c.category is Category.RESTAURANT for c in four.candidates) == 2
    assert sum(c.category is Category.RESTAURANT for c in three.candidates) == 1
    assert len(four) == 4 and len(three) == 3


def test_cafe_only_preference_picks_no_restaurants_when_avoidable():
    food = (
        _candidate("r1", Category.RESTAURANT, 5.0),
        _candidate("cafe1", Category.CAFE),
        _candidate("cafe2", Category.CAFE),
    )
    culture = (_candidate("c1", Category.CULTURE), _candidate("c2", Category.MOVIE))

    result = select_places(
        CandidatePool(food=food, culture=culture),
        _prefs(foods=(FoodType.CAFE,)),
        _no_fetch,
        assist=None,
    )

    assert "r1" not in _ids(result)
    assert len(result) == 4


def test_restaurant_fallback_skips_primary_food():
    fetch = RecordingFetch({
        ("restaurant", "일식"): [
            _candidate("sushi", Category.RESTAURANT),
            _candidate("sushi-cafe", Category.CAFE),
            _candidate("ramen", Category.RESTAURANT),
        ],
    })
    culture = (_candidate("c1", Category.CULTURE), _candidate("c2", Category.ATTRACTION))

    result = select_places(CandidatePool(culture=culture), _prefs(), fetch, assist=None)

    assert _ids(result) == ["sushi", "ramen", "c1", "c2"]
    # Korean is the primary choice; Japanese is the first alternate and fills the quota
    assert fetch.calls == [("restaurant", "일식", 6)]


def test_restaurant_fallback_walks_alternates_in_order():
    fetch = RecordingFetch({("restaurant", "맛집"): [_candidate("any", Category.RESTAURANT)]})

    result = select_places(
        CandidatePool(culture=(C, D)),
        _prefs(foods=(FoodType.JAPANESE,)),
        fetch,
        assist=None,
    )

    keywords = [kw for place_type, kw, _ in fetch.calls if place_type == "restaurant"]
    assert keywords == ["한식", "중식", "양식", "맛집"]
    assert _ids(result)[0] == "any"


def test_broadened_culture_query_is_ranked():
    fetch = RecordingFetch({
        ("movie_theater", "영화관"): [
            _candidate("plain", Category.OTHER, 4.5),
            _candidate("cinema", Category.MOVIE, 4.2),
        ],
    })

    result = select_places(
        CandidatePool(food=(A, B)),
        _prefs(cultures=(CultureType.MOVIE,)),
        fetch,
        assist=None,
    )

    assert _ids(result) == ["A", "B", "cinema", "plain"]
    assert ("movie_theater", "영화관", 12) in fetch.calls


def test_non_restaurant_sweep_order_and_early_stop():
    fetch = RecordingFetch({
        ("movie_theater", "영화관"): [_candidate("m", Category.MOVIE)],
        ("art_gallery", "전시관"): [_candidate("g", Category.CULTURE)],
        ("museum", "전시관"): [_candidate("mu", Category.CULTURE)],
    })

    result = select_places(CandidatePool(food=(A, B)), _prefs(), fetch, assist=None)

    assert _ids(result) == ["A", "B", "m", "g"]
    assert [(t, kw) for t, kw, _ in fetch.calls] == [
        ("tourist_attraction", "문화시설"),
        ("movie_theater", "영화관"),
        ("art_gallery", "전시관"),
    ]


def test_sweep_skips_restaurants_and_taken_ids():
    fetch = RecordingFetch({
        ("movie_theater", "영화관"): [A, _candidate("m", Category.MOVIE)],
        ("cafe", "카페"): [D, _candidate("d2", Category.CAFE)],
    })

    result = select_places(CandidatePool(food=(A, B), culture=(D,)), _prefs(n=5), fetch, assist=None)

    assert _ids(result) == ["A", "B", "D", "m", "d2"]


def test_fetch_errors_do_not_stop_the_chain():
    def flaky(query, desired):
        if query.place_type == "movie_theater":
            raise RuntimeError("quota exceeded")
        if query.place_type == "cafe":
            return [_candidate("cafe", Category.CAFE)]
        return []

    result = select_places(CandidatePool(food=(A, B), culture=(C,)), _prefs(), flaky, assist=None)

    assert _ids(result) == ["A", "B", "C", "cafe"]


def test_festival_primary_uses_event_pool():
    festival = _candidate("festival-2", Category.FESTIVAL, 5.0)
    pool = CandidatePool(food=(A, B), events=(festival,))

    result = select_places(pool, _prefs(n=3, cultures=(CultureType.FESTIVAL,)), _no_fetch, assist=None)

    assert _ids(result) == ["A", "festival-2", "B"]


def test_events_only_backfill_for_other_cultures():
    festival = _candidate("festival-2", Category.FESTIVAL, 5.0)
    pool = CandidatePool(food=(A, B), culture=(C,), events=(festival,))

    result = select_places(pool, _prefs(n=3), _no_fetch, assist=None)

    assert _ids(result) == ["A", "C", "festival-2"]


def test_backfill_prefers_non_restaurants_then_restaurants():
    food = (A, B, _candidate("r3", Category.RESTAURANT, 3.0), D)

    result = select_places(CandidatePool(food=food), _prefs(n=4), _no_fetch, assist=None)

    assert _ids(result) == ["A", "B", "D", "r3"]


def test_shared_ids_across_pools_are_not_duplicated():
    pool = CandidatePool(food=(A, B, C), culture=(C, D), events=(D,))

    result = select_places(pool, _prefs(n=4), _no_fetch, assist=None)

    assert sorted(_ids(result)) == ["A", "B", "C", "D"]


@pytest.mark.parametrize("seed", range(20))
def test_large_enough_pool_always_yields_exactly_n_unique(seed):
    rng = random.Random(seed)
    categories = list(Category)
    size = rng.randint(1, 15)
    pool_items = [_candidate(f"p{i}", rng.choice(categories), round(rng.uniform(0, 5), 1)) for i in range(size)]
    split = rng.randint(0, size)
    pool = CandidatePool(food=tuple(pool_items[:split]), culture=tuple(pool_items[split:]))
    n = rng.randint(1, size)
    food = rng.choice(list(FoodType))

    result = select_places(pool, _prefs(n=n, foods=(food,)), _no_fetch, assist=None)

    ids = _ids(result)
    assert len(ids) == n
    assert len(set(ids)) == n


def test_fill_slots_stops_consulting_sources_once_full():
    consulted = []

    def source(label, items):
        def produce():
            consulted.append(label)
            return items
        return SlotSource(label, produce)

    picked = fill_slots(
        [source("first", [A, C]), source("second", [B])],
        quota=2,
        accept=lambda c: True,
    )

    assert [c.id for c in picked] == ["A", "C"]
    assert consulted == ["first"]
