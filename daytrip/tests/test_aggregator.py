from unittest.mock import patch

from daytrip.places.aggregator import aggregate, aggregate_near, placeholder_candidates
from daytrip.places.config import PlacesConfig
from daytrip.places.models import Anchor, Category, PlaceQuery, RawPlace

CONFIG = PlacesConfig(api_key="test-key")
NO_KEY_CONFIG = PlacesConfig(api_key="")

CITY = Anchor("default", 37.3942, 126.9569, 10000, is_default=True)
STATION = Anchor("범계", 37.3897, 126.9507, 1000)
KOREAN = PlaceQuery("restaurant", "한식")


def _raw(pid, rating=4.5, reviews=100, address="경기도 안양시 동안구", types=("restaurant",)):
    return RawPlace(
        id=pid,
        name=f"Place {pid}",
        types=types,
        address=address,
        rating=rating,
        review_count=reviews,
        latitude=37.39,
        longitude=126.95,
    )


def test_placeholders_without_api_key():
    result = aggregate(CITY, KOREAN, 4, config=NO_KEY_CONFIG)

    assert [c.id for c in result] == ["placeholder-cafe-1", "placeholder-restaurant-1"]


def test_placeholder_selection_by_type():
    assert [c.id for c in placeholder_candidates(PlaceQuery("movie_theater", "영화관"))] == ["placeholder-movie-1"]
    assert [c.id for c in placeholder_candidates(PlaceQuery("museum", "전시관"))] == ["placeholder-attraction-1"]
    assert placeholder_candidates(PlaceQuery("parking", "")) == []


@patch("daytrip.places.aggregator.search_nearby")
def test_tiers_relax_radius_and_quality(mock_search):
    response = [
        _raw("strong", rating=4.5, reviews=30),
        _raw("middling", rating=3.9, reviews=15),
        _raw("weak", rating=3.6, reviews=2),
        _raw("poor", rating=3.0, reviews=500),
    ]
    mock_search.return_value = response

    result = aggregate(CITY, KOREAN, 4, config=CONFIG)

    assert [c.id for c in result] == ["strong", "middling", "weak"]
    radii = [call.args[2] for call in mock_search.call_args_list]
    assert radii == [10000, 13000, 16000]


@patch("daytrip.places.aggregator.search_nearby")
def test_same_response_across_tiers_is_deduplicated(mock_search):
    mock_search.return_value = [_raw("a"), _raw("b"), _raw("a")]

    result = aggregate(CITY, KOREAN, 4, config=CONFIG)

    ids = [c.id for c in result]
    assert ids == ["a", "b"]
    assert len(ids) == len(set(ids))


@patch("daytrip.places.aggregator.search_nearby")
def test_stops_once_target_reached(mock_search):
    mock_search.return_value = [_raw(f"p{i}") for i in range(12)]

    result = aggregate(CITY, KOREAN, 4, config=CONFIG)

    assert len(result) == 12
    assert mock_search.call_count == 1


@patch("daytrip.places.aggregator.search_nearby")
def test_truncates_to_target_max(mock_search):
    mock_search.return_value = [_raw(f"p{i}") for i in range(40)]

    result = aggregate(CITY, KOREAN, 5, config=CONFIG)

    # max(12, 5 * 3)
    assert len(result) == 15
    assert [c.id for c in result] == [f"p{i}" for i in range(15)]


@patch("daytrip.places.aggregator.search_nearby")
def test_locality_filter_only_on_default_anchor(mock_search):
    mock_search.return_value = [
        _raw("local", address="경기도 안양시 만안구"),
        _raw("outside", address="서울특별시 관악구"),
        _raw("no-address", address=None),
    ]

    city = aggregate(CITY, KOREAN, 4, config=CONFIG)
    station = aggregate(STATION, KOREAN, 4, config=CONFIG)

    assert [c.id for c in city] == ["local"]
    assert [c.id for c in station] == ["local", "outside", "no-address"]


@patch("daytrip.places.aggregator.search_nearby")
def test_missing_rating_and_reviews_count_as_zero(mock_search):
    mock_search.return_value = [_raw("unrated", rating=None, reviews=None)]

    assert aggregate(CITY, KOREAN, 4, config=CONFIG) == []


@patch("daytrip.places.aggregator.search_nearby")
def test_provider_error_yields_empty_tier(mock_search):
    mock_search.side_effect = [RuntimeError("boom"), [_raw("late", rating=3.9, reviews=12)], []]

    result = aggregate(CITY, KOREAN, 4, config=CONFIG)

    assert [c.id for c in result] == ["late"]
    assert mock_search.call_count == 3


@patch("daytrip.places.aggregator.search_nearby")
def test_candidates_are_classified(mock_search):
    mock_search.return_value = [
        _raw("both", types=("cafe", "restaurant")),
        _raw("cinema", types=("movie_theater",)),
    ]

    result = aggregate(STATION, PlaceQuery("movie_theater", "영화관"), 4, config=CONFIG)

    assert [c.category for c in result] == [Category.RESTAURANT, Category.MOVIE]


@patch("daytrip.places.aggregator.search_nearby")
def test_aggregate_near_single_call_capped(mock_search):
    mock_search.return_value = [
        _raw("a", address="서울특별시"),
        _raw("b"),
        _raw("c", rating=3.9),
        _raw("d"),
        _raw("e"),
    ]

    result = aggregate_near(37.3897, 126.9507, 1000, KOREAN, 3, config=CONFIG)

    assert [c.id for c in result] == ["a", "b", "d"]
    assert mock_search.call_count == 1
    assert mock_search.call_args.args[:3] == (37.3897, 126.9507, 1000)


def test_aggregate_near_placeholders_capped():
    result = aggregate_near(37.3897, 126.9507, 1000, KOREAN, 1, config=NO_KEY_CONFIG)

    assert [c.id for c in result] == ["placeholder-cafe-1"]


@patch("daytrip.places.aggregator.search_nearby")
def test_places_without_coordinates_are_dropped(mock_search):
    unplaced = RawPlace(id="unplaced", name="No Pin", types=("restaurant",), address="경기도 안양시", rating=4.8, review_count=300)
    mock_search.return_value = [unplaced, _raw("pinned")]

    city = aggregate(CITY, KOREAN, 4, config=CONFIG)
    near = aggregate_near(37.3897, 126.9507, 1000, KOREAN, 4, config=CONFIG)

    assert [c.id for c in city] == ["pinned"]
    assert [c.id for c in near] == ["pinned"]
    assert all(c.has_coordinates for c in city + near)
