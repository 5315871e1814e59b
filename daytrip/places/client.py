"""
Google Places API boundary.

Every function here returns plain values and never raises: transport errors,
non-OK statuses and malformed payloads are logged and turned into empty
results so the itinerary engine can keep going.
"""
from __future__ import annotations

import logging
from typing import Any

import requests

from .config import DEFAULT_PLACES_CONFIG, PlacesConfig
from .models import PlaceDetails, RawPlace

logger = logging.getLogger(__name__)

DETAILS_FIELDS = (
    "displayName",
    "types",
    "primaryType",
    "rating",
    "userRatingCount",
    "formattedAddress",
    "currentOpeningHours",
    "internationalPhoneNumber",
    "location",
    "editorialSummary",
    "parkingOptions",
    "photos",
)


def _safe_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_nearby_row(row: dict[str, Any]) -> RawPlace | None:
    place_id = row.get("place_id")
    if not place_id:
        return None
    location = (row.get("geometry") or {}).get("location") or {}
    return RawPlace(
        id=str(place_id),
        name=str(row.get("name") or ""),
        types=tuple(row.get("types") or ()),
        address=row.get("vicinity") or row.get("formatted_address"),
        rating=_safe_float(row.get("rating")),
        review_count=_safe_int(row.get("user_ratings_total")),
        latitude=_safe_float(location.get("lat")),
        longitude=_safe_float(location.get("lng")),
    )


def search_nearby(
    latitude: float,
    longitude: float,
    radius_m: int,
    place_type: str,
    keyword: str = "",
    language: str | None = None,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> list[RawPlace]:
    """
    Run a Nearby Search around a coordinate.

    Returns an empty list when the key is missing, the call fails, or the
    provider answers with anything other than ``OK``.
    """
    if not config.api_key:
        return []

    params = {
        "location": f"{latitude},{longitude}",
        "radius": radius_m,
        "type": place_type,
        "language": language or config.language,
        "key": config.api_key,
    }
    if keyword:
        params["keyword"] = keyword

    try:
        response = requests.get(config.nearby_url, params=params, timeout=config.timeout)
        response.raise_for_status()
        body = response.json()
    except Exception:
        logger.warning(
            "Places nearby search failed (type=%s, keyword=%s, radius=%sm)",
            place_type, keyword, radius_m, exc_info=True,
        )
        return []

    status = body.get("status") if isinstance(body, dict) else None
    if status == "ZERO_RESULTS":
        return []
    if status != "OK":
        logger.warning("Places nearby search returned status %s (type=%s)", status, place_type)
        return []

    places: list[RawPlace] = []
    for row in body.get("results") or []:
        try:
            place = _parse_nearby_row(row)
        except (AttributeError, TypeError) as exc:
            logger.warning("Skipping malformed place row: %s", exc)
            continue
        if place is not None:
            places.append(place)
    return places


def _parse_details(place_id: str, body: dict[str, Any], max_photos: int, config: PlacesConfig) -> PlaceDetails:
    display_name = body.get("displayName") or {}
    types = body.get("types") or []
    location = body.get("location") or {}
    opening = body.get("currentOpeningHours") or {}
    summary = body.get("editorialSummary") or {}
    parking = body.get("parkingOptions") or {}

    # photos[].name looks like places/<id>/photos/<ref>
    media_base = config.details_url.rsplit("/places", 1)[0]
    photo_urls = [
        f"{media_base}/{photo['name']}:media?key={config.api_key}&maxHeightPx=800"
        for photo in (body.get("photos") or [])[:max_photos]
        if photo.get("name")
    ]

    return PlaceDetails(
        place_id=place_id,
        name=display_name.get("text"),
        category=body.get("primaryType") or (types[0] if types else None),
        address=body.get("formattedAddress"),
        latitude=_safe_float(location.get("latitude")),
        longitude=_safe_float(location.get("longitude")),
        rating=_safe_float(body.get("rating")),
        user_rating_count=_safe_int(body.get("userRatingCount")),
        overview=summary.get("overview"),
        open_now=opening.get("openNow"),
        opening_hours=list(opening.get("weekdayDescriptions") or []),
        phone=body.get("internationalPhoneNumber"),
        parking_options=[name for name, flag in parking.items() if flag is True],
        photo_urls=photo_urls,
    )


def fetch_place_details(
    place_id: str,
    max_photos: int = 5,
    config: PlacesConfig = DEFAULT_PLACES_CONFIG,
) -> PlaceDetails:
    """Look up a place through the v1 details endpoint; minimal record on failure."""
    if not config.api_key:
        logger.warning("Google Places API key not configured, returning minimal details")
        return PlaceDetails(place_id=place_id)

    headers = {
        "X-Goog-Api-Key": config.api_key,
        "X-Goog-FieldMask": ",".join(DETAILS_FIELDS),
    }
    try:
        response = requests.get(
            f"{config.details_url}/{place_id}",
            params={"languageCode": config.language},
            headers=headers,
            timeout=config.timeout,
        )
        response.raise_for_status()
        body = response.json()
        if not body:
            return PlaceDetails(place_id=place_id)
        return _parse_details(place_id, body, max_photos, config)
    except Exception:
        logger.warning("Place details lookup failed for %s", place_id, exc_info=True)
        return PlaceDetails(place_id=place_id)
