from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .itinerary.models import ItineraryRequest, ItineraryResponse
from .itinerary.service import create_itinerary
from .places.client import fetch_place_details
from .places.models import Candidate, PlaceDetails
from .places.parking import MAX_PARKING_RESULTS, search_parking
from .stations.store import Station, list_stations, resolve_station

app = FastAPI(title="Day Trip Planner API", version="1.0.0")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/stations", response_model=list[Station])
def stations() -> list[Station]:
    return list_stations()


@app.get("/stations/{name}", response_model=Station)
def station(name: str) -> Station:
    found = resolve_station(name)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Station not found: {name}")
    return found


# ── Itinerary endpoints ──────────────────────────────────────────────────


@app.post("/itineraries", response_model=ItineraryResponse)
def itineraries(body: ItineraryRequest) -> ItineraryResponse:
    return create_itinerary(body)


# ── Place endpoints ──────────────────────────────────────────────────────


@app.get("/places/parking", response_model=list[Candidate])
def parking(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lon: float = Query(..., ge=-180.0, le=180.0),
    radius: int = Query(1000, ge=1, le=50000),
    max_results: int = Query(10, ge=1, le=MAX_PARKING_RESULTS),
) -> list[Candidate]:
    return search_parking(lat, lon, radius_m=radius, max_results=max_results)


@app.get("/places/{place_id}", response_model=PlaceDetails)
def place_details(place_id: str, max_photos: int = Query(5, ge=0, le=10)) -> PlaceDetails:
    return fetch_place_details(place_id, max_photos=max_photos)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())
