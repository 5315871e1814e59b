from __future__ import annotations

from collections import Counter
from typing import Any


def _top(counter: Counter[str], limit: int = 10) -> list[dict[str, Any]]:
    return [{"name": n, "count": c} for n, c in counter.most_common(limit)]


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    runs = [e for e in events if e.get("type") == "itinerary"]
    total = len(runs)

    # Average response time
    times = [r["response_time_ms"] for r in runs if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Requests that came back with fewer places than asked for
    short_results = sum(1 for r in runs if r.get("returned", 0) < r.get("requested", 0))

    food_counter: Counter[str] = Counter()
    culture_counter: Counter[str] = Counter()
    station_counter: Counter[str] = Counter()
    for r in runs:
        for f in r.get("foods", []) or []:
            food_counter[f] += 1
        for c in r.get("cultures", []) or []:
            culture_counter[c] += 1
        station_counter[r.get("station") or "default"] += 1

    assisted = sum(1 for r in runs if r.get("assist_picks", 0) > 0)

    return {
        "total_itineraries": total,
        "avg_response_time_ms": avg_time,
        "short_results": short_results,
        "assist_usage_rate": round(assisted / total * 100, 1) if total else 0.0,
        "top_foods": _top(food_counter),
        "top_cultures": _top(culture_counter),
        "top_stations": _top(station_counter),
    }
