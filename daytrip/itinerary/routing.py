from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from ..places.models import Candidate
from .geo import distance_km
from .models import RouteStep

logger = logging.getLogger(__name__)


def order_nearest_neighbor(candidates: Sequence[Candidate], rng: random.Random | None = None) -> list[Candidate]:
    """
    Greedy tour: start at a random candidate, then always hop to the closest
    unvisited one. Ties keep the earlier candidate in input order.
    """
    remaining = [c for c in candidates if c.has_coordinates]
    if len(remaining) <= 1:
        return remaining

    rng = rng or random.Random()
    current = remaining.pop(rng.randrange(len(remaining)))
    ordered = [current]
    while remaining:
        index = min(
            range(len(remaining)),
            key=lambda i: distance_km(current.latitude, current.longitude, remaining[i].latitude, remaining[i].longitude),
        )
        nearest = remaining.pop(index)
        ordered.append(nearest)
        current = nearest
    return ordered


def sequence(candidates: Sequence[Candidate], rng: random.Random | None = None) -> list[RouteStep]:
    """Turn a selection into numbered route stops; places without coordinates are left out."""
    skipped = sum(1 for c in candidates if not c.has_coordinates)
    if skipped:
        logger.warning("Leaving %d place(s) without coordinates out of the route", skipped)

    route = [
        RouteStep(order_index=i, name=c.name, latitude=c.latitude, longitude=c.longitude)
        for i, c in enumerate(order_nearest_neighbor(candidates, rng), start=1)
    ]
    logger.info("Optimized route order: %d places", len(route))
    return route
