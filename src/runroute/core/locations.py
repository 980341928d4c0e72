from __future__ import annotations

from typing import Iterable, List, Tuple, TypeVar

from runroute.core.geodesy import distance
from runroute.core.models import Coordinate

T = TypeVar("T")


def nearby_locations(
    locations: Iterable[T],
    origin: Coordinate,
    max_distance_km: float = 10.0,
    position=lambda loc: Coordinate(latitude=loc["latitude"], longitude=loc["longitude"]),
) -> List[Tuple[T, float]]:
    """
    Locations within ``max_distance_km`` of ``origin``, nearest first.

    ``position`` maps a location record to its Coordinate (records are
    plain dicts with ``latitude``/``longitude`` keys by default).
    """
    scored: List[Tuple[T, float]] = []
    for loc in locations:
        d = distance(origin, position(loc))
        if d <= max_distance_km:
            scored.append((loc, d))
    scored.sort(key=lambda pair: pair[1])
    return scored

