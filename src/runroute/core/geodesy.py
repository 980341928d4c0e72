"""Great-circle distance helpers for coordinates and paths."""
from __future__ import annotations

from math import atan2, cos, pi, sin, sqrt
from typing import Sequence

from runroute.core.models import Coordinate

EARTH_RADIUS_KM = 6371.0


def deg2rad(deg: float) -> float:
    return deg * (pi / 180)


def distance(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance in kilometres between two coordinates."""
    dlat = deg2rad(b.latitude - a.latitude)
    dlon = deg2rad(b.longitude - a.longitude)
    h = (
        sin(dlat / 2) ** 2
        + cos(deg2rad(a.latitude)) * cos(deg2rad(b.latitude)) * sin(dlon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(h), sqrt(1 - h))


def path_length(path: Sequence[Coordinate]) -> float:
    """Sum of segment distances in travel order; 0 for fewer than two points."""
    if len(path) < 2:
        return 0.0
    return sum(distance(path[i], path[i + 1]) for i in range(len(path) - 1))
