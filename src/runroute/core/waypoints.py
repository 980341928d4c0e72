"""
Intermediate waypoints for round-trip route shapes.

Uses the flat approximation 1 km ~= 0.009 degrees in both latitude and
longitude. That is only reasonable at the scale of a single run and gets
worse away from the equator (longitude degrees shrink with cos(lat)); the
routing service snaps the points to real paths anyway.
"""
from __future__ import annotations

import math
import random
from typing import Callable, Dict, List, Optional

from runroute.config import settings
from runroute.core.models import Coordinate, WaypointStrategy

DEG_PER_KM = 0.009


def _offset(center: Coordinate, angle: float, radius_deg: float) -> Coordinate:
    # Raises ValueError when the offset leaves the valid coordinate range
    return Coordinate(
        latitude=center.latitude + math.sin(angle) * radius_deg,
        longitude=center.longitude + math.cos(angle) * radius_deg,
    )


def loop_radius_deg(distance_km: float) -> float:
    """Radius (degrees) of the circle whose circumference is ``distance_km``."""
    return distance_km / (2 * math.pi) * DEG_PER_KM


class WaypointGenerator:
    """
    Generates intermediate points only; the caller supplies origin and
    destination. Pass a seeded ``random.Random`` for repeatable output.
    """

    LOOP_POINTS = 4

    def __init__(self, rng: Optional[random.Random] = None, max_points: Optional[int] = None):
        self.rng = rng or random.Random()
        self.max_points = max_points or settings.max_intermediates

    @staticmethod
    def _check_distance(distance_km: float) -> None:
        if not distance_km > 0:
            raise ValueError(f"Target distance must be positive, got {distance_km}")

    def loop(self, center: Coordinate, distance_km: float) -> List[Coordinate]:
        """Four points on a circle of circumference ``distance_km``, counter-clockwise from east."""
        self._check_distance(distance_km)
        r = loop_radius_deg(distance_km)
        return [
            _offset(center, (i / self.LOOP_POINTS) * 2 * math.pi, r)
            for i in range(self.LOOP_POINTS)
        ]

    def out_and_back(self, center: Coordinate, distance_km: float) -> List[Coordinate]:
        """A single turnaround point half the distance away in a random direction."""
        self._check_distance(distance_km)
        angle = self.rng.random() * 2 * math.pi
        return [_offset(center, angle, (distance_km / 2) * DEG_PER_KM)]

    def random_points(self, center: Coordinate, distance_km: float) -> List[Coordinate]:
        """Roughly one point per km, each within ~1 km of the center, at most ``max_points``."""
        self._check_distance(distance_km)
        n = min(max(2, math.floor(distance_km / 1)), self.max_points)
        out: List[Coordinate] = []
        for _ in range(n):
            angle = self.rng.random() * 2 * math.pi
            radius = self.rng.random() * DEG_PER_KM
            out.append(_offset(center, angle, radius))
        return out

    def generate(
        self, strategy: WaypointStrategy, center: Coordinate, distance_km: float
    ) -> List[Coordinate]:
        table: Dict[WaypointStrategy, Callable[[Coordinate, float], List[Coordinate]]] = {
            WaypointStrategy.LOOP: self.loop,
            WaypointStrategy.OUT_AND_BACK: self.out_and_back,
            WaypointStrategy.RANDOM: self.random_points,
        }
        return table[WaypointStrategy(strategy)](center, distance_km)
