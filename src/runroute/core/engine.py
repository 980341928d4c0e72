"""Route suggestions: several candidate round trips near a desired distance."""
from __future__ import annotations

import logging
import math
import random
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from runroute.core.geodesy import path_length
from runroute.core.models import (
    Coordinate,
    GenerationRequest,
    RouteCandidate,
    RouteResult,
    RouteSource,
    TravelMode,
    WaypointStrategy,
)
from runroute.core.routing import RoutingServiceClient
from runroute.core.waypoints import WaypointGenerator

log = logging.getLogger(__name__)

# Submission order is also output order
STRATEGIES = [WaypointStrategy.LOOP, WaypointStrategy.OUT_AND_BACK, WaypointStrategy.RANDOM]

# Local last-resort routes: (label, jitter sign)
FALLBACK_ROUTES = [("Park Loop", -1), ("Neighborhood Route", 0), ("Scenic Path", 1)]
FALLBACK_JITTER_KM = 0.3
FALLBACK_DEG_PER_KM = 0.01
FALLBACK_SPACING_KM = 0.5
FALLBACK_MAX_VERTICES = 64


class NoRoutesAvailable(RuntimeError):
    """Not even a local approximation could be produced."""


def _new_id() -> str:
    return f"route-{uuid.uuid4().hex[:12]}"


def describe(distance_km: float, label: str) -> str:
    return f"A {distance_km:.1f}km {label} starting from your location"


def strategy_target_km(desired_km: float, tolerance_km: float, variation: int) -> float:
    """Spread candidates across the tolerance band in R/2 steps (variation 0, 1, 2)."""
    return desired_km + (variation - 1) * (tolerance_km / 2)


class RouteSuggestionEngine:
    def __init__(
        self,
        client: RoutingServiceClient,
        rng: Optional[random.Random] = None,
        travel_mode: TravelMode = TravelMode.WALK,
    ):
        self.client = client
        self.rng = rng or random.Random()
        self.travel_mode = travel_mode

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def suggest(self, request: GenerationRequest) -> List[RouteCandidate]:
        """
        Up to three candidates in strategy order ``[loop, out_and_back, random]``.

        Raises NoRoutesAvailable when there is no origin or nothing at all
        could be generated.
        """
        if request.origin is None:
            raise NoRoutesAvailable("Location not available")

        # Child generators are seeded up front so output does not depend on thread timing
        jobs = []
        for variation, strategy in enumerate(STRATEGIES):
            target = strategy_target_km(request.desired_distance_km, request.tolerance_km, variation)
            gen = WaypointGenerator(random.Random(self.rng.getrandbits(64)))
            jobs.append((strategy, target, gen))

        with ThreadPoolExecutor(max_workers=len(jobs), thread_name_prefix="suggest") as pool:
            futures = [
                pool.submit(self._build_candidate, request.origin, strategy, target, gen)
                for strategy, target, gen in jobs
            ]
            results = [f.result() for f in futures]

        candidates = [c for c in results if c is not None]
        if candidates:
            return candidates

        log.warning("All %d route strategies failed - generating local fallback routes", len(STRATEGIES))
        fallback = self.fallback_routes(request.origin, request.desired_distance_km)
        if not fallback:
            raise NoRoutesAvailable("Could not generate any valid routes")
        return fallback

    def fallback_routes(self, origin: Coordinate, desired_km: float) -> List[RouteCandidate]:
        """Closed polygons around ``origin`` with a little random jitter on the target."""
        out: List[RouteCandidate] = []
        for label, sign in FALLBACK_ROUTES:
            target = desired_km + sign * self.rng.random() * FALLBACK_JITTER_KM
            try:
                path = polygon_route(origin, target)
            except ValueError as e:
                log.warning("Fallback %s dropped: %s", label, e)
                continue

            distance_km = path_length(path)
            out.append(
                RouteCandidate(
                    id=_new_id(),
                    path=path,
                    distance_km=distance_km,
                    description=describe(distance_km, label),
                    source=RouteSource.APPROXIMATED,
                    target_distance_km=target,
                )
            )
        return out

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_candidate(
        self,
        origin: Coordinate,
        strategy: WaypointStrategy,
        target_km: float,
        gen: WaypointGenerator,
    ) -> Optional[RouteCandidate]:
        try:
            intermediates = gen.generate(strategy, origin, target_km)
        except ValueError as e:
            log.warning("Dropping %s candidate (target %.2f km): %s", strategy.value, target_km, e)
            return None

        result: RouteResult = self.client.route(origin, origin, intermediates, self.travel_mode)
        return RouteCandidate(
            id=_new_id(),
            path=result.path,
            distance_km=result.distance_km,
            description=describe(result.distance_km, strategy.label),
            source=result.source,
            strategy=strategy,
            target_distance_km=target_km,
        )


def polygon_route(origin: Coordinate, target_km: float) -> List[Coordinate]:
    """Start at ``origin``, walk a regular polygon around it, and close back."""
    if not target_km > 0:
        raise ValueError(f"Target distance must be positive, got {target_km}")

    n = min(max(3, math.floor(target_km / FALLBACK_SPACING_KM)), FALLBACK_MAX_VERTICES)
    radius = (target_km / (2 * math.pi)) * FALLBACK_DEG_PER_KM

    path = [origin]
    for i in range(1, n):
        angle = (i / n) * 2 * math.pi
        path.append(
            Coordinate(
                latitude=origin.latitude + math.sin(angle) * radius,
                longitude=origin.longitude + math.cos(angle) * radius,
            )
        )
    path.append(origin)
    return path
