import random
import time

import pytest

from runroute.core.engine import (
    FALLBACK_MAX_VERTICES,
    NoRoutesAvailable,
    RouteSuggestionEngine,
    polygon_route,
    strategy_target_km,
)
from runroute.core.geodesy import path_length
from runroute.core.models import Coordinate, GenerationRequest, RouteSource, WaypointStrategy
from runroute.core.routing import RoutingServiceClient
from runroute.core.waypoints import WaypointGenerator
from runroute.providers.mock import FailingBackend, FixedRouteBackend

NYC = Coordinate(latitude=40.7128, longitude=-74.0060)
POLE = Coordinate(latitude=90, longitude=0)


def _engine(backend, seed=7):
    return RouteSuggestionEngine(RoutingServiceClient(backend), rng=random.Random(seed))


def _request(origin=NYC, distance=5.0, tolerance=0.5):
    return GenerationRequest(origin=origin, desired_distance_km=distance, tolerance_km=tolerance)


def test_failing_transport_still_yields_three_candidates():
    candidates = _engine(FailingBackend()).suggest(_request())

    assert len(candidates) == 3
    assert all(c is not None for c in candidates)
    assert all(c.source == RouteSource.APPROXIMATED for c in candidates)
    for c in candidates:
        assert c.distance_km == path_length(c.path)
        assert c.path[0] == NYC and c.path[-1] == NYC


def test_routed_end_to_end():
    routed_path = [NYC, Coordinate(latitude=40.73, longitude=-74.0), NYC]
    backend = FixedRouteBackend(distance_meters=5200, path=routed_path)
    candidates = _engine(backend).suggest(_request())

    assert len(candidates) == 3
    assert all(c.source == RouteSource.ROUTED for c in candidates)
    assert all(c.distance_km == 5.2 for c in candidates)
    assert all(c.description == "A 5.2km {} starting from your location".format(c.strategy.label)
               for c in candidates)


def test_candidates_follow_strategy_order():
    candidates = _engine(FailingBackend()).suggest(_request())
    assert [c.strategy for c in candidates] == [
        WaypointStrategy.LOOP,
        WaypointStrategy.OUT_AND_BACK,
        WaypointStrategy.RANDOM,
    ]


def test_targets_step_through_tolerance_band():
    candidates = _engine(FailingBackend()).suggest(_request(distance=5, tolerance=0.5))
    targets = [c.target_distance_km for c in candidates]
    assert targets[1] - targets[0] == pytest.approx(0.25)
    assert targets[2] - targets[1] == pytest.approx(0.25)
    assert strategy_target_km(5, 0.5, 1) == 5


def test_round_trip_requests_go_back_to_origin():
    backend = FixedRouteBackend(distance_meters=5000, path=None)
    _engine(backend).suggest(_request())

    full_requests = [b for b in backend.calls if "intermediates" in b]
    assert len(full_requests) == 3
    for body in full_requests:
        assert body["origin"] == body["destination"]
        assert body["origin"]["location"]["latLng"] == NYC.as_lat_lng()
        assert body["travelMode"] == "WALK"


def test_generation_failure_drops_only_that_candidate():
    # loop target = 1 + (0 - 1) * 2 = -1 km
    candidates = _engine(FailingBackend()).suggest(_request(distance=1, tolerance=4))
    assert [c.strategy for c in candidates] == [WaypointStrategy.OUT_AND_BACK, WaypointStrategy.RANDOM]


def test_order_is_independent_of_completion_order():
    class SlowLoopBackend(FixedRouteBackend):
        def compute_routes(self, body, field_mask, timeout_s, retry=True):
            if len(body.get("intermediates", [])) == 4:
                time.sleep(0.05)
            return super().compute_routes(body, field_mask, timeout_s, retry)

    candidates = _engine(SlowLoopBackend(path=None)).suggest(_request())
    assert candidates[0].strategy == WaypointStrategy.LOOP


def test_same_seed_same_suggestions():
    a = _engine(FailingBackend(), seed=11).suggest(_request())
    b = _engine(FailingBackend(), seed=11).suggest(_request())
    assert [c.path for c in a] == [c.path for c in b]
    assert [c.id for c in a] != [c.id for c in b]


def test_local_fallback_when_every_strategy_fails(monkeypatch):
    def broken(self, strategy, center, distance_km):
        raise ValueError("malformed")

    monkeypatch.setattr(WaypointGenerator, "generate", broken)
    candidates = _engine(FailingBackend()).suggest(_request())

    assert len(candidates) == 3
    assert all(c.source == RouteSource.APPROXIMATED for c in candidates)
    assert all(c.strategy is None for c in candidates)
    assert [c.description.split("km ", 1)[1] for c in candidates] == [
        "Park Loop starting from your location",
        "Neighborhood Route starting from your location",
        "Scenic Path starting from your location",
    ]
    targets = [c.target_distance_km for c in candidates]
    assert 4.7 <= targets[0] <= 5.0
    assert targets[1] == 5.0
    assert 5.0 <= targets[2] <= 5.3
    for c in candidates:
        assert c.path[0] == c.path[-1] == NYC
        assert c.distance_km == path_length(c.path)


def test_no_origin_is_total_exhaustion():
    with pytest.raises(NoRoutesAvailable):
        _engine(FailingBackend()).suggest(_request(origin=None))


def test_fallback_that_cannot_be_built_is_total_exhaustion(monkeypatch):
    def broken(self, strategy, center, distance_km):
        raise ValueError("malformed")

    monkeypatch.setattr(WaypointGenerator, "generate", broken)
    with pytest.raises(NoRoutesAvailable):
        _engine(FailingBackend()).suggest(_request(origin=POLE))


def test_polygon_route_shape():
    path = polygon_route(NYC, 5)
    # max(3, floor(5 / 0.5)) vertices incl. origin, plus the closing point
    assert len(path) == 11
    assert path[0] == path[-1] == NYC


def test_polygon_route_rejects_non_positive_target():
    with pytest.raises(ValueError):
        polygon_route(NYC, 0)


def test_polygon_route_vertex_count_is_capped():
    path = polygon_route(NYC, 1000)
    assert len(path) == FALLBACK_MAX_VERTICES + 1
