import math
import random

import pytest

from runroute.config import settings
from runroute.core.models import Coordinate, WaypointStrategy
from runroute.core.waypoints import DEG_PER_KM, WaypointGenerator, loop_radius_deg

CENTER = Coordinate(latitude=40.7128, longitude=-74.0060)


def _offset_deg(c: Coordinate) -> float:
    return math.hypot(c.latitude - CENTER.latitude, c.longitude - CENTER.longitude)


def test_loop_has_four_points_on_the_radius():
    r = loop_radius_deg(5)
    points = WaypointGenerator().loop(CENTER, 5)

    assert len(points) == 4
    for p in points:
        assert _offset_deg(p) <= r * (1 + 1e-9)
        assert _offset_deg(p) == pytest.approx(r)


def test_loop_starts_east_and_turns_counter_clockwise():
    east, north, west, south = WaypointGenerator().loop(CENTER, 5)
    assert east.longitude > CENTER.longitude
    assert north.latitude > CENTER.latitude
    assert west.longitude < CENTER.longitude
    assert south.latitude < CENTER.latitude


def test_loop_is_deterministic():
    a = WaypointGenerator(random.Random(1)).loop(CENTER, 7)
    b = WaypointGenerator(random.Random(2)).loop(CENTER, 7)
    assert a == b


def test_out_and_back_single_turnaround_at_half_distance():
    points = WaypointGenerator(random.Random(3)).out_and_back(CENTER, 6)
    assert len(points) == 1
    assert _offset_deg(points[0]) == pytest.approx(3 * DEG_PER_KM)


def test_out_and_back_is_repeatable_with_a_seed():
    a = WaypointGenerator(random.Random(99)).out_and_back(CENTER, 6)
    b = WaypointGenerator(random.Random(99)).out_and_back(CENTER, 6)
    assert a == b


@pytest.mark.parametrize("distance_km, expected", [(0.5, 2), (1.9, 2), (5, 5), (8.7, 8)])
def test_random_point_count(distance_km, expected):
    points = WaypointGenerator(random.Random(0)).random_points(CENTER, distance_km)
    assert len(points) == expected


def test_random_point_count_is_capped_at_intermediate_limit():
    points = WaypointGenerator(random.Random(0)).random_points(CENTER, 200000)
    assert len(points) == settings.max_intermediates


def test_random_point_cap_can_be_overridden():
    points = WaypointGenerator(random.Random(0), max_points=3).random_points(CENTER, 10)
    assert len(points) == 3


def test_random_points_stay_within_one_km_box():
    points = WaypointGenerator(random.Random(5)).random_points(CENTER, 10)
    for p in points:
        assert _offset_deg(p) <= DEG_PER_KM


def test_generate_dispatches_by_strategy():
    gen = WaypointGenerator(random.Random(0))
    assert len(gen.generate(WaypointStrategy.LOOP, CENTER, 5)) == 4
    assert len(gen.generate(WaypointStrategy.OUT_AND_BACK, CENTER, 5)) == 1
    assert len(gen.generate("random", CENTER, 5)) == 5


@pytest.mark.parametrize("strategy", list(WaypointStrategy))
def test_non_positive_distance_is_rejected(strategy):
    with pytest.raises(ValueError):
        WaypointGenerator().generate(strategy, CENTER, 0)


def test_points_past_the_pole_are_rejected():
    pole = Coordinate(latitude=90, longitude=0)
    with pytest.raises(ValueError):
        WaypointGenerator().loop(pole, 5)
