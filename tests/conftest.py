"""Pytest configuration and fixtures."""

import math

import pytest

from activity_analyzer.config import AnalyzerSettings, get_settings
from activity_analyzer.models.swim import SwimLength


# Meters per degree of latitude on a 6 371 km sphere
METERS_PER_DEG_LAT = 6_371_000.0 * math.pi / 180


@pytest.fixture
def settings():
    """Default settings, isolated from any local .env file."""
    return AnalyzerSettings(_env_file=None)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Ensure get_settings() re-reads the environment in every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_run_points(
    count=120,
    speed_mps=3.0,
    start_ts=1_700_000_000,
    climb_per_s=0.0,
    start_elevation=100.0,
):
    """1 Hz GPS points heading due north at a constant speed."""
    points = []
    for i in range(count):
        points.append({
            "timestamp": start_ts + i,
            "latitude": 45.0 + (i * speed_mps) / METERS_PER_DEG_LAT,
            "longitude": 7.0,
            "elevation": start_elevation + i * climb_per_s,
        })
    return points


@pytest.fixture
def run_points():
    """Two minutes of steady 3 m/s running on flat ground."""
    return make_run_points()


@pytest.fixture
def hr_samples():
    """Heart rate every 5 s over the same two minutes, rising 120 -> 143."""
    return [
        {"timestamp": 1_700_000_000 + t, "heartRate": 120 + t // 5}
        for t in range(0, 120, 5)
    ]


def make_lengths(count, distance_m=25.0, duration_s=30.0, strokes=20):
    return [
        SwimLength(distance_m=distance_m, duration_s=duration_s, stroke_count=strokes)
        for _ in range(count)
    ]


def rest():
    """An idle length (rest at the wall)."""
    return SwimLength(distance_m=0.0, duration_s=20.0)


@pytest.fixture
def interval_swim_lengths():
    """200 warm-up, 6 x 100 with rest, 50 cool-down (25 m pool)."""
    lengths = make_lengths(8, duration_s=32.0, strokes=19) + [rest()]
    for _ in range(6):
        lengths += make_lengths(4, duration_s=25.0, strokes=17) + [rest()]
    lengths += make_lengths(2, duration_s=35.0, strokes=20)
    return lengths


@pytest.fixture
def point_factory():
    """Builder for synthetic 1 Hz GPS points (see make_run_points)."""
    return make_run_points


@pytest.fixture
def length_factory():
    """Builder for identical swim lengths (see make_lengths)."""
    return make_lengths
