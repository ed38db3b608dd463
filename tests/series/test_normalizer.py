"""Tests for series normalization and sensor joins."""

import pytest

from activity_analyzer.exceptions import ValidationError
from activity_analyzer.series.normalizer import normalize_series


START = 1_700_000_000


def point(offset, **fields):
    record = {"timestamp": START + offset, "lat": 45.0 + offset * 1e-5, "lon": 7.0}
    record.update(fields)
    return record


class TestNormalizeSeries:
    """Tests for normalize_series."""

    def test_empty_input(self, settings):
        """No records gives an empty series, not an error."""
        series = normalize_series([], [], settings=settings)
        assert series.is_empty
        assert normalize_series(None, settings=settings).is_empty

    def test_time_is_relative_to_first_record(self, run_points, settings):
        series = normalize_series(run_points, settings=settings)
        assert len(series) == 120
        assert series.time_s[0] == 0.0
        assert series.time_s[-1] == 119.0

    def test_millisecond_timestamps(self, settings):
        """Millisecond epochs produce the same timeline as seconds."""
        points = [{"timestamp": (START + i) * 1000, "lat": 45.0, "lon": 7.0} for i in range(3)]
        series = normalize_series(points, settings=settings)
        assert series.time_s == [0.0, 1.0, 2.0]

    def test_unsorted_records_are_sorted(self, settings):
        points = [point(2), point(0), point(1)]
        series = normalize_series(points, settings=settings)
        assert series.time_s == [0.0, 1.0, 2.0]

    def test_records_without_timestamp_are_dropped(self, settings):
        points = [point(0), {"lat": 45.0, "lon": 7.0}, point(1), {"timestamp": "soon"}]
        series = normalize_series(points, settings=settings)
        assert len(series) == 2

    def test_non_mapping_records_are_dropped(self, settings):
        series = normalize_series([point(0), "garbage", None, point(1)], settings=settings)
        assert len(series) == 2

    def test_null_island_and_half_fixes(self, settings):
        """(0, 0) and fixes missing one coordinate become null positions."""
        points = [
            {"timestamp": START, "lat": 0.0, "lon": 0.0},
            {"timestamp": START + 1, "lat": 45.0},
            {"timestamp": START + 2, "lat": 45.0, "lon": 7.0},
        ]
        series = normalize_series(points, settings=settings)
        assert series.latitude == [None, None, 45.0]
        assert series.longitude == [None, None, 7.0]

    def test_elevation_unit_feet(self, settings):
        points = [point(0, elevation=1000)]
        series = normalize_series(points, elevation_unit="ft", settings=settings)
        assert series.raw_elevation_m[0] == pytest.approx(304.8)

    def test_invalid_elevation_unit(self, settings):
        with pytest.raises(ValidationError, match="elevation unit"):
            normalize_series([point(0)], elevation_unit="cubits", settings=settings)

    def test_negative_join_tolerance(self, settings):
        with pytest.raises(ValidationError, match="join_tolerance_s"):
            normalize_series([point(0)], [], join_tolerance_s=-1, settings=settings)

    def test_distance_is_left_for_the_resolver(self, settings):
        """Provided distances are carried; distance_m stays zero until resolved."""
        points = [point(0, distance=0), point(1, distance=4.5)]
        series = normalize_series(points, settings=settings)
        assert series.provided_distance_m == [0.0, 4.5]
        assert series.distance_m == [0.0, 0.0]
        assert series.distance_source == "none"

    def test_malformed_fields_degrade_to_none(self, settings):
        points = [point(0, hr="n/a", power=-5, cadence=None)]
        series = normalize_series(points, settings=settings)
        assert series.hr_bpm == [None]
        assert series.power_w == [None]
        assert series.cadence == [None]


class TestSensorJoin:
    """Tests for joining sensor samples onto GPS points."""

    def test_nearest_sample_within_tolerance(self, settings):
        """Each point takes the nearest sample; beyond tolerance stays null."""
        points = [point(0), point(20), point(45), point(100)]
        samples = [
            {"timestamp": START, "heartRate": 100},
            {"timestamp": START + 60, "heartRate": 160},
        ]
        series = normalize_series(points, samples, settings=settings)
        assert series.hr_bpm == [100.0, 100.0, 160.0, None]

    def test_custom_tolerance(self, settings):
        points = [point(0), point(5)]
        samples = [{"timestamp": START, "heartRate": 130}]
        series = normalize_series(points, samples, join_tolerance_s=2, settings=settings)
        assert series.hr_bpm == [130.0, None]

    def test_equal_gap_prefers_earlier_sample(self, settings):
        points = [point(10)]
        samples = [
            {"timestamp": START + 5, "heartRate": 140},
            {"timestamp": START + 15, "heartRate": 150},
        ]
        series = normalize_series(points, samples, settings=settings)
        assert series.hr_bpm == [140.0]

    def test_embedded_values_win(self, settings):
        """A value already on the point is never overwritten by a sample."""
        points = [point(0, heart_rate=130)]
        samples = [{"timestamp": START, "heartRate": 150}]
        series = normalize_series(points, samples, settings=settings)
        assert series.hr_bpm == [130.0]

    def test_fields_join_independently(self, settings):
        """Heart rate and power may come from different samples."""
        points = [point(10)]
        samples = [
            {"timestamp": START + 10, "power": 250},
            {"timestamp": START + 12, "heartRate": 155},
        ]
        series = normalize_series(points, samples, settings=settings)
        assert series.power_w == [250.0]
        assert series.hr_bpm == [155.0]

    def test_samples_become_timeline_without_points(self, settings):
        """Indoor activities use the sensor stream as the timeline."""
        samples = [{"timestamp": START + t, "power": 200 + t} for t in range(5)]
        series = normalize_series([], samples, settings=settings)
        assert len(series) == 5
        assert series.power_w == [200.0, 201.0, 202.0, 203.0, 204.0]
        assert not series.has_gps

    def test_hr_stream_over_run(self, run_points, hr_samples, settings):
        """Every 1 Hz point is within 5 s of a 5 s sample."""
        series = normalize_series(run_points, hr_samples, settings=settings)
        assert all(hr is not None for hr in series.hr_bpm)
        assert series.hr_bpm[0] == 120.0
        assert series.hr_bpm[-1] == 143.0
