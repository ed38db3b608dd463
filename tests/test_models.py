"""Tests for series and request models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from activity_analyzer.exceptions import ErrorCode, SeriesValidationError
from activity_analyzer.models.requests import SwimContext, TelemetryBundle, ZoneConfig
from activity_analyzer.models.series import SERIES_FIELDS, CanonicalSeries
from activity_analyzer.models.swim import SwimLap, SwimLength
from activity_analyzer.models.zones import BandPreset, MaxHrFormula


class TestCanonicalSeries:
    """Tests for CanonicalSeries invariants."""

    def test_optional_lists_are_padded(self):
        series = CanonicalSeries(time_s=[0.0, 1.0, 2.0])
        assert series.distance_m == [0.0, 0.0, 0.0]
        assert series.hr_bpm == [None, None, None]
        assert len(series) == 3

    def test_length_mismatch(self):
        """Every list must share the length of time_s."""
        with pytest.raises(SeriesValidationError) as exc_info:
            CanonicalSeries(time_s=[0.0, 1.0], hr_bpm=[120.0])
        assert exc_info.value.code == ErrorCode.SERIES_LENGTH_MISMATCH
        assert exc_info.value.details["mismatched"] == {"hr_bpm": 1}

    def test_time_must_not_decrease(self):
        with pytest.raises(SeriesValidationError, match="time_s must be non-decreasing") as exc_info:
            CanonicalSeries(time_s=[0.0, 2.0, 1.0])
        assert exc_info.value.code == ErrorCode.SERIES_NOT_MONOTONIC

    def test_distance_must_not_decrease(self):
        with pytest.raises(SeriesValidationError, match="distance_m"):
            CanonicalSeries(time_s=[0.0, 1.0], distance_m=[5.0, 4.0])

    def test_take(self):
        series = CanonicalSeries(time_s=[0.0, 1.0, 2.0, 3.0], hr_bpm=[100.0, 110.0, 120.0, 130.0])
        picked = series.take([0, 3])
        assert picked.time_s == [0.0, 3.0]
        assert picked.hr_bpm == [100.0, 130.0]

    def test_with_values_returns_copy(self):
        series = CanonicalSeries(time_s=[0.0, 1.0])
        updated = series.with_values(distance_m=[0.0, 3.0], distance_source="gps")
        assert series.distance_m == [0.0, 0.0]
        assert updated.total_distance_m == 3.0
        assert updated.distance_source == "gps"

    def test_to_dict(self):
        data = CanonicalSeries(time_s=[0.0, 1.0]).to_dict()
        assert set(data) == set(SERIES_FIELDS) | {"distance_source"}

    def test_empty(self):
        series = CanonicalSeries.empty()
        assert series.is_empty
        assert series.duration_s is None
        assert series.total_distance_m is None
        assert not series.has_gps


class TestSwimModels:
    """Tests for swim records."""

    def test_length_from_record(self):
        length = SwimLength.from_record({
            "distanceInMeters": 25,
            "durationInSeconds": 28.5,
            "totalStrokes": 18,
            "averageHeartRate": 140,
            "strokeType": "FREESTYLE",
        })
        assert length.distance_m == 25.0
        assert length.duration_s == 28.5
        assert length.stroke_count == 18
        assert length.avg_heart_rate == 140.0
        assert length.stroke_type == "FREESTYLE"
        assert length.pace_per_100_s == pytest.approx(114.0)

    def test_malformed_record_is_idle(self):
        """Missing distance degrades to an idle length."""
        length = SwimLength.from_record({"durationInSeconds": "??"})
        assert length.distance_m == 0.0
        assert length.duration_s is None
        assert not length.is_active
        assert length.pace_per_100_s is None

    def test_lap_from_record(self):
        lap = SwimLap.from_record({"distance": 100, "duration": 95})
        assert isinstance(lap, SwimLap)
        assert lap.distance_m == 100.0
        assert lap.length_count is None

    @pytest.mark.parametrize("key", ["numberOfLengths", "num_lengths", "length_count"])
    def test_lap_length_count(self, key):
        lap = SwimLap.from_record({"distanceInMeters": 100, "durationInSeconds": 95, key: 4})
        assert lap.length_count == 4
        assert lap.to_dict()["length_count"] == 4


class TestRequestModels:
    """Tests for caller-facing input models."""

    def test_camel_case_aliases(self):
        config = ZoneConfig.model_validate({"maxHr": 190, "restHr": 50, "useReserve": True, "bandPreset": "run"})
        assert config.max_hr == 190
        assert config.use_reserve is True
        assert config.band_preset == BandPreset.RUN
        assert config.formula == MaxHrFormula.TANAKA

    def test_snake_case_names(self):
        context = SwimContext(pool_length_override_m=25)
        assert context.pool_length_override_m == 25.0
        assert context.split_distance == 100.0

    def test_invalid_age(self):
        with pytest.raises(PydanticValidationError):
            ZoneConfig(age=150)

    def test_bundle_is_swim(self):
        assert TelemetryBundle(activity_type="open_water_swimming").is_swim
        assert TelemetryBundle(lengths=[{"distance_m": 25}]).is_swim
        assert not TelemetryBundle(activity_type="run").is_swim

    def test_bundle_elevation_unit(self):
        assert TelemetryBundle.model_validate({"elevationUnit": "Feet"}).elevation_unit == "ft"
