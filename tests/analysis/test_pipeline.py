"""Tests for the end-to-end activity analysis pipeline."""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from activity_analyzer.analysis.pipeline import ActivityAnalyzer, median_sample_interval
from activity_analyzer.exceptions import ZoneConfigurationError
from activity_analyzer.models.requests import AnalysisOptions, TelemetryBundle, ZoneConfig


START = 1_700_000_000


@pytest.fixture
def analyzer(settings):
    return ActivityAnalyzer(settings=settings)


@pytest.fixture
def run_bundle(run_points, hr_samples):
    return {"points": run_points, "samples": hr_samples, "activityType": "run"}


class TestMedianSampleInterval:
    """Tests for the zone sample duration."""

    def test_median(self):
        assert median_sample_interval([0, 1, 2, 3, 10]) == 1.0

    def test_default(self):
        assert median_sample_interval([5]) == 1.0
        assert median_sample_interval([]) == 1.0


class TestRunAnalysis:
    """Tests for a GPS run with a heart rate stream."""

    def test_summary(self, analyzer, run_bundle):
        """Two minutes at 3 m/s: about 357 m at 5:33/km."""
        summary = analyzer.analyze(run_bundle).summary

        assert summary.activity_type == "run"
        assert summary.sample_count == 120
        assert summary.distance_source == "gps"
        assert summary.distance_m == pytest.approx(357.0, rel=1e-3)
        assert summary.duration_s == 119.0
        assert summary.avg_pace_s_per_km == pytest.approx(333.3, abs=0.5)
        assert summary.elevation_gain_m == 0.0
        assert summary.gap_s_per_km == pytest.approx(summary.avg_pace_s_per_km, abs=0.5)
        assert summary.max_hr_bpm == 143.0
        assert summary.avg_power_w is None
        assert summary.normalized_power_w is None

    def test_series(self, analyzer, run_bundle):
        series = analyzer.analyze(run_bundle).series

        assert len(series) == 120
        assert series.pace_s_per_km[:12] == [None] * 12
        assert series.pace_s_per_km[12] == pytest.approx(1000 / 3, rel=1e-3)
        assert all(b >= a for a, b in zip(series.distance_m, series.distance_m[1:]))
        assert all(hr is not None for hr in series.hr_bpm)

    def test_heart_rate_zones_conserve_time(self, analyzer, run_bundle):
        """Every sample with heart rate contributes one median interval."""
        result = analyzer.analyze(run_bundle, zone_config={"maxHr": 190})
        bins = result.zones["heart_rate"]

        assert len(bins) == 5
        assert sum(b.duration_s for b in bins) == pytest.approx(120.0)
        assert sum(b.percentage for b in bins) == pytest.approx(100.0, abs=0.2)
        assert "power" not in result.zones

    def test_zones_from_age(self, analyzer, run_bundle):
        result = analyzer.analyze(run_bundle, zone_config=ZoneConfig(age=30, band_preset="run"))
        assert result.zones["heart_rate"][4].range_max == 187

    def test_no_zone_config(self, analyzer, run_bundle):
        assert analyzer.analyze(run_bundle).zones == {}

    def test_invalid_zone_bands(self, analyzer, run_bundle):
        with pytest.raises(ZoneConfigurationError, match="start at 0"):
            analyzer.analyze(run_bundle, zone_config={"zones": [{"min": 10}]})

    def test_partial_split(self, analyzer, run_bundle):
        """Under a kilometer still gives one (partial) split."""
        splits = analyzer.analyze(run_bundle).splits
        assert len(splits) == 1
        assert splits[0].distance_m == pytest.approx(357.0, rel=1e-3)

    def test_point_budget(self, analyzer, run_bundle):
        """Downsampling affects the returned series, not the summary."""
        result = analyzer.analyze(run_bundle, options={"pointBudget": 20})
        assert len(result.series) == 20
        assert result.summary.sample_count == 120
        assert result.series.time_s[0] == 0.0
        assert result.series.time_s[-1] == 119.0

    def test_point_budget_keeps_mile_marks(self, analyzer, point_factory):
        """Imperial callers keep the sample at each mile boundary (3 m/s: index 537)."""
        bundle = {"points": point_factory(count=700)}
        result = analyzer.analyze(bundle, options={"pointBudget": 20, "unitSystem": "imperial"})
        assert len(result.series) == 20
        assert 537.0 in result.series.time_s

    def test_point_budget_keeps_kilometer_marks(self, analyzer, point_factory):
        bundle = {"points": point_factory(count=700)}
        result = analyzer.analyze(bundle, options={"pointBudget": 20})
        assert 334.0 in result.series.time_s

    def test_imperial_options(self, analyzer, run_bundle):
        result = analyzer.analyze(run_bundle, options=AnalysisOptions(unit_system="imperial"))
        assert result.unit_system == "imperial"

    def test_deterministic(self, analyzer, run_bundle):
        """The same input always produces the same output."""
        first = analyzer.analyze(run_bundle, zone_config={"maxHr": 190}).to_dict()
        second = analyzer.analyze(run_bundle, zone_config={"maxHr": 190}).to_dict()
        assert first == second

    def test_accepts_bundle_model(self, analyzer, run_points):
        bundle = TelemetryBundle(points=run_points)
        assert len(analyzer.analyze(bundle).series) == 120


class TestClimbingAnalysis:
    """Tests for elevation-derived metrics."""

    def test_climb(self, analyzer, point_factory):
        bundle = {"points": point_factory(count=180, climb_per_s=0.3)}
        summary = analyzer.analyze(bundle).summary

        assert summary.elevation_gain_m > 0
        assert summary.elevation_loss_m == 0.0
        assert summary.max_vam_m_per_h > 0
        assert summary.gap_s_per_km > summary.avg_pace_s_per_km

    def test_elevation_in_feet(self, analyzer, point_factory):
        bundle = {"points": point_factory(count=5), "elevationUnit": "feet"}
        series = analyzer.analyze(bundle).series
        assert series.raw_elevation_m[0] == pytest.approx(30.48)

    def test_invalid_elevation_unit(self, analyzer):
        with pytest.raises(PydanticValidationError):
            analyzer.analyze({"points": [], "elevationUnit": "cubits"})


class TestPowerAnalysis:
    """Tests for rides with a power stream."""

    def test_power_metrics(self, analyzer, run_points):
        samples = [{"timestamp": START + t, "power": 200} for t in range(120)]
        bundle = {"points": run_points, "samples": samples, "activityType": "ride"}
        result = analyzer.analyze(bundle, power_zone_config={"ftp": 250})

        assert result.summary.avg_power_w == 200.0
        assert result.summary.normalized_power_w == 200.0
        assert result.summary.intensity_factor == 0.8
        power_bins = result.zones["power"]
        assert len(power_bins) == 7
        assert power_bins[2].duration_s == 120.0

    def test_indoor_ride_without_gps(self, analyzer):
        """Sensor samples alone form the timeline; distance is unknown."""
        samples = [{"timestamp": START + t, "power": 180} for t in range(60)]
        result = analyzer.analyze({"samples": samples, "activityType": "virtual_ride"})

        assert len(result.series) == 60
        assert result.summary.distance_source == "none"
        assert result.summary.distance_m is None
        assert result.summary.avg_pace_s_per_km is None
        assert result.splits == []


class TestSwimAnalysis:
    """Tests for pool swims."""

    def test_pool_swim(self, analyzer):
        lengths = [{"distanceInMeters": 25, "durationInSeconds": 30, "totalStrokes": 20}] * 20
        result = analyzer.analyze({"activityType": "lap_swimming", "lengths": lengths})

        assert result.swim is not None
        assert result.swim.swolf == 50
        assert result.splits == []
        assert result.to_dict()["swim"]["swolf"] == 50

    def test_swim_context(self, analyzer):
        lengths = [{"distance_m": 25, "duration_s": 30}] * 8
        result = analyzer.analyze(
            {"activityType": "pool_swim", "lengths": lengths},
            swim_context={"poolLengthOverrideM": 50},
        )
        assert result.swim.pool_length_m == 50.0

    def test_laps_only_swim(self, analyzer):
        """Lap length counts drive pool inference and SWOLF when no lengths exist."""
        laps = [
            {"distanceInMeters": 91.44, "durationInSeconds": 90, "totalStrokes": 60, "numberOfLengths": 4}
        ] * 4
        result = analyzer.analyze({"activityType": "lap_swimming", "laps": laps})

        swim = result.swim
        assert swim.pool_length_m == pytest.approx(22.86)
        assert swim.pool_length_source.value == "inferred"
        assert swim.yard_pool
        # 16 lengths: 360 s / 16 + 240 strokes / 16 = 22.5 + 15
        assert swim.swolf == 38
        assert swim.summary_lines[0] == "Pool: 25 yd (inferred)"

    def test_laps_without_length_counts(self, analyzer):
        """Without a length count there is no SWOLF and no inferred pool."""
        laps = [{"distanceInMeters": 100, "durationInSeconds": 90, "totalStrokes": 60}] * 4
        result = analyzer.analyze({"activityType": "lap_swimming", "laps": laps})

        assert result.swim.swolf is None
        assert result.swim.pool_length_source.value == "default"

    def test_malformed_swim_records_are_dropped(self, analyzer):
        lengths = [{"distance_m": 25, "duration_s": 30, "strokes": 20}] * 4 + [None, "garbage"]
        result = analyzer.analyze({"activityType": "pool_swim", "lengths": lengths})
        assert result.swim.total_distance_m == 100.0

    def test_non_swim_has_no_swim_sets(self, analyzer, run_bundle):
        assert analyzer.analyze(run_bundle).swim is None


class TestEdgeCases:
    """Tests for empty and degenerate input."""

    def test_empty_bundle(self, analyzer):
        result = analyzer.analyze({})

        assert result.series.is_empty
        assert result.summary.sample_count == 0
        assert result.summary.distance_m is None
        assert result.zones == {}
        assert result.splits == []
        assert result.swim is None

    def test_all_records_unusable(self, analyzer, caplog):
        """Records without timestamps are dropped with a warning, not an error."""
        with caplog.at_level(logging.WARNING):
            result = analyzer.analyze({"points": [{"lat": 45.0, "lon": 7.0}]})
        assert result.series.is_empty
        assert "No usable samples" in caplog.text

    def test_non_mapping_points_are_dropped(self, analyzer, run_points):
        """One malformed record does not fail the whole analysis."""
        result = analyzer.analyze({"points": run_points + [None, 42]})
        assert len(result.series) == 120

    def test_injected_logger(self, settings, run_bundle, caplog):
        logger = logging.getLogger("test.analyzer")
        analyzer = ActivityAnalyzer(settings=settings, logger=logger)
        assert analyzer.logger is logger

        with caplog.at_level(logging.INFO, logger="test.analyzer"):
            analyzer.analyze(run_bundle)
        assert "Analyzed run: 120 samples" in caplog.text
