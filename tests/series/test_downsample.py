"""Tests for point-budget downsampling."""

import pytest

from activity_analyzer.exceptions import ValidationError
from activity_analyzer.models.series import CanonicalSeries
from activity_analyzer.series.downsample import (
    downsample_series,
    even_indices,
    peak_indices,
    split_indices,
)


def long_series(count=1000, peak_at=537):
    """1 Hz series at 3 m/s with a single heart rate spike."""
    hr = [140.0] * count
    hr[peak_at] = 190.0
    return CanonicalSeries(
        time_s=[float(i) for i in range(count)],
        distance_m=[i * 3.0 for i in range(count)],
        hr_bpm=hr,
    )


class TestHelpers:
    """Tests for index selection helpers."""

    def test_even_indices_include_ends(self):
        assert even_indices(list(range(11)), 3) == [0, 5, 10]

    def test_even_indices_short_input(self):
        assert even_indices([4, 8], 5) == [4, 8]

    def test_split_indices(self):
        """First index at or past every kilometer."""
        series = long_series()
        assert split_indices(series.distance_m, 1000.0) == {334, 667}

    def test_split_indices_disabled(self):
        assert split_indices([0.0, 500.0, 1500.0], 0) == set()

    def test_peak_indices(self):
        assert peak_indices(long_series()) == {537}


class TestDownsampleSeries:
    """Tests for downsample_series."""

    def test_within_budget_is_unchanged(self):
        series = long_series(count=10, peak_at=3)
        assert downsample_series(series, 20) is series

    def test_budget_is_respected(self):
        reduced = downsample_series(long_series(), 50)
        assert len(reduced) == 50

    def test_keeps_ends_peaks_and_splits(self):
        series = long_series()
        reduced = downsample_series(series, 50)

        assert reduced.time_s[0] == 0.0
        assert reduced.time_s[-1] == 999.0
        assert max(reduced.hr_bpm) == 190.0
        assert 334.0 in reduced.time_s
        assert 667.0 in reduced.time_s

    def test_output_stays_ordered(self):
        reduced = downsample_series(long_series(), 50)
        assert reduced.time_s == sorted(reduced.time_s)
        assert reduced.distance_m == sorted(reduced.distance_m)

    def test_deterministic(self):
        series = long_series()
        assert downsample_series(series, 75).to_dict() == downsample_series(series, 75).to_dict()

    def test_required_points_thinned_to_budget(self):
        """When priority samples exceed the budget they are thinned evenly."""
        reduced = downsample_series(long_series(), 3)
        assert reduced.time_s == [0.0, 537.0, 999.0]

    def test_peaks_can_be_dropped(self):
        reduced = downsample_series(long_series(), 3, split_m=0, preserve_peaks=False)
        assert len(reduced) == 3
        assert reduced.time_s[0] == 0.0
        assert reduced.time_s[-1] == 999.0

    @pytest.mark.parametrize("budget", [0, 1, -10])
    def test_invalid_budget(self, budget):
        with pytest.raises(ValidationError, match="at least 2"):
            downsample_series(long_series(), budget)

    def test_default_budget_from_settings(self, settings):
        series = long_series()
        assert downsample_series(series, settings=settings) is series
