"""Tests for analyzer settings."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from activity_analyzer.config import AnalyzerSettings, get_settings


class TestAnalyzerSettings:
    """Tests for AnalyzerSettings."""

    def test_defaults(self, settings):
        assert settings.elevation_ema_alpha == 0.2
        assert settings.pace_window_s == 12.0
        assert settings.vam_window_s == 30.0
        assert settings.sensor_join_tolerance_s == 30.0
        assert settings.default_pool_length_m == 25.0
        assert settings.main_set_min_repeats == 3

    def test_environment_override(self, monkeypatch):
        """ACTIVITY_ANALYZER_* variables override defaults."""
        monkeypatch.setenv("ACTIVITY_ANALYZER_PACE_WINDOW_S", "15")
        monkeypatch.setenv("ACTIVITY_ANALYZER_DEFAULT_POOL_LENGTH_M", "50")
        settings = AnalyzerSettings(_env_file=None)
        assert settings.pace_window_s == 15.0
        assert settings.default_pool_length_m == 50.0

    def test_invalid_alpha(self):
        with pytest.raises(PydanticValidationError):
            AnalyzerSettings(_env_file=None, elevation_ema_alpha=1.5)

    def test_inverted_speed_range(self):
        """Min speed must be below max speed."""
        with pytest.raises(PydanticValidationError, match="min_speed_kmh"):
            AnalyzerSettings(_env_file=None, min_speed_kmh=30, max_speed_kmh=25)

    def test_speed_bounds_by_activity(self, settings):
        assert settings.speed_bounds_kmh("run") == (2.0, 25.0)
        assert settings.speed_bounds_kmh("Ride") == (3.0, 100.0)
        assert settings.speed_bounds_kmh("hike") == (2.0, 25.0)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
