"""Configuration settings for the activity analyzer."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# __file__ = src/activity_analyzer/config.py
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent


class AnalyzerSettings(BaseSettings):
    """
    Analysis tuning constants loaded from environment variables.

    Every value is an empirically chosen default. Override with
    ``ACTIVITY_ANALYZER_<NAME>`` (e.g. ``ACTIVITY_ANALYZER_PACE_WINDOW_S=15``).
    """

    model_config = SettingsConfigDict(
        env_prefix="ACTIVITY_ANALYZER_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Elevation smoothing
    elevation_ema_alpha: float = Field(default=0.2, gt=0.0, le=1.0)

    # Trailing windows (seconds)
    pace_window_s: float = Field(default=12.0, gt=0.0)
    vam_window_s: float = Field(default=30.0, gt=0.0)

    # Plausible speed range for pace (km/h)
    min_speed_kmh: float = Field(default=2.0, ge=0.0)
    max_speed_kmh: float = Field(default=25.0, gt=0.0)
    ride_min_speed_kmh: float = Field(default=3.0, ge=0.0)
    ride_max_speed_kmh: float = Field(default=100.0, gt=0.0)

    # VAM values below this magnitude are treated as noise (m/h)
    vam_noise_floor_m_per_h: float = Field(default=5.0, ge=0.0)

    # Sensor stream join
    sensor_join_tolerance_s: float = Field(default=30.0, ge=0.0)

    # Swim
    default_pool_length_m: float = Field(default=25.0, gt=0.0)
    main_set_min_repeats: int = Field(default=3, ge=1)
    main_set_tolerance_pct: float = Field(default=0.05, ge=0.0)
    main_set_min_tolerance_m: float = Field(default=10.0, ge=0.0)
    set_bucket_m: float = Field(default=25.0, gt=0.0)

    # Downsampling
    default_point_budget: int = Field(default=2000, ge=2)

    @model_validator(mode="after")
    def check_speed_ranges(self) -> "AnalyzerSettings":
        """Reject inverted speed ranges."""
        if self.min_speed_kmh >= self.max_speed_kmh:
            raise ValueError("min_speed_kmh must be lower than max_speed_kmh")
        if self.ride_min_speed_kmh >= self.ride_max_speed_kmh:
            raise ValueError("ride_min_speed_kmh must be lower than ride_max_speed_kmh")
        return self

    def speed_bounds_kmh(self, activity_type: str = "run") -> tuple:
        """Return the (min, max) plausible speed in km/h for an activity type."""
        if activity_type.lower() in RIDE_TYPES:
            return self.ride_min_speed_kmh, self.ride_max_speed_kmh
        return self.min_speed_kmh, self.max_speed_kmh


RIDE_TYPES = frozenset({"ride", "bike", "cycling", "virtual_ride", "ebike"})


@lru_cache
def get_settings() -> AnalyzerSettings:
    """Get cached settings instance."""
    return AnalyzerSettings()
