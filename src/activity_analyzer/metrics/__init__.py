"""Training metrics calculations."""

from .windows import apply_trailing_window, trailing_window_starts
from .pace import grade_adjusted_pace, speed_to_pace, windowed_pace
from .vam import windowed_vam
from .derive import derive_metrics
from .zones import (
    BAND_PRESETS,
    build_hr_zones,
    bins_from_durations,
    classify_samples,
    classify_value,
    estimate_max_hr,
    validate_zone_definition,
    zones_from_bands,
    zones_from_config,
)
from .power import (
    build_power_zones,
    calculate_intensity_factor,
    calculate_normalized_power,
    power_zones_from_config,
)
from .swim import (
    calculate_pace_per_100m,
    calculate_session_swolf,
    calculate_stroke_rate,
    compute_fixed_splits,
    is_yard_pool,
    laps_from_lengths,
    resolve_pool_length,
    snap_pool_length,
    stroke_rate_stats,
)
from .splits import compute_distance_splits

__all__ = [
    # Windows
    "apply_trailing_window",
    "trailing_window_starts",
    # Pace and VAM
    "grade_adjusted_pace",
    "speed_to_pace",
    "windowed_pace",
    "windowed_vam",
    "derive_metrics",
    # HR Zones
    "BAND_PRESETS",
    "build_hr_zones",
    "bins_from_durations",
    "classify_samples",
    "classify_value",
    "estimate_max_hr",
    "validate_zone_definition",
    "zones_from_bands",
    "zones_from_config",
    # Power
    "build_power_zones",
    "calculate_intensity_factor",
    "calculate_normalized_power",
    "power_zones_from_config",
    # Swim
    "calculate_pace_per_100m",
    "calculate_session_swolf",
    "calculate_stroke_rate",
    "compute_fixed_splits",
    "is_yard_pool",
    "laps_from_lengths",
    "resolve_pool_length",
    "snap_pool_length",
    "stroke_rate_stats",
    # Splits
    "compute_distance_splits",
]
