"""Pace metrics: trailing-window pace and whole-activity grade-adjusted pace."""

import logging
from typing import List, Optional, Sequence

from ..config import AnalyzerSettings, get_settings
from .windows import apply_trailing_window


logger = logging.getLogger(__name__)

METERS_PER_MILE = 1609.344
METERS_PER_FOOT = 0.3048

# Minutes per mile added/subtracted per 100 ft/mi of climb/descent
UPHILL_COEFFICIENT = 1.2
DOWNHILL_COEFFICIENT = 0.8


def speed_to_pace(speed_mps: Optional[float]) -> Optional[float]:
    """Convert speed (m/s) to pace (s/km); None for missing or non-positive speed."""
    if speed_mps is None or speed_mps <= 0:
        return None
    return 1000.0 / speed_mps


def windowed_pace(
    time_s: Sequence[float],
    distance_m: Sequence[float],
    window_s: Optional[float] = None,
    min_speed_kmh: Optional[float] = None,
    max_speed_kmh: Optional[float] = None,
    activity_type: str = "run",
    settings: Optional[AnalyzerSettings] = None,
) -> List[Optional[float]]:
    """
    Pace per sample over a trailing time window.

    Average speed over the window ``[j, i]`` is the distance covered divided
    by the elapsed time; pace is its reciprocal in seconds per km. Paces whose
    implied speed falls outside the plausible range for the activity are
    rejected as GPS jitter (None), as is a standstill.

    Args:
        time_s: Seconds from start (non-decreasing)
        distance_m: Cumulative distance (non-decreasing)
        window_s: Trailing window in seconds (default from settings)
        min_speed_kmh: Lowest plausible speed (default per activity type)
        max_speed_kmh: Highest plausible speed (default per activity type)
        activity_type: Used to pick default speed bounds ("run", "ride", ...)
        settings: Analyzer settings (defaults to get_settings())

    Returns:
        Pace in s/km per index, None where undefined or rejected
    """
    settings = settings or get_settings()
    window = settings.pace_window_s if window_s is None else window_s
    default_min, default_max = settings.speed_bounds_kmh(activity_type)
    low = default_min if min_speed_kmh is None else min_speed_kmh
    high = default_max if max_speed_kmh is None else max_speed_kmh

    rejected = 0

    def pace_over(j: int, i: int) -> Optional[float]:
        nonlocal rejected
        elapsed = time_s[i] - time_s[j]
        if elapsed <= 0:
            return None
        speed_mps = (distance_m[i] - distance_m[j]) / elapsed
        speed_kmh = speed_mps * 3.6
        if speed_kmh < low or speed_kmh > high:
            rejected += 1
            return None
        return speed_to_pace(speed_mps)

    paces = apply_trailing_window(time_s, window, pace_over)
    if rejected:
        logger.debug(f"Rejected {rejected} paces outside {low}-{high} km/h")
    return paces


def grade_adjusted_pace(
    distance_m: Optional[float],
    duration_s: Optional[float],
    elevation_gain_m: Optional[float],
    elevation_loss_m: Optional[float] = None,
) -> Optional[float]:
    """
    Whole-activity grade-adjusted pace (GAP).

    Works in minutes per mile, the unit the correction coefficients are
    defined in:
    - Uphill: ``(ft_per_mile / 100) * 1.2`` min/mi is added to actual pace
    - Net descent (loss exceeds gain): ``(net_ft_per_mile / 100) * 0.8``
      min/mi is subtracted

    Example: 5 mi in 50 min with 500 ft of gain is 10:00/mi actual pace,
    100 ft/mi, so GAP = 10.0 + 1.2 = 11.2 min/mi.

    Args:
        distance_m: Total distance in meters
        duration_s: Total (moving) duration in seconds
        elevation_gain_m: Total climb in meters
        elevation_loss_m: Total descent in meters (optional)

    Returns:
        GAP in seconds per km, or None if an input is missing or invalid
    """
    if distance_m is None or duration_s is None or elevation_gain_m is None:
        return None
    if distance_m <= 0 or duration_s <= 0 or elevation_gain_m < 0:
        return None

    miles = distance_m / METERS_PER_MILE
    pace_min_per_mile = (duration_s / 60.0) / miles

    if elevation_loss_m is not None and elevation_loss_m > elevation_gain_m:
        net_descent_ft = (elevation_loss_m - elevation_gain_m) / METERS_PER_FOOT
        adjustment = -(net_descent_ft / miles / 100) * DOWNHILL_COEFFICIENT
    else:
        gain_ft = elevation_gain_m / METERS_PER_FOOT
        adjustment = (gain_ft / miles / 100) * UPHILL_COEFFICIENT

    gap_min_per_mile = pace_min_per_mile + adjustment
    if gap_min_per_mile <= 0:
        return None
    return gap_min_per_mile * 60.0 / (METERS_PER_MILE / 1000.0)
