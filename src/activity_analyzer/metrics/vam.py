"""Vertical ascent rate (VAM) over a trailing window."""

from typing import List, Optional, Sequence

from ..config import AnalyzerSettings, get_settings
from .windows import apply_trailing_window


def windowed_vam(
    time_s: Sequence[float],
    elevation_m: Sequence[Optional[float]],
    window_s: Optional[float] = None,
    noise_floor_m_per_h: Optional[float] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> List[Optional[float]]:
    """
    Climb rate per sample in meters per hour.

    VAM over the window ``[j, i]`` is the net elevation change divided by
    the window duration in hours. Only climbing is reported: windows with a
    net descent, no change, a missing endpoint elevation, or a rate below the
    noise floor yield None.

    Args:
        time_s: Seconds from start (non-decreasing)
        elevation_m: Smoothed elevation per index (nullable)
        window_s: Trailing window in seconds (default from settings)
        noise_floor_m_per_h: Smallest reported rate (default from settings)
        settings: Analyzer settings (defaults to get_settings())

    Returns:
        VAM in m/h per index
    """
    settings = settings or get_settings()
    window = settings.vam_window_s if window_s is None else window_s
    floor = settings.vam_noise_floor_m_per_h if noise_floor_m_per_h is None else noise_floor_m_per_h

    def vam_over(j: int, i: int) -> Optional[float]:
        start, end = elevation_m[j], elevation_m[i]
        elapsed = time_s[i] - time_s[j]
        if start is None or end is None or elapsed <= 0:
            return None
        climb = end - start
        if climb <= 0:
            return None
        vam = climb / (elapsed / 3600.0)
        return vam if vam >= floor else None

    return apply_trailing_window(time_s, window, vam_over)
