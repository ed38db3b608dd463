"""
Display formatting for derived metrics.

The unit system is always an explicit argument; nothing here reads global
preferences. Every formatter returns ``"--"`` for a missing value.
"""

from enum import Enum
from typing import Optional, Union


METERS_PER_MILE = 1609.344
METERS_PER_FOOT = 0.3048
METERS_PER_YARD = 0.9144

MISSING = "--"


class UnitSystem(str, Enum):
    """Display unit system."""
    METRIC = "metric"
    IMPERIAL = "imperial"


def _unit_system(value: Union[UnitSystem, str]) -> UnitSystem:
    return value if isinstance(value, UnitSystem) else UnitSystem(str(value).lower())


def format_duration(seconds: Optional[float]) -> str:
    """
    Format a duration as "h:mm:ss", or "m:ss" under an hour.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string like "1:02:05" or "45:30"
    """
    if seconds is None or seconds < 0:
        return MISSING
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_pace(s_per_km: Optional[float], unit_system: Union[UnitSystem, str]) -> str:
    """Format pace as "m:ss/km" or "m:ss/mi"."""
    if s_per_km is None or s_per_km <= 0:
        return MISSING
    if _unit_system(unit_system) == UnitSystem.IMPERIAL:
        return f"{format_duration(s_per_km * METERS_PER_MILE / 1000)}/mi"
    return f"{format_duration(s_per_km)}/km"


def format_speed(speed_mps: Optional[float], unit_system: Union[UnitSystem, str]) -> str:
    """Format speed as km/h or mph with one decimal."""
    if speed_mps is None or speed_mps < 0:
        return MISSING
    if _unit_system(unit_system) == UnitSystem.IMPERIAL:
        return f"{speed_mps * 3600 / METERS_PER_MILE:.1f} mph"
    return f"{speed_mps * 3.6:.1f} km/h"


def format_distance(distance_m: Optional[float], unit_system: Union[UnitSystem, str]) -> str:
    """Format distance as km or miles with two decimals."""
    if distance_m is None or distance_m < 0:
        return MISSING
    if _unit_system(unit_system) == UnitSystem.IMPERIAL:
        return f"{distance_m / METERS_PER_MILE:.2f} mi"
    return f"{distance_m / 1000:.2f} km"


def format_elevation(elevation_m: Optional[float], unit_system: Union[UnitSystem, str]) -> str:
    """Format elevation (or elevation change) as whole meters or feet."""
    if elevation_m is None:
        return MISSING
    if _unit_system(unit_system) == UnitSystem.IMPERIAL:
        return f"{round(elevation_m / METERS_PER_FOOT)} ft"
    return f"{round(elevation_m)} m"


def format_vam(vam_m_per_h: Optional[float], unit_system: Union[UnitSystem, str]) -> str:
    """Format vertical ascent rate as m/h or ft/h."""
    if vam_m_per_h is None:
        return MISSING
    if _unit_system(unit_system) == UnitSystem.IMPERIAL:
        return f"{round(vam_m_per_h / METERS_PER_FOOT)} ft/h"
    return f"{round(vam_m_per_h)} m/h"


def format_swim_pace(per_100m_s: Optional[float], yard_pool: bool = False) -> str:
    """
    Format swim pace (sec/100m) to mm:ss format.

    In a yard pool the pace is converted to seconds per 100 yd.

    Args:
        per_100m_s: Pace in seconds per 100m
        yard_pool: Whether the pool is measured in yards

    Returns:
        Formatted string like "1:45/100m" or "1:36/100yd"
    """
    if per_100m_s is None or per_100m_s <= 0:
        return MISSING
    if yard_pool:
        return f"{format_duration(per_100m_s * METERS_PER_YARD)}/100yd"
    return f"{format_duration(per_100m_s)}/100m"


def format_swim_distance(distance_m: Optional[float], yard_pool: bool = False) -> str:
    """Format a swim distance in whole meters, or whole yards in a yard pool."""
    if distance_m is None or distance_m < 0:
        return MISSING
    if yard_pool:
        return f"{round(distance_m / METERS_PER_YARD)} yd"
    return f"{round(distance_m)} m"
