"""Per-kilometer / per-mile distance splits."""

from typing import List, Optional, Union

from ..formatting import METERS_PER_MILE, UnitSystem
from ..models.analysis import DistanceSplit
from ..models.series import CanonicalSeries
from ..series.resolver import elevation_gain_loss


def split_distance_m(unit_system: Union[UnitSystem, str]) -> float:
    """1 km for metric, 1 mile for imperial."""
    return METERS_PER_MILE if UnitSystem(unit_system) == UnitSystem.IMPERIAL else 1000.0


def _build_split(series: CanonicalSeries, index: int, start: int, end: int) -> Optional[DistanceSplit]:
    distance = series.distance_m[end] - series.distance_m[start]
    elapsed = series.time_s[end] - series.time_s[start]
    if distance <= 0:
        return None

    heart_rates = [hr for hr in series.hr_bpm[start + 1:end + 1] if hr is not None]
    elevations = series.elevation_m[start:end + 1]
    gain, _ = elevation_gain_loss(elevations)
    has_elevation = any(e is not None for e in elevations)

    grade = None
    first, last = series.elevation_m[start], series.elevation_m[end]
    if first is not None and last is not None:
        grade = round((last - first) / distance * 100, 1)

    return DistanceSplit(
        index=index,
        distance_m=round(distance, 1),
        time_s=round(elapsed, 1),
        avg_pace_s_per_km=round(elapsed / distance * 1000, 1) if elapsed > 0 else None,
        avg_hr_bpm=round(sum(heart_rates) / len(heart_rates), 1) if heart_rates else None,
        elevation_gain_m=round(gain, 1) if has_elevation else None,
        avg_grade_pct=grade,
    )


def compute_distance_splits(
    series: CanonicalSeries,
    unit_system: Union[UnitSystem, str] = UnitSystem.METRIC,
) -> List[DistanceSplit]:
    """
    Split an activity at every kilometer (or mile).

    A split ends at the first sample whose cumulative distance reaches the
    next boundary. The trailing partial split is kept, since activities
    rarely end on a boundary.

    Args:
        series: Resolved series (distance_m filled)
        unit_system: METRIC for km splits, IMPERIAL for mile splits

    Returns:
        Splits in order, numbered from 1
    """
    if len(series) < 2 or not series.total_distance_m:
        return []

    step = split_distance_m(unit_system)
    splits: List[DistanceSplit] = []
    start = 0
    boundary = series.distance_m[0] + step

    for i in range(1, len(series)):
        if series.distance_m[i] < boundary:
            continue
        split = _build_split(series, len(splits) + 1, start, i)
        if split is not None:
            splits.append(split)
        start = i
        while boundary <= series.distance_m[i]:
            boundary += step

    last = len(series) - 1
    if start < last:
        split = _build_split(series, len(splits) + 1, start, last)
        if split is not None:
            splits.append(split)
    return splits
