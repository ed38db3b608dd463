"""Point-budget downsampling that keeps the samples a reader looks for."""

import logging
from typing import Iterable, List, Optional, Sequence, Set

from ..config import AnalyzerSettings, get_settings
from ..exceptions import ValidationError
from ..models.series import CanonicalSeries


logger = logging.getLogger(__name__)


def even_indices(values: Sequence[int], count: int) -> List[int]:
    """
    Pick ``count`` evenly spaced entries of ``values``, first and last included.

    Returns all values when ``count`` is not smaller than their number.
    """
    if count >= len(values):
        return list(values)
    if count <= 0:
        return []
    if count == 1:
        return [values[len(values) // 2]]
    last = len(values) - 1
    return [values[int(round(k * last / (count - 1)))] for k in range(count)]


def _argmax(values: Sequence[Optional[float]]) -> Optional[int]:
    best: Optional[int] = None
    for i, value in enumerate(values):
        if value is not None and (best is None or value > values[best]):
            best = i
    return best


def _argmin(values: Sequence[Optional[float]]) -> Optional[int]:
    best: Optional[int] = None
    for i, value in enumerate(values):
        if value is not None and (best is None or value < values[best]):
            best = i
    return best


def peak_indices(series: CanonicalSeries) -> Set[int]:
    """Indices of max heart rate, max power, max speed and fastest pace."""
    candidates: Iterable[Optional[int]] = (
        _argmax(series.hr_bpm),
        _argmax(series.power_w),
        _argmax(series.speed_mps),
        _argmin(series.pace_s_per_km),
    )
    return {i for i in candidates if i is not None}


def split_indices(distance_m: Sequence[float], split_m: float) -> Set[int]:
    """First index at or past each multiple of ``split_m``."""
    if split_m <= 0 or not distance_m:
        return set()
    marks: Set[int] = set()
    boundary = distance_m[0] + split_m
    for i, distance in enumerate(distance_m):
        if distance >= boundary:
            marks.add(i)
            while boundary <= distance:
                boundary += split_m
    return marks


def downsample_series(
    series: CanonicalSeries,
    max_points: Optional[int] = None,
    *,
    split_m: float = 1000.0,
    preserve_peaks: bool = True,
    settings: Optional[AnalyzerSettings] = None,
) -> CanonicalSeries:
    """
    Reduce a series to at most ``max_points`` samples.

    Kept, in priority order: the first and last samples, peak samples (max
    heart rate, power and speed, fastest pace), the samples at distance
    split boundaries, and then evenly spaced samples to fill the budget.
    If the priority samples alone exceed the budget they are thinned
    evenly.

    Args:
        series: Series to reduce (returned unchanged if within budget)
        max_points: Point budget, at least 2 (default from settings)
        split_m: Distance between preserved split marks (0 disables)
        preserve_peaks: Keep peak samples
        settings: Analyzer settings (defaults to get_settings())

    Returns:
        A new series with a subset of the original indices, in order

    Raises:
        ValidationError: If max_points is below 2
    """
    if max_points is None:
        max_points = (settings or get_settings()).default_point_budget
    if max_points < 2:
        raise ValidationError(f"Point budget must be at least 2, got {max_points}", field="max_points")

    n = len(series)
    if n <= max_points:
        return series

    required = {0, n - 1} | split_indices(series.distance_m, split_m)
    if preserve_peaks:
        required |= peak_indices(series)

    if len(required) >= max_points:
        indices = even_indices(sorted(required), max_points)
    else:
        others = [i for i in range(n) if i not in required]
        indices = sorted(required | set(even_indices(others, max_points - len(required))))

    logger.debug(f"Downsampled series from {n} to {len(indices)} points")
    return series.take(indices)
