"""Distance and elevation resolution for a normalized series."""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from ..config import AnalyzerSettings, get_settings
from ..exceptions import ValidationError
from ..models.series import CanonicalSeries


logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two WGS84 fixes.

    Args:
        lat1, lon1: First fix in degrees
        lat2, lon2: Second fix in degrees

    Returns:
        Distance in meters
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


def calculate_ema(current_value: float, previous_ema: float, alpha: float) -> float:
    """
    Exponential moving average step.

    EMA_n = alpha * value + (1 - alpha) * EMA_{n-1}

    Args:
        current_value: New reading
        previous_ema: Previous smoothed value
        alpha: Smoothing factor in (0, 1]; 1 disables smoothing

    Returns:
        New smoothed value
    """
    return alpha * current_value + (1 - alpha) * previous_ema


def smooth_elevation_ema(
    elevations: Sequence[Optional[float]],
    alpha: float = 0.2,
) -> List[Optional[float]]:
    """
    Causal EMA over a raw elevation trace.

    The first real reading seeds the average. Indices before it are None;
    indices after it with no reading carry the current average forward.

    Raises:
        ValidationError: If alpha is outside (0, 1]
    """
    if not 0 < alpha <= 1:
        raise ValidationError(f"EMA alpha must be in (0, 1], got {alpha}", field="alpha")

    smoothed: List[Optional[float]] = []
    current: Optional[float] = None
    for value in elevations:
        if value is not None:
            current = value if current is None else calculate_ema(value, current, alpha)
        smoothed.append(current)
    return smoothed


def elevation_gain_loss(elevations: Sequence[Optional[float]]) -> Tuple[float, float]:
    """
    Total climb and descent of an elevation trace.

    Null entries are skipped; each step is measured from the previous
    non-null value.

    Returns:
        (gain_m, loss_m), both non-negative
    """
    gain = 0.0
    loss = 0.0
    previous: Optional[float] = None
    for value in elevations:
        if value is None:
            continue
        if previous is not None:
            delta = value - previous
            if delta > 0:
                gain += delta
            else:
                loss -= delta
        previous = value
    return gain, loss


def _running_max(values: Sequence[float]) -> List[float]:
    result: List[float] = []
    best = 0.0
    for value in values:
        best = max(best, value)
        result.append(best)
    return result


def _gps_distance(latitudes: Sequence[Optional[float]], longitudes: Sequence[Optional[float]]) -> List[float]:
    distances = [0.0]
    for i in range(1, len(latitudes)):
        step = 0.0
        coords = (latitudes[i - 1], longitudes[i - 1], latitudes[i], longitudes[i])
        if all(c is not None for c in coords):
            step = haversine_m(*coords)
        distances.append(distances[-1] + step)
    return distances


def _forward_fill(values: Sequence[Optional[float]]) -> List[float]:
    filled: List[float] = []
    last = 0.0
    for value in values:
        if value is not None:
            last = value
        filled.append(last)
    return filled


def resolve_distance(series: CanonicalSeries) -> Tuple[List[float], str]:
    """
    Pick the cumulative distance for each index.

    Returns:
        (distance_m, source) where source is "provided", "gps" or "none"
    """
    if series.is_empty:
        return [], "none"

    provided = series.provided_distance_m
    if all(d is not None for d in provided):
        return _running_max(provided), "provided"

    if series.has_gps:
        return _gps_distance(series.latitude, series.longitude), "gps"

    if any(d is not None for d in provided):
        return _running_max(_forward_fill(provided)), "provided"

    return [0.0] * len(series), "none"


def resolve_distance_and_elevation(
    series: CanonicalSeries,
    *,
    alpha: Optional[float] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> CanonicalSeries:
    """
    Fill cumulative distance and smoothed elevation on a normalized series.

    Distance uses the device-provided values when every record has one,
    haversine accumulation over GPS fixes otherwise, and forward-filled
    provided values when there are no fixes at all.

    Args:
        series: Output of normalize_series
        alpha: EMA smoothing factor (default from settings)
        settings: Analyzer settings (defaults to get_settings())

    Returns:
        New series with distance_m, distance_source and elevation_m set
    """
    settings = settings or get_settings()
    if series.is_empty:
        return series

    alpha = settings.elevation_ema_alpha if alpha is None else alpha
    distance, source = resolve_distance(series)
    logger.debug(f"Distance source: {source} ({distance[-1]:.1f} m over {len(series)} samples)")

    return series.with_values(
        distance_m=distance,
        distance_source=source,
        elevation_m=smooth_elevation_ema(series.raw_elevation_m, alpha),
    )
