"""
Series normalization: raw GPS points and sensor samples to a CanonicalSeries.

Malformed fields degrade to None; records without a usable timestamp are
dropped because ``time_s`` cannot be null. Nothing here raises on partial
data. Distance and elevation are left for the resolver stage: provided
distances are carried in ``provided_distance_m`` and raw elevations in
``raw_elevation_m``.
"""

import bisect
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import AnalyzerSettings, get_settings
from ..exceptions import ValidationError
from ..models.series import CanonicalSeries
from .fields import normalize_elevation_unit, normalize_timestamp, resolve_field


logger = logging.getLogger(__name__)

# Sensor fields joined onto the point timeline
JOINED_FIELDS = ("heart_rate", "power", "cadence")


@dataclass
class _Record:
    """One resolved record, before it becomes a series index."""

    timestamp: float
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation: Optional[float] = None
    distance: Optional[float] = None
    speed: Optional[float] = None
    heart_rate: Optional[float] = None
    power: Optional[float] = None
    cadence: Optional[float] = None


def _resolve_position(record: Mapping[str, Any]):
    lat = resolve_field(record, "latitude")
    lon = resolve_field(record, "longitude")
    # A half fix is unusable, and (0, 0) is the null-island placeholder
    if lat is None or lon is None or (lat == 0 and lon == 0):
        return None, None
    return lat, lon


def _resolve_record(record: Mapping[str, Any], elevation_unit: str) -> Optional[_Record]:
    if not isinstance(record, Mapping):
        return None
    timestamp = normalize_timestamp(resolve_field(record, "timestamp"))
    if timestamp is None:
        return None

    lat, lon = _resolve_position(record)
    return _Record(
        timestamp=timestamp,
        latitude=lat,
        longitude=lon,
        elevation=resolve_field(record, "elevation", elevation_unit),
        distance=resolve_field(record, "distance"),
        speed=resolve_field(record, "speed"),
        heart_rate=resolve_field(record, "heart_rate"),
        power=resolve_field(record, "power"),
        cadence=resolve_field(record, "cadence"),
    )


def _resolve_all(records: Iterable[Mapping[str, Any]], elevation_unit: str, kind: str) -> List[_Record]:
    resolved: List[_Record] = []
    dropped = 0
    for record in records or ():
        item = _resolve_record(record, elevation_unit)
        if item is None:
            dropped += 1
            continue
        resolved.append(item)

    if dropped:
        logger.debug(f"Dropped {dropped} {kind} without a usable timestamp")
    if dropped and not resolved:
        logger.warning(f"All {dropped} {kind} lacked a usable timestamp")

    # sorted() is stable: equal timestamps keep their input order
    return sorted(resolved, key=lambda r: r.timestamp)


class _FieldIndex:
    """Sorted timestamps of the samples that carry one sensor field."""

    def __init__(self, samples: Sequence[_Record], field: str) -> None:
        pairs = [(s.timestamp, getattr(s, field)) for s in samples if getattr(s, field) is not None]
        self.times = [t for t, _ in pairs]
        self.values = [v for _, v in pairs]

    def nearest(self, timestamp: float, tolerance_s: float) -> Optional[float]:
        """Value of the sample nearest ``timestamp`` within tolerance (earlier wins ties)."""
        if not self.times:
            return None
        pos = bisect.bisect_left(self.times, timestamp)
        best: Optional[int] = None
        best_gap = float("inf")
        for candidate in (pos - 1, pos):
            if 0 <= candidate < len(self.times):
                gap = abs(self.times[candidate] - timestamp)
                if gap < best_gap:
                    best, best_gap = candidate, gap
        if best is None or best_gap > tolerance_s:
            return None
        return self.values[best]


def join_sensor_samples(
    points: List[_Record],
    samples: Sequence[_Record],
    tolerance_s: float,
) -> int:
    """
    Fill missing heart rate, power and cadence on points from nearby samples.

    Each field is joined independently: a point takes the value from the
    nearest sample (by timestamp) that has that field, if it lies within
    ``tolerance_s``. Values embedded in a point are never overwritten.

    Returns:
        Number of field values filled from samples
    """
    filled = 0
    for field in JOINED_FIELDS:
        index = _FieldIndex(samples, field)
        if not index.times:
            continue
        for point in points:
            if getattr(point, field) is not None:
                continue
            value = index.nearest(point.timestamp, tolerance_s)
            if value is not None:
                setattr(point, field, value)
                filled += 1
    return filled


def normalize_series(
    points: Optional[Sequence[Mapping[str, Any]]],
    samples: Optional[Sequence[Mapping[str, Any]]] = None,
    *,
    elevation_unit: str = "m",
    join_tolerance_s: Optional[float] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> CanonicalSeries:
    """
    Merge raw points and sensor samples into one canonical series.

    Args:
        points: Raw GPS/track records (any supported field naming)
        samples: Raw sensor records (heart rate, power, cadence)
        elevation_unit: Unit of bare "elevation"/"altitude" keys ("m" or "ft")
        join_tolerance_s: Max timestamp gap for a sensor join (default from settings)
        settings: Analyzer settings (defaults to get_settings())

    Returns:
        CanonicalSeries with time_s relative to the first record, raw
        elevation and provided distance carried for the resolver, and
        zero distance until resolved

    Raises:
        ValidationError: If elevation_unit or join_tolerance_s is invalid
    """
    settings = settings or get_settings()
    unit = normalize_elevation_unit(elevation_unit)
    if unit is None:
        raise ValidationError(f"Unsupported elevation unit: {elevation_unit!r}", field="elevation_unit")

    tolerance = settings.sensor_join_tolerance_s if join_tolerance_s is None else join_tolerance_s
    if tolerance < 0:
        raise ValidationError("join_tolerance_s must be non-negative", field="join_tolerance_s")

    resolved_points = _resolve_all(points, unit, "points")
    resolved_samples = _resolve_all(samples, unit, "samples")

    if resolved_points:
        timeline = resolved_points
        filled = join_sensor_samples(timeline, resolved_samples, tolerance)
        logger.debug(f"Joined {filled} sensor values onto {len(timeline)} points")
    else:
        # Indoor/trainer activities: the sensor stream is the timeline
        timeline = resolved_samples

    if not timeline:
        return CanonicalSeries.empty()

    start = timeline[0].timestamp
    columns: Dict[str, List[Any]] = {
        "time_s": [r.timestamp - start for r in timeline],
        "latitude": [r.latitude for r in timeline],
        "longitude": [r.longitude for r in timeline],
        "raw_elevation_m": [r.elevation for r in timeline],
        "provided_distance_m": [r.distance for r in timeline],
        "speed_mps": [r.speed for r in timeline],
        "hr_bpm": [r.heart_rate for r in timeline],
        "power_w": [r.power for r in timeline],
        "cadence": [r.cadence for r in timeline],
    }
    return CanonicalSeries(**columns)
