"""
Ordered field-candidate tables for raw telemetry records.

Providers name the same quantity differently (``heartRate`` vs ``hr`` vs
``heart_rate``) and in different units (elevation in feet, speed in km/h,
positions in semicircles). Each logical field maps to an ordered tuple of
candidates; the first candidate present on a record with a usable value
wins, and its value is converted to SI at this boundary.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple


FEET_TO_M = 0.3048
SEMICIRCLE_TO_DEG = 180.0 / 2 ** 31
MILLISECOND_THRESHOLD = 1e12

# Caller-selected unit: used for bare "elevation"/"altitude" keys
ELEVATION_DEFAULT = "elevation_default"

UNIT_CONVERSIONS: Dict[str, Callable[[float], float]] = {
    "si": lambda v: v,
    "m": lambda v: v,
    "ft": lambda v: v * FEET_TO_M,
    "km": lambda v: v * 1000.0,
    "kmh": lambda v: v / 3.6,
    "semicircles": lambda v: v * SEMICIRCLE_TO_DEG,
}

ELEVATION_UNIT_ALIASES = {
    "m": "m",
    "meter": "m",
    "meters": "m",
    "metre": "m",
    "metres": "m",
    "ft": "ft",
    "foot": "ft",
    "feet": "ft",
}


@dataclass(frozen=True)
class FieldCandidate:
    """A record key that may carry a logical field, and the unit it is in."""

    key: str
    unit: str = "si"


FIELD_CANDIDATES: Dict[str, Tuple[FieldCandidate, ...]] = {
    "timestamp": (
        FieldCandidate("timestamp"),
        FieldCandidate("startTimeInSeconds"),
        FieldCandidate("ts"),
        FieldCandidate("t"),
        FieldCandidate("time_s"),
        FieldCandidate("time"),
        FieldCandidate("timerDurationInSeconds"),
        FieldCandidate("clockDurationInSeconds"),
        FieldCandidate("offsetInSeconds"),
    ),
    "latitude": (
        FieldCandidate("latitude"),
        FieldCandidate("lat"),
        FieldCandidate("latitudeInDegree"),
        FieldCandidate("position.lat"),
        FieldCandidate("position_lat", "semicircles"),
    ),
    "longitude": (
        FieldCandidate("longitude"),
        FieldCandidate("lng"),
        FieldCandidate("lon"),
        FieldCandidate("longitudeInDegree"),
        FieldCandidate("position.lng"),
        FieldCandidate("position.lon"),
        FieldCandidate("position_long", "semicircles"),
    ),
    "elevation": (
        FieldCandidate("elevation_m"),
        FieldCandidate("elevationInMeters"),
        FieldCandidate("altitudeInMeters"),
        FieldCandidate("enhanced_altitude"),
        FieldCandidate("elevation_ft", "ft"),
        FieldCandidate("altitude_ft", "ft"),
        FieldCandidate("elevation", ELEVATION_DEFAULT),
        FieldCandidate("altitude", ELEVATION_DEFAULT),
        FieldCandidate("ele", ELEVATION_DEFAULT),
    ),
    "distance": (
        FieldCandidate("distance_m"),
        FieldCandidate("totalDistanceInMeters"),
        FieldCandidate("cumulativeDistanceInMeters"),
        FieldCandidate("distanceInMeters"),
        FieldCandidate("distance_km", "km"),
        FieldCandidate("distance"),
    ),
    "speed": (
        FieldCandidate("speed_mps"),
        FieldCandidate("speedMetersPerSecond"),
        FieldCandidate("speedInMetersPerSecond"),
        FieldCandidate("enhancedSpeedInMetersPerSecond"),
        FieldCandidate("instantaneousSpeedInMetersPerSecond"),
        FieldCandidate("currentSpeedInMetersPerSecond"),
        FieldCandidate("enhanced_speed"),
        FieldCandidate("speed"),
        FieldCandidate("speed_kmh", "kmh"),
    ),
    "heart_rate": (
        FieldCandidate("heart_rate"),
        FieldCandidate("heartRate"),
        FieldCandidate("hr"),
        FieldCandidate("hr_bpm"),
        FieldCandidate("heartRateInBeatsPerMinute"),
        FieldCandidate("bpm"),
    ),
    "power": (
        FieldCandidate("power_w"),
        FieldCandidate("power"),
        FieldCandidate("powerInWatts"),
        FieldCandidate("watts"),
    ),
    "cadence": (
        FieldCandidate("cadence"),
        FieldCandidate("runCadence"),
        FieldCandidate("cad"),
        FieldCandidate("bikeCadenceInRPM"),
        FieldCandidate("bikeCadence"),
        FieldCandidate("swimCadenceInStrokesPerMinute"),
        FieldCandidate("directWheelchairCadence"),
    ),
    # Swim length / lap records
    "swim_distance": (
        FieldCandidate("distance_m"),
        FieldCandidate("distanceInMeters"),
        FieldCandidate("totalDistanceInMeters"),
        FieldCandidate("distance"),
    ),
    "swim_duration": (
        FieldCandidate("duration_s"),
        FieldCandidate("durationInSeconds"),
        FieldCandidate("timerDurationInSeconds"),
        FieldCandidate("movingDurationInSeconds"),
        FieldCandidate("elapsed_time"),
        FieldCandidate("duration"),
    ),
    "strokes": (
        FieldCandidate("stroke_count"),
        FieldCandidate("strokes"),
        FieldCandidate("totalStrokes"),
        FieldCandidate("total_strokes"),
    ),
    "length_count": (
        FieldCandidate("length_count"),
        FieldCandidate("numberOfLengths"),
        FieldCandidate("numberOfActiveLengths"),
        FieldCandidate("num_lengths"),
        FieldCandidate("lengths"),
    ),
    "avg_heart_rate": (
        FieldCandidate("avg_heart_rate"),
        FieldCandidate("averageHeartRate"),
        FieldCandidate("averageHeartRateInBeatsPerMinute"),
        FieldCandidate("avg_hr"),
        FieldCandidate("heart_rate"),
        FieldCandidate("heartRate"),
    ),
}

TEXT_CANDIDATES: Dict[str, Tuple[str, ...]] = {
    "stroke_type": ("stroke_type", "strokeType", "swimStroke"),
}


def _in_range(low: float, high: float) -> Callable[[float], bool]:
    return lambda v: low <= v <= high


# Values failing these checks resolve to None rather than a guessed number
PLAUSIBLE: Dict[str, Callable[[float], bool]] = {
    "timestamp": lambda v: v >= 0,
    "latitude": _in_range(-90.0, 90.0),
    "longitude": _in_range(-180.0, 180.0),
    "elevation": _in_range(-500.0, 9000.0),
    "distance": lambda v: v >= 0,
    "speed": lambda v: v >= 0,
    "heart_rate": _in_range(1.0, 260.0),
    "avg_heart_rate": _in_range(1.0, 260.0),
    "power": _in_range(0.0, 3000.0),
    "cadence": _in_range(0.0, 300.0),
    "swim_distance": lambda v: v >= 0,
    "swim_duration": lambda v: v >= 0,
    "strokes": lambda v: v >= 0,
    "length_count": lambda v: v >= 0,
}


def to_float(value: Any) -> Optional[float]:
    """Coerce a raw value to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def normalize_timestamp(value: Any) -> Optional[float]:
    """
    Convert a raw timestamp to seconds.

    Values above 1e12 are millisecond epochs (1e12 ms is September 2001;
    1e12 s is far beyond any real date), so they are divided by 1000.
    """
    number = to_float(value)
    if number is None or number < 0:
        return None
    if number > MILLISECOND_THRESHOLD:
        return number / 1000.0
    return number


def normalize_elevation_unit(unit: Optional[str]) -> Optional[str]:
    """Map unit spellings to "m"/"ft"; unknown spellings return None."""
    if unit is None:
        return "m"
    return ELEVATION_UNIT_ALIASES.get(str(unit).strip().lower())


def _lookup(record: Mapping[str, Any], key: str) -> Any:
    if "." not in key:
        return record.get(key)
    current: Any = record
    for part in key.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def resolve_field(
    record: Mapping[str, Any],
    field: str,
    default_elevation_unit: str = "m",
) -> Optional[float]:
    """
    Resolve a logical field from a raw record.

    Walks the candidate list for ``field`` in order; the first candidate with
    a finite numeric value is converted to SI and checked for plausibility.
    A present but implausible value yields None (it is not skipped in favor
    of a later candidate).

    Args:
        record: Raw point, sample, or swim record
        field: Logical field name (key of FIELD_CANDIDATES)
        default_elevation_unit: Unit for bare "elevation"/"altitude" keys
            ("m" or "ft"); an unrecognized unit makes those keys resolve to None

    Returns:
        The SI value, or None
    """
    if not isinstance(record, Mapping):
        return None

    for candidate in FIELD_CANDIDATES[field]:
        value = to_float(_lookup(record, candidate.key))
        if value is None:
            continue

        unit = candidate.unit
        if unit == ELEVATION_DEFAULT:
            record_unit = record.get("elevation_unit", record.get("elevationUnit"))
            unit = normalize_elevation_unit(record_unit or default_elevation_unit)
            if unit is None:
                return None

        value = UNIT_CONVERSIONS[unit](value)
        check = PLAUSIBLE.get(field)
        if check is not None and not check(value):
            return None
        return value

    return None


def resolve_text(record: Mapping[str, Any], field: str) -> Optional[str]:
    """Resolve a free-text field (first non-empty string candidate)."""
    if not isinstance(record, Mapping):
        return None
    for key in TEXT_CANDIDATES[field]:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
