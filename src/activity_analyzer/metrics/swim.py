"""Pool swimming metrics (SWOLF, stroke rate, pace, pool length, splits)."""

import logging
from typing import List, Optional, Sequence

from ..models.swim import (
    PoolLengthResolution,
    PoolLengthSource,
    StrokeRateStats,
    SwimLap,
    SwimLength,
    SwimSplit,
)


logger = logging.getLogger(__name__)

YARD_M = 0.9144
SHORT_COURSE_YARDS_M = 25 * YARD_M  # 22.86

# Standard pool lengths in meters, for snapping inferred lengths
STANDARD_POOL_LENGTHS_M = (50.0, 33.33, 25.0, 22.86, 20.0)
POOL_SNAP_TOLERANCE = 0.05
YARD_POOL_TOLERANCE_M = 0.6


def calculate_session_swolf(
    total_duration_s: Optional[float],
    total_strokes: Optional[float],
    length_count: Optional[int],
) -> Optional[int]:
    """
    Session SWOLF from totals.

    SWOLF = duration / lengths + strokes / lengths, rounded to an integer.
    Lower is better. Example: 20 lengths, 600 s, 400 strokes -> 30 + 20 = 50.

    Typical scores in a 25 m pool:
    - Elite swimmers: 35-45
    - Competitive: 45-55
    - Recreational: 55-70

    Returns None when the duration or the stroke total is unknown, or the
    length count is not positive.
    """
    if not length_count or length_count <= 0:
        return None
    if total_duration_s is None or total_strokes is None:
        return None
    return int(round(total_duration_s / length_count + total_strokes / length_count))


def calculate_stroke_rate(strokes: float, duration_sec: float) -> Optional[float]:
    """
    Calculate stroke rate in strokes per minute.

    Typical stroke rates:
    - Distance freestyle: 50-60 strokes/min
    - Middle distance: 60-70 strokes/min
    - Sprint: 70-90 strokes/min

    Args:
        strokes: Total number of strokes
        duration_sec: Duration in seconds

    Returns:
        Stroke rate in strokes per minute, None without a positive duration
    """
    if duration_sec is None or duration_sec <= 0:
        return None
    if strokes < 0:
        raise ValueError("Strokes must be non-negative")

    return round((strokes / duration_sec) * 60, 1)


def calculate_pace_per_100m(distance_m: float, duration_sec: Optional[float]) -> Optional[float]:
    """
    Calculate swim pace in seconds per 100m.

    Typical swim paces:
    - Elite: 55-65 sec/100m
    - Competitive: 75-90 sec/100m
    - Recreational: 100-120 sec/100m
    - Beginner: 130-180 sec/100m

    Args:
        distance_m: Distance swum in meters
        duration_sec: Duration in seconds

    Returns:
        Pace in seconds per 100m, None for no distance or unknown duration
    """
    if distance_m is None or distance_m <= 0 or duration_sec is None or duration_sec <= 0:
        return None
    return duration_sec / distance_m * 100


def snap_pool_length(length_m: Optional[float]) -> Optional[float]:
    """
    Snap a measured/inferred pool length to the nearest standard pool.

    The closest standard length (by relative error) is used when within 5%;
    otherwise the raw length is kept.
    """
    if length_m is None or length_m <= 0:
        return None
    best, best_error = length_m, float("inf")
    for candidate in STANDARD_POOL_LENGTHS_M:
        error = abs(candidate - length_m) / candidate
        if error < best_error:
            best, best_error = candidate, error
    return best if best_error <= POOL_SNAP_TOLERANCE else length_m


def is_yard_pool(pool_length_m: Optional[float]) -> bool:
    """True for a 25-yard pool (22.86 m, within 0.6 m)."""
    if pool_length_m is None:
        return False
    return abs(pool_length_m - SHORT_COURSE_YARDS_M) <= YARD_POOL_TOLERANCE_M


def resolve_pool_length(
    override_m: Optional[float] = None,
    plan_pool_length_m: Optional[float] = None,
    preferred_pool_length_m: Optional[float] = None,
    total_distance_m: Optional[float] = None,
    length_count: Optional[int] = None,
    default_m: float = 25.0,
) -> PoolLengthResolution:
    """
    Resolve the pool length in strict priority order.

    1. Explicit per-activity override
    2. Target pool length of the training plan
    3. Stored user preference
    4. Inferred as total distance / length count (snapped to a standard pool)
    5. Default

    The first source with a positive value wins; later sources are not
    consulted.
    """
    for value, source in (
        (override_m, PoolLengthSource.OVERRIDE),
        (plan_pool_length_m, PoolLengthSource.PLAN),
        (preferred_pool_length_m, PoolLengthSource.PREFERENCE),
    ):
        if value is not None and value > 0:
            return PoolLengthResolution(length_m=float(value), source=source)

    if total_distance_m and total_distance_m > 0 and length_count and length_count > 0:
        inferred = snap_pool_length(total_distance_m / length_count)
        return PoolLengthResolution(length_m=inferred, source=PoolLengthSource.INFERRED)

    return PoolLengthResolution(length_m=float(default_m), source=PoolLengthSource.DEFAULT)


def laps_from_lengths(lengths: Sequence[SwimLength]) -> List[SwimLap]:
    """
    Group consecutive active lengths into laps.

    An idle length (zero distance, i.e. rest at the wall) ends the current
    lap. Stroke counts sum when any length in the lap has one; heart rate is
    the duration-weighted mean of lengths that report it.
    """
    laps: List[SwimLap] = []
    current: List[SwimLength] = []

    def flush() -> None:
        if current:
            laps.append(_merge_lengths(current))
            current.clear()

    for length in lengths:
        if length.is_active:
            current.append(length)
        else:
            flush()
    flush()
    return laps


def _merge_lengths(lengths: Sequence[SwimLength]) -> SwimLap:
    durations = [length.duration_s for length in lengths]
    duration = None if any(d is None for d in durations) else sum(durations)
    strokes = [length.stroke_count for length in lengths if length.stroke_count is not None]

    weighted = [(length.avg_heart_rate, length.duration_s or 0) for length in lengths if length.avg_heart_rate is not None]
    weight = sum(w for _, w in weighted)
    if weighted and weight > 0:
        heart_rate = sum(hr * w for hr, w in weighted) / weight
    elif weighted:
        heart_rate = sum(hr for hr, _ in weighted) / len(weighted)
    else:
        heart_rate = None

    stroke_types = {length.stroke_type for length in lengths if length.stroke_type}
    return SwimLap(
        distance_m=sum(length.distance_m for length in lengths),
        duration_s=duration,
        stroke_count=sum(strokes) if strokes else None,
        avg_heart_rate=heart_rate,
        stroke_type=stroke_types.pop() if len(stroke_types) == 1 else None,
        length_count=len(lengths),
    )


def compute_fixed_splits(
    lengths: Sequence[SwimLength],
    pool_length_m: float,
    split_distance: float = 100,
) -> List[SwimSplit]:
    """
    Group consecutive active lengths into fixed-distance splits.

    The split distance is in the pool's unit: 100 yd (91.44 m) in a yard
    pool, 100 m otherwise. Lengths are accumulated until the target is
    reached; a trailing partial split is dropped. Idle lengths are skipped.
    """
    unit_m = YARD_M if is_yard_pool(pool_length_m) else 1.0
    # Half a centimeter of slack absorbs float error in yard conversions
    target_m = split_distance * unit_m - 0.005

    splits: List[SwimSplit] = []
    distance = 0.0
    duration: Optional[float] = 0.0
    strokes: Optional[int] = None
    for length in lengths:
        if not length.is_active:
            continue
        distance += length.distance_m
        if duration is not None:
            duration = None if length.duration_s is None else duration + length.duration_s
        if length.stroke_count is not None:
            strokes = (strokes or 0) + length.stroke_count

        if distance >= target_m:
            splits.append(
                SwimSplit(
                    index=len(splits) + 1,
                    distance_m=distance,
                    duration_s=duration,
                    pace_per_100_s=calculate_pace_per_100m(distance, duration),
                    stroke_count=strokes,
                )
            )
            distance, duration, strokes = 0.0, 0.0, None

    return splits


def stroke_rate_stats(lengths: Sequence[SwimLength]) -> StrokeRateStats:
    """
    Strokes-per-minute statistics over lengths with stroke and duration data.

    Values are rounded to one decimal.
    """
    rates = [
        calculate_stroke_rate(length.stroke_count, length.duration_s)
        for length in lengths
        if length.is_active and length.stroke_count is not None and length.duration_s
    ]
    rates = [r for r in rates if r is not None]
    if not rates:
        return StrokeRateStats()
    return StrokeRateStats(
        avg=round(sum(rates) / len(rates), 1),
        min=round(min(rates), 1),
        max=round(max(rates), 1),
        with_values=len(rates),
    )
