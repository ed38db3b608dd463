"""
Swim set detection and pool-swim summary.

Laps are bucketed by distance to find the dominant repeat (the main set),
with a warm-up and cool-down recognized around it. The summary combines
the detected structure with pool length, SWOLF, fixed splits and stroke
rate statistics.
"""

import logging
import math
from collections import OrderedDict
from typing import List, Optional, Sequence, Union

from ..config import AnalyzerSettings, get_settings
from ..formatting import UnitSystem, format_duration, format_swim_distance, format_swim_pace
from ..models.requests import SwimContext
from ..models.swim import (
    DetectedSet,
    PoolLengthSource,
    SetLabel,
    SwimLap,
    SwimLength,
    SwimSets,
)
from ..metrics.swim import (
    SHORT_COURSE_YARDS_M,
    YARD_M,
    calculate_pace_per_100m,
    calculate_session_swolf,
    compute_fixed_splits,
    is_yard_pool,
    laps_from_lengths,
    resolve_pool_length,
    stroke_rate_stats,
)


logger = logging.getLogger(__name__)


def bucket_distance(distance_m: float, bucket_m: float = 25.0) -> float:
    """Round a distance to the nearest bucket (halves round up)."""
    return math.floor(distance_m / bucket_m + 0.5) * bucket_m


def _mean(values: Sequence[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def pace_consistency(paces: Sequence[float]):
    """
    Mean pace and mean absolute deviation from it.

    The deviation (not a standard deviation) is the reported consistency
    figure.

    Returns:
        (mean_pace, mean_absolute_deviation), both None for no paces
    """
    mean = _mean(paces)
    if mean is None:
        return None, None
    return mean, sum(abs(p - mean) for p in paces) / len(paces)


def _round(value: Optional[float], digits: int = 1) -> Optional[float]:
    return None if value is None else round(value, digits)


def _single_lap_set(label: SetLabel, lap: SwimLength) -> DetectedSet:
    return DetectedSet(
        label=label.value,
        repeat_count=1,
        unit_distance_m=lap.distance_m,
        avg_pace_per_100=_round(lap.pace_per_100_s),
        consistency_spread_s=None,
    )


def _aggregate_set(laps: Sequence[SwimLength]) -> DetectedSet:
    distance = sum(lap.distance_m for lap in laps)
    durations = [lap.duration_s for lap in laps]
    duration = None if any(d is None for d in durations) else sum(durations)
    return DetectedSet(
        label=SetLabel.AGGREGATE.value,
        repeat_count=len(laps),
        unit_distance_m=round(distance / len(laps), 1),
        avg_pace_per_100=_round(calculate_pace_per_100m(distance, duration)),
        consistency_spread_s=None,
    )


def detect_sets(
    laps: Sequence[SwimLength],
    settings: Optional[AnalyzerSettings] = None,
    unit_m: float = 1.0,
) -> List[DetectedSet]:
    """
    Detect warm-up / main set / cool-down from lap distances.

    1. Bucket active laps by distance rounded to the nearest 25 pool units
       (meters, or yards when ``unit_m`` is 0.9144; the bucket is configurable).
       The most common bucket is the main-set distance; ties go to the bucket
       seen first.
    2. Laps within max(5%, 10 pool units) of that distance are the main set,
       provided at least 3 qualify.
    3. The first lap is the warm-up if outside the tolerance; the last lap is
       the cool-down under the same condition, unless it is the warm-up lap.

    Without a main set, one aggregate set summarizes all laps.

    Args:
        laps: Laps (or lengths) in swim order; idle laps are ignored
        settings: Analyzer settings (defaults to get_settings())
        unit_m: Meters per pool unit used for bucketing

    Returns:
        Detected sets in swim order
    """
    settings = settings or get_settings()
    active = [lap for lap in laps if lap.is_active]
    if not active:
        return []

    counts: "OrderedDict[float, int]" = OrderedDict()
    for lap in active:
        key = bucket_distance(lap.distance_m / unit_m, settings.set_bucket_m) * unit_m
        counts[key] = counts.get(key, 0) + 1

    main_distance, best = None, 0
    for key, count in counts.items():
        if count > best:
            main_distance, best = key, count

    tolerance = max(
        settings.main_set_tolerance_pct * main_distance,
        settings.main_set_min_tolerance_m * unit_m,
    )

    def in_main(lap: SwimLength) -> bool:
        return abs(lap.distance_m - main_distance) <= tolerance

    main_laps = [lap for lap in active if in_main(lap)]
    if len(main_laps) < settings.main_set_min_repeats:
        logger.debug(
            f"No main set: {len(main_laps)} laps near {main_distance} m "
            f"(need {settings.main_set_min_repeats})"
        )
        return [_aggregate_set(active)]

    paces = [lap.pace_per_100_s for lap in main_laps if lap.pace_per_100_s is not None]
    avg_pace, spread = pace_consistency(paces)
    main_set = DetectedSet(
        label=SetLabel.MAIN.value,
        repeat_count=len(main_laps),
        unit_distance_m=main_distance,
        avg_pace_per_100=_round(avg_pace),
        consistency_spread_s=_round(spread),
    )

    detected: List[DetectedSet] = []
    if not in_main(active[0]):
        detected.append(_single_lap_set(SetLabel.WARM_UP, active[0]))
    detected.append(main_set)
    if len(active) > 1 and not in_main(active[-1]):
        detected.append(_single_lap_set(SetLabel.COOL_DOWN, active[-1]))
    return detected


def _set_line(detected: DetectedSet, yard_pool: bool) -> str:
    distance = format_swim_distance(detected.unit_distance_m, yard_pool)
    pace = format_swim_pace(detected.avg_pace_per_100, yard_pool)
    if detected.label == SetLabel.MAIN.value:
        line = f"Main set: {detected.repeat_count} x {distance} @ {pace}"
        if detected.consistency_spread_s is not None:
            line += f" (±{detected.consistency_spread_s:.1f} s)"
        return line
    if detected.label == SetLabel.WARM_UP.value:
        return f"Warm-up: {distance} @ {pace}"
    if detected.label == SetLabel.COOL_DOWN.value:
        return f"Cool-down: {distance} @ {pace}"
    return f"{detected.repeat_count} laps, avg {distance} @ {pace}"


def _sum_durations(items: Sequence[SwimLength]) -> Optional[float]:
    durations = [item.duration_s for item in items if item.is_active]
    if not durations or any(d is None for d in durations):
        return None
    return sum(durations)


def _sum_strokes(items: Sequence[SwimLength]) -> Optional[int]:
    strokes = [item.stroke_count for item in items if item.is_active and item.stroke_count is not None]
    return sum(strokes) if strokes else None


def _sum_length_counts(laps: Sequence[SwimLap]) -> Optional[int]:
    """Total lengths across laps, or None unless every lap reports its count."""
    counts = [lap.length_count for lap in laps]
    if not counts or any(not c for c in counts):
        return None
    return sum(counts)


def analyze_swim(
    lengths: Sequence[SwimLength],
    laps: Optional[Sequence[SwimLap]] = None,
    context: Optional[SwimContext] = None,
    unit_system: Union[UnitSystem, str] = UnitSystem.METRIC,
    settings: Optional[AnalyzerSettings] = None,
) -> SwimSets:
    """
    Analyze a pool swim from its lengths and/or laps.

    Laps default to lengths grouped between rests; a continuous swim that
    groups into too few laps for a main set is read length by length. When
    only laps exist, their reported length counts stand in for the length
    total, and SWOLF stays None without one. When no pool-length source is
    available, the default pool is 25 yd for imperial users and the
    configured default (25 m) otherwise.

    Args:
        lengths: Per-length records (may be empty when only laps exist)
        laps: Per-lap records (derived from lengths when omitted)
        context: Pool-length sources and split distance
        unit_system: Caller's unit preference
        settings: Analyzer settings (defaults to get_settings())

    Returns:
        SwimSets summary
    """
    settings = settings or get_settings()
    context = context or SwimContext()
    lengths = list(lengths or ())
    derived_laps = not laps
    laps = list(laps) if laps else laps_from_lengths(lengths)
    active_lengths = [length for length in lengths if length.is_active]
    active_laps = [lap for lap in laps if lap.is_active]

    # Totals come from lengths when present, else from laps
    totals_source: Sequence[SwimLength] = active_lengths or active_laps
    total_distance = context.total_distance_m or sum(item.distance_m for item in totals_source)
    total_duration = _sum_durations(totals_source)
    total_strokes = _sum_strokes(totals_source)

    imperial = UnitSystem(unit_system) == UnitSystem.IMPERIAL
    default_pool = SHORT_COURSE_YARDS_M if imperial else settings.default_pool_length_m
    length_count = context.length_count or len(active_lengths) or _sum_length_counts(active_laps)
    pool = resolve_pool_length(
        override_m=context.pool_length_override_m,
        plan_pool_length_m=context.plan_pool_length_m,
        preferred_pool_length_m=context.preferred_pool_length_m,
        total_distance_m=total_distance,
        length_count=length_count,
        default_m=default_pool,
    )
    yard_pool = is_yard_pool(pool.length_m)

    # Lengths swum without a rest group into a single lap
    set_source: Sequence[SwimLength] = laps
    if derived_laps and len(active_laps) < settings.main_set_min_repeats:
        set_source = active_lengths
    detected = detect_sets(set_source, settings, YARD_M if yard_pool else 1.0)
    swolf = calculate_session_swolf(total_duration, total_strokes, length_count)
    avg_pace = calculate_pace_per_100m(total_distance, total_duration)

    lines = [
        f"Pool: {format_swim_distance(pool.length_m, yard_pool)} ({pool.source.value})",
    ]
    lines.extend(_set_line(d, yard_pool) for d in detected)
    if total_distance:
        lines.append(
            f"Total: {format_swim_distance(total_distance, yard_pool)} in "
            f"{format_duration(total_duration)} @ {format_swim_pace(avg_pace, yard_pool)}"
        )
    if swolf is not None:
        lines.append(f"SWOLF: {swolf}")

    if pool.source == PoolLengthSource.DEFAULT:
        logger.debug(f"No pool length source; using default {pool.length_m} m")

    return SwimSets(
        summary_lines=lines,
        detected_sets=detected,
        splits=compute_fixed_splits(lengths, pool.length_m, context.split_distance),
        swolf=swolf,
        pool_length_m=pool.length_m,
        pool_length_source=pool.source,
        yard_pool=yard_pool,
        stroke_rate=stroke_rate_stats(lengths or laps),
        total_distance_m=total_distance,
        total_duration_s=total_duration,
        avg_pace_per_100=_round(avg_pace),
    )
