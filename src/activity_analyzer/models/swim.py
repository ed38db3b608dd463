"""Pool swim data models: lengths, laps, detected sets and splits."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..series.fields import resolve_field, resolve_text


class SetLabel(str, Enum):
    """Structural role of a detected set."""
    WARM_UP = "warm-up"
    MAIN = "main"
    COOL_DOWN = "cool-down"
    AGGREGATE = "aggregate"


class PoolLengthSource(str, Enum):
    """Where a resolved pool length came from, in priority order."""
    OVERRIDE = "override"
    PLAN = "plan"
    PREFERENCE = "preference"
    INFERRED = "inferred"
    DEFAULT = "default"


@dataclass(frozen=True)
class SwimLength:
    """One pool length (or, via SwimLap, one lap) as recorded by the device."""

    distance_m: float
    duration_s: Optional[float]
    stroke_count: Optional[int] = None
    avg_heart_rate: Optional[float] = None
    stroke_type: Optional[str] = None

    @property
    def is_active(self) -> bool:
        """Idle/rest lengths carry no distance."""
        return self.distance_m > 0

    @property
    def pace_per_100_s(self) -> Optional[float]:
        """Seconds per 100 distance units (meters)."""
        if not self.is_active or not self.duration_s or self.duration_s <= 0:
            return None
        return self.duration_s / self.distance_m * 100

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "SwimLength":
        """
        Build from a raw provider record, resolving field-name variants.

        Missing or malformed distance degrades to 0 (idle length); missing
        duration, strokes and heart rate degrade to None.
        """
        distance = resolve_field(record, "swim_distance")
        duration = resolve_field(record, "swim_duration")
        strokes = resolve_field(record, "strokes")
        return cls(
            distance_m=max(0.0, distance) if distance is not None else 0.0,
            duration_s=duration if duration is not None and duration >= 0 else None,
            stroke_count=int(round(strokes)) if strokes is not None and strokes >= 0 else None,
            avg_heart_rate=resolve_field(record, "avg_heart_rate"),
            stroke_type=resolve_text(record, "stroke_type"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "stroke_count": self.stroke_count,
            "avg_heart_rate": self.avg_heart_rate,
            "stroke_type": self.stroke_type,
        }


@dataclass(frozen=True)
class SwimLap(SwimLength):
    """A lap/interval: one or more consecutive lengths swum without rest."""

    length_count: Optional[int] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "SwimLap":
        """Build from a raw lap record; the length count is None when absent."""
        length = SwimLength.from_record(record)
        count = resolve_field(record, "length_count")
        return cls(
            distance_m=length.distance_m,
            duration_s=length.duration_s,
            stroke_count=length.stroke_count,
            avg_heart_rate=length.avg_heart_rate,
            stroke_type=length.stroke_type,
            length_count=int(round(count)) if count else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["length_count"] = self.length_count
        return data


@dataclass(frozen=True)
class DetectedSet:
    """A contiguous run of near-equal-distance laps with a structural role."""

    label: str
    repeat_count: int
    unit_distance_m: float
    avg_pace_per_100: Optional[float]
    consistency_spread_s: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "repeat_count": self.repeat_count,
            "unit_distance_m": self.unit_distance_m,
            "avg_pace_per_100": self.avg_pace_per_100,
            "consistency_spread_s": self.consistency_spread_s,
        }


@dataclass(frozen=True)
class SwimSplit:
    """A fixed-distance split (e.g. every 100 m or 100 yd)."""

    index: int
    distance_m: float
    duration_s: Optional[float]
    pace_per_100_s: Optional[float]
    stroke_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "pace_per_100_s": self.pace_per_100_s,
            "stroke_count": self.stroke_count,
        }


@dataclass(frozen=True)
class PoolLengthResolution:
    """Resolved pool length and the source that supplied it."""

    length_m: float
    source: PoolLengthSource

    def to_dict(self) -> Dict[str, Any]:
        return {"length_m": self.length_m, "source": self.source.value}


@dataclass(frozen=True)
class StrokeRateStats:
    """Strokes-per-minute statistics across lengths with stroke data."""

    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    with_values: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avg": self.avg,
            "min": self.min,
            "max": self.max,
            "with_values": self.with_values,
        }


@dataclass(frozen=True)
class SwimSets:
    """Complete output of the swim set detector for one activity."""

    summary_lines: List[str] = field(default_factory=list)
    detected_sets: List[DetectedSet] = field(default_factory=list)
    splits: List[SwimSplit] = field(default_factory=list)
    swolf: Optional[int] = None
    pool_length_m: float = 25.0
    pool_length_source: PoolLengthSource = PoolLengthSource.DEFAULT
    yard_pool: bool = False
    stroke_rate: StrokeRateStats = field(default_factory=StrokeRateStats)
    total_distance_m: float = 0.0
    total_duration_s: Optional[float] = None
    avg_pace_per_100: Optional[float] = None

    @property
    def main_set(self) -> Optional[DetectedSet]:
        for detected in self.detected_sets:
            if detected.label == SetLabel.MAIN.value:
                return detected
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "summary_lines": list(self.summary_lines),
            "detected_sets": [s.to_dict() for s in self.detected_sets],
            "splits": [s.to_dict() for s in self.splits],
            "swolf": self.swolf,
            "pool_length_m": self.pool_length_m,
            "pool_length_source": self.pool_length_source.value,
            "yard_pool": self.yard_pool,
            "stroke_rate": self.stroke_rate.to_dict(),
            "total_distance_m": self.total_distance_m,
            "total_duration_s": self.total_duration_s,
            "avg_pace_per_100": self.avg_pace_per_100,
        }
