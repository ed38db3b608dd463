"""Canonical time-series model shared by every analysis stage."""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional, Sequence

from ..exceptions import ErrorCode, SeriesValidationError


# Lists that must share the length of ``time_s``
SERIES_FIELDS = (
    "time_s",
    "distance_m",
    "elevation_m",
    "pace_s_per_km",
    "hr_bpm",
    "power_w",
    "cadence",
    "latitude",
    "longitude",
    "raw_elevation_m",
    "provided_distance_m",
    "speed_mps",
    "vam_m_per_h",
)


def _none_list(length: int) -> List[Optional[float]]:
    return [None] * length


@dataclass(frozen=True)
class CanonicalSeries:
    """
    Uniformly indexed activity series in SI units.

    All lists are index-aligned: entry ``i`` of every list describes the
    same sample. ``time_s`` and ``distance_m`` are non-decreasing; every
    other list is nullable per sample. Optional lists left empty at
    construction are filled with ``None`` to the series length.

    Stages never mutate a series; they return a new one via ``with_values``.
    """

    time_s: List[float] = field(default_factory=list)
    distance_m: List[float] = field(default_factory=list)
    elevation_m: List[Optional[float]] = field(default_factory=list)
    pace_s_per_km: List[Optional[float]] = field(default_factory=list)
    hr_bpm: List[Optional[float]] = field(default_factory=list)
    power_w: List[Optional[float]] = field(default_factory=list)
    cadence: List[Optional[float]] = field(default_factory=list)
    latitude: List[Optional[float]] = field(default_factory=list)
    longitude: List[Optional[float]] = field(default_factory=list)
    raw_elevation_m: List[Optional[float]] = field(default_factory=list)
    provided_distance_m: List[Optional[float]] = field(default_factory=list)
    speed_mps: List[Optional[float]] = field(default_factory=list)
    vam_m_per_h: List[Optional[float]] = field(default_factory=list)
    # "provided" (device cumulative distance), "gps" (haversine) or "none"
    distance_source: str = "none"

    def __post_init__(self):
        """Pad optional lists and validate structure."""
        length = len(self.time_s)
        if not self.distance_m and length:
            object.__setattr__(self, "distance_m", [0.0] * length)
        for name in SERIES_FIELDS[2:]:
            if not getattr(self, name) and length:
                object.__setattr__(self, name, _none_list(length))
        self.validate()

    def validate(self) -> None:
        """
        Check the structural invariants of the series.

        Raises:
            SeriesValidationError: If list lengths differ, or time or distance
                decrease anywhere.
        """
        length = len(self.time_s)
        lengths = {name: len(getattr(self, name)) for name in SERIES_FIELDS}
        mismatched = {name: n for name, n in lengths.items() if n != length}
        if mismatched:
            raise SeriesValidationError(
                f"Series lists must share length {length}",
                code=ErrorCode.SERIES_LENGTH_MISMATCH,
                details={"expected": length, "mismatched": mismatched},
            )

        for name in ("time_s", "distance_m"):
            values = getattr(self, name)
            for i in range(1, length):
                if values[i] is None or values[i] < values[i - 1]:
                    raise SeriesValidationError(
                        f"{name} must be non-decreasing (index {i})",
                        code=ErrorCode.SERIES_NOT_MONOTONIC,
                        details={"field": name, "index": i},
                    )

    def __len__(self) -> int:
        return len(self.time_s)

    @property
    def is_empty(self) -> bool:
        return len(self.time_s) == 0

    @property
    def duration_s(self) -> Optional[float]:
        """Elapsed seconds from first to last sample."""
        if self.is_empty:
            return None
        return self.time_s[-1] - self.time_s[0]

    @property
    def total_distance_m(self) -> Optional[float]:
        if self.is_empty:
            return None
        return self.distance_m[-1]

    @property
    def has_gps(self) -> bool:
        return any(
            lat is not None and lon is not None
            for lat, lon in zip(self.latitude, self.longitude)
        )

    def with_values(self, **changes: Any) -> "CanonicalSeries":
        """Return a copy with the given lists replaced."""
        return replace(self, **changes)

    def take(self, indices: Sequence[int]) -> "CanonicalSeries":
        """Return a new series holding only the given (sorted) indices."""
        picked = {
            name: [getattr(self, name)[i] for i in indices]
            for name in SERIES_FIELDS
        }
        return replace(self, **picked)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: Dict[str, Any] = {
            f.name: list(getattr(self, f.name))
            for f in fields(self)
            if f.name in SERIES_FIELDS
        }
        result["distance_source"] = self.distance_source
        return result

    @classmethod
    def empty(cls) -> "CanonicalSeries":
        return cls()
