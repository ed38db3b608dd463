"""Training zone models."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple


class MaxHrFormula(str, Enum):
    """Age-based maximum heart rate formulas."""
    TANAKA = "tanaka"
    FOX = "fox"
    GULATI = "gulati"
    GELLISH = "gellish"
    AUTO = "auto"


class BandPreset(str, Enum):
    """Banding schemes, as fractions of max HR (or of HR reserve)."""
    CLASSIC = "classic"
    RUN = "run"


@dataclass(frozen=True)
class ZoneBand:
    """
    One training zone.

    Classification uses ``lower_bound <= value < upper_bound``. The
    ``display_min``/``display_max`` values carry the nominal band edges
    (e.g. 50% of max HR for zone 1) for rendering, while the bounds used for
    classification extend zone 1 down to 0 and the top zone up to infinity.
    """

    name: str
    lower_bound: float
    upper_bound: float
    display_min: Optional[float] = None
    display_max: Optional[float] = None

    def contains(self, value: float) -> bool:
        return self.lower_bound <= value < self.upper_bound

    @property
    def range_min(self) -> float:
        return self.display_min if self.display_min is not None else self.lower_bound

    @property
    def range_max(self) -> Optional[float]:
        if self.display_max is not None:
            return self.display_max
        return None if math.isinf(self.upper_bound) else self.upper_bound

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "min": self.range_min,
            "max": self.range_max,
        }


@dataclass(frozen=True)
class ZoneDefinition:
    """Ordered, gap-free set of zones covering [0, inf) in one unit (bpm or W)."""

    bands: Tuple[ZoneBand, ...]
    unit: str = "bpm"

    def __iter__(self) -> Iterator[ZoneBand]:
        return iter(self.bands)

    def __len__(self) -> int:
        return len(self.bands)

    def __getitem__(self, index: int) -> ZoneBand:
        return self.bands[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit": self.unit,
            "zones": [band.to_dict() for band in self.bands],
        }


@dataclass(frozen=True)
class ZoneBin:
    """Time spent in one zone. One bin exists per defined zone, even when empty."""

    zone_index: int
    name: str
    duration_s: float
    range_min: float
    range_max: Optional[float]
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "i": self.zone_index,
            "name": self.name,
            "t_s": self.duration_s,
            "min": self.range_min,
            "max": self.range_max,
            "pct": self.percentage,
        }
