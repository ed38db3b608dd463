"""Analysis output models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .series import CanonicalSeries
from .swim import SwimSets
from .zones import ZoneBin


@dataclass(frozen=True)
class DistanceSplit:
    """One per-km (or per-mile) split of a distance activity."""

    index: int
    distance_m: float
    time_s: float
    avg_pace_s_per_km: Optional[float] = None
    avg_hr_bpm: Optional[float] = None
    elevation_gain_m: Optional[float] = None
    avg_grade_pct: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "distance_m": self.distance_m,
            "time_s": self.time_s,
            "avg_pace_s_per_km": self.avg_pace_s_per_km,
            "avg_hr_bpm": self.avg_hr_bpm,
            "elevation_gain_m": self.elevation_gain_m,
            "avg_grade_pct": self.avg_grade_pct,
        }


@dataclass(frozen=True)
class ActivitySummary:
    """Whole-activity aggregates. Every metric is None when it cannot be computed."""

    activity_type: str
    sample_count: int = 0
    distance_m: Optional[float] = None
    duration_s: Optional[float] = None
    distance_source: str = "none"
    elevation_gain_m: Optional[float] = None
    elevation_loss_m: Optional[float] = None
    avg_speed_mps: Optional[float] = None
    avg_pace_s_per_km: Optional[float] = None
    gap_s_per_km: Optional[float] = None
    avg_hr_bpm: Optional[float] = None
    max_hr_bpm: Optional[float] = None
    avg_power_w: Optional[float] = None
    max_power_w: Optional[float] = None
    normalized_power_w: Optional[float] = None
    intensity_factor: Optional[float] = None
    max_vam_m_per_h: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "activity_type": self.activity_type,
            "sample_count": self.sample_count,
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "distance_source": self.distance_source,
            "elevation_gain_m": self.elevation_gain_m,
            "elevation_loss_m": self.elevation_loss_m,
            "avg_speed_mps": self.avg_speed_mps,
            "avg_pace_s_per_km": self.avg_pace_s_per_km,
            "gap_s_per_km": self.gap_s_per_km,
            "avg_hr_bpm": self.avg_hr_bpm,
            "max_hr_bpm": self.max_hr_bpm,
            "avg_power_w": self.avg_power_w,
            "max_power_w": self.max_power_w,
            "normalized_power_w": self.normalized_power_w,
            "intensity_factor": self.intensity_factor,
            "max_vam_m_per_h": self.max_vam_m_per_h,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Everything derived from one activity's telemetry.

    ``zones`` maps a discipline ("heart_rate", "power") to one bin per
    defined zone; a discipline is absent when no zones could be resolved.
    """

    series: CanonicalSeries
    summary: ActivitySummary
    zones: Dict[str, List[ZoneBin]] = field(default_factory=dict)
    splits: List[DistanceSplit] = field(default_factory=list)
    swim: Optional[SwimSets] = None
    unit_system: str = "metric"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "series": self.series.to_dict(),
            "summary": self.summary.to_dict(),
            "zones": {
                discipline: [b.to_dict() for b in bins]
                for discipline, bins in self.zones.items()
            },
            "splits": [s.to_dict() for s in self.splits],
            "swim": self.swim.to_dict() if self.swim else None,
            "unit_system": self.unit_system,
        }
