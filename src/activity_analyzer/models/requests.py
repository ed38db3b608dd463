"""
Caller-facing input models.

Collaborators send camelCase payloads (``poolLengthOverrideM``,
``bandPreset``); snake_case names are accepted as well.
"""

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..formatting import UnitSystem
from ..series.fields import normalize_elevation_unit
from .swim import SwimLap, SwimLength
from .zones import BandPreset, MaxHrFormula


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class CamelModel(BaseModel):
    """Base model accepting camelCase aliases and snake_case names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ZoneBandInput(CamelModel):
    """One caller-supplied zone; ``max`` None marks the open top zone."""

    name: Optional[str] = None
    min: float = Field(..., ge=0)
    max: Optional[float] = None


class TelemetryBundle(CamelModel):
    """Raw telemetry for one activity."""

    # Records stay untyped; malformed ones are dropped downstream, not rejected
    points: List[Any] = Field(default_factory=list)
    samples: List[Any] = Field(default_factory=list)
    lengths: Optional[List[Any]] = None
    laps: Optional[List[Any]] = None
    activity_type: str = "run"
    elevation_unit: str = "m"

    @field_validator("elevation_unit")
    @classmethod
    def check_elevation_unit(cls, value: str) -> str:
        unit = normalize_elevation_unit(value)
        if unit is None:
            raise ValueError(f"Unsupported elevation unit: {value!r}")
        return unit

    @property
    def is_swim(self) -> bool:
        return "swim" in self.activity_type.lower() or bool(self.lengths) or bool(self.laps)

    def swim_lengths(self) -> List[SwimLength]:
        records = self.lengths or ()
        return [SwimLength.from_record(r) for r in records if isinstance(r, Mapping)]

    def swim_laps(self) -> List[SwimLap]:
        records = self.laps or ()
        return [SwimLap.from_record(r) for r in records if isinstance(r, Mapping)]


class ZoneConfig(CamelModel):
    """Heart rate zone configuration: explicit bands, or max HR / age plus a preset."""

    zones: Optional[List[ZoneBandInput]] = None
    max_hr: Optional[float] = Field(default=None, gt=0)
    age: Optional[float] = Field(default=None, gt=0, lt=120)
    sex: Optional[str] = None
    rest_hr: Optional[float] = Field(default=None, gt=0)
    use_reserve: bool = False
    formula: MaxHrFormula = MaxHrFormula.TANAKA
    band_preset: BandPreset = BandPreset.CLASSIC


class PowerZoneConfig(CamelModel):
    """Power zone configuration: explicit bands, or FTP."""

    zones: Optional[List[ZoneBandInput]] = None
    ftp: Optional[float] = Field(default=None, gt=0)


class SwimContext(CamelModel):
    """Pool-length sources and split settings for a swim."""

    pool_length_override_m: Optional[float] = Field(default=None, gt=0)
    plan_pool_length_m: Optional[float] = Field(default=None, gt=0)
    preferred_pool_length_m: Optional[float] = Field(default=None, gt=0)
    total_distance_m: Optional[float] = Field(default=None, ge=0)
    length_count: Optional[int] = Field(default=None, ge=0)
    split_distance: float = Field(default=100.0, gt=0)


class AnalysisOptions(CamelModel):
    """Output options."""

    unit_system: UnitSystem = UnitSystem.METRIC
    point_budget: Optional[int] = Field(default=None, ge=2)
