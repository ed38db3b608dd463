"""Data models for series, zones, swims and analysis results."""

from .series import SERIES_FIELDS, CanonicalSeries
from .zones import BandPreset, MaxHrFormula, ZoneBand, ZoneBin, ZoneDefinition
from .swim import (
    DetectedSet,
    PoolLengthResolution,
    PoolLengthSource,
    SetLabel,
    StrokeRateStats,
    SwimLap,
    SwimLength,
    SwimSets,
    SwimSplit,
)
from .analysis import ActivitySummary, AnalysisResult, DistanceSplit
from .requests import (
    AnalysisOptions,
    PowerZoneConfig,
    SwimContext,
    TelemetryBundle,
    ZoneBandInput,
    ZoneConfig,
)

__all__ = [
    # Series
    "SERIES_FIELDS",
    "CanonicalSeries",
    # Zones
    "BandPreset",
    "MaxHrFormula",
    "ZoneBand",
    "ZoneBin",
    "ZoneDefinition",
    # Swim
    "DetectedSet",
    "PoolLengthResolution",
    "PoolLengthSource",
    "SetLabel",
    "StrokeRateStats",
    "SwimLap",
    "SwimLength",
    "SwimSets",
    "SwimSplit",
    # Results
    "ActivitySummary",
    "AnalysisResult",
    "DistanceSplit",
    # Inputs
    "AnalysisOptions",
    "PowerZoneConfig",
    "SwimContext",
    "TelemetryBundle",
    "ZoneBandInput",
    "ZoneConfig",
]
