"""Derives pace, elevation, VAM, zone and swim-set metrics from raw activity telemetry."""

__version__ = "0.1.0"

from .config import AnalyzerSettings, get_settings
from .exceptions import (
    ActivityAnalyzerError,
    ErrorCode,
    SeriesValidationError,
    ValidationError,
    ZoneConfigurationError,
)
from .formatting import UnitSystem
from .analysis import ActivityAnalyzer

__all__ = [
    "__version__",
    "ActivityAnalyzer",
    "AnalyzerSettings",
    "get_settings",
    "UnitSystem",
    # Exceptions
    "ActivityAnalyzerError",
    "ErrorCode",
    "SeriesValidationError",
    "ValidationError",
    "ZoneConfigurationError",
]
