"""Activity analysis: swim set detection and the full pipeline."""

from .swim_sets import analyze_swim, detect_sets
from .pipeline import ActivityAnalyzer

__all__ = [
    "ActivityAnalyzer",
    "analyze_swim",
    "detect_sets",
]
