"""Per-sample metric derivation on a resolved series."""

from typing import Optional

from ..config import AnalyzerSettings, get_settings
from ..models.series import CanonicalSeries
from .pace import windowed_pace
from .vam import windowed_vam


def derive_metrics(
    series: CanonicalSeries,
    settings: Optional[AnalyzerSettings] = None,
    activity_type: str = "run",
) -> CanonicalSeries:
    """Return a new series with pace_s_per_km and vam_m_per_h filled."""
    settings = settings or get_settings()
    if series.is_empty:
        return series

    return series.with_values(
        pace_s_per_km=windowed_pace(
            series.time_s,
            series.distance_m,
            activity_type=activity_type,
            settings=settings,
        ),
        vam_m_per_h=windowed_vam(series.time_s, series.elevation_m, settings=settings),
    )
