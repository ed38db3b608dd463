"""
Activity analysis pipeline.

Runs the stages in dependency order:
normalize -> resolve distance/elevation -> derive pace/VAM, then the
independent consumers (zones, splits, swim sets) and, last, downsampling
for the point budget.
"""

import logging
import statistics
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..config import AnalyzerSettings, get_settings
from ..metrics.derive import derive_metrics
from ..metrics.pace import grade_adjusted_pace, speed_to_pace
from ..metrics.power import (
    calculate_intensity_factor,
    calculate_normalized_power,
    power_zones_from_config,
)
from ..metrics.splits import compute_distance_splits, split_distance_m
from ..metrics.zones import classify_samples, zones_from_config
from ..models.analysis import ActivitySummary, AnalysisResult
from ..models.requests import (
    AnalysisOptions,
    PowerZoneConfig,
    SwimContext,
    TelemetryBundle,
    ZoneConfig,
)
from ..models.series import CanonicalSeries
from ..models.swim import SwimSets
from ..models.zones import ZoneBin
from ..series.downsample import downsample_series
from ..series.normalizer import normalize_series
from ..series.resolver import elevation_gain_loss, resolve_distance_and_elevation
from .swim_sets import analyze_swim


def median_sample_interval(time_s: Sequence[float], default: float = 1.0) -> float:
    """Median positive gap between consecutive samples (seconds)."""
    gaps = [b - a for a, b in zip(time_s, time_s[1:]) if b > a]
    return statistics.median(gaps) if gaps else default


def _present(values: Sequence[Optional[float]]) -> List[float]:
    return [v for v in values if v is not None]


def _mean(values: Sequence[float]) -> Optional[float]:
    return round(sum(values) / len(values), 1) if values else None


def _round(value: Optional[float], digits: int = 1) -> Optional[float]:
    return None if value is None else round(value, digits)


class ActivityAnalyzer:
    """
    Turns one activity's raw telemetry into an AnalysisResult.

    Holds only settings and a logger, so one instance can be shared.

    Example:
        analyzer = ActivityAnalyzer()
        result = analyzer.analyze(
            {"points": points, "samples": samples, "activityType": "run"},
            zone_config={"age": 40, "bandPreset": "run"},
        )
    """

    def __init__(
        self,
        settings: Optional[AnalyzerSettings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def settings(self) -> AnalyzerSettings:
        return self._settings

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        return self._logger

    def build_series(self, bundle: TelemetryBundle) -> CanonicalSeries:
        """Normalize, resolve distance/elevation and derive pace and VAM."""
        series = normalize_series(
            bundle.points,
            bundle.samples,
            elevation_unit=bundle.elevation_unit,
            settings=self._settings,
        )
        if series.is_empty:
            if bundle.points or bundle.samples:
                self._logger.warning("No usable samples after normalization")
            return series

        series = resolve_distance_and_elevation(series, settings=self._settings)
        return derive_metrics(series, self._settings, bundle.activity_type)

    def summarize(
        self,
        series: CanonicalSeries,
        activity_type: str,
        ftp: Optional[float] = None,
    ) -> ActivitySummary:
        """Whole-activity aggregates over the full-resolution series."""
        if series.is_empty:
            return ActivitySummary(activity_type=activity_type)

        distance = series.total_distance_m if series.distance_source != "none" else None
        duration = series.duration_s or None

        gain = loss = None
        if _present(series.elevation_m):
            gain, loss = elevation_gain_loss(series.elevation_m)

        avg_speed = distance / duration if distance and duration else None
        heart_rates = _present(series.hr_bpm)
        powers = _present(series.power_w)
        vams = _present(series.vam_m_per_h)

        normalized_power = None
        if powers:
            interval = median_sample_interval(series.time_s)
            normalized_power = calculate_normalized_power(series.power_w, sample_rate_hz=1 / interval)

        return ActivitySummary(
            activity_type=activity_type,
            sample_count=len(series),
            distance_m=_round(distance),
            duration_s=_round(duration),
            distance_source=series.distance_source,
            elevation_gain_m=_round(gain),
            elevation_loss_m=_round(loss),
            avg_speed_mps=_round(avg_speed, 3),
            avg_pace_s_per_km=_round(speed_to_pace(avg_speed)),
            gap_s_per_km=_round(grade_adjusted_pace(distance, duration, gain, loss)),
            avg_hr_bpm=_mean(heart_rates),
            max_hr_bpm=max(heart_rates) if heart_rates else None,
            avg_power_w=_mean(powers),
            max_power_w=max(powers) if powers else None,
            normalized_power_w=normalized_power,
            intensity_factor=calculate_intensity_factor(normalized_power, ftp),
            max_vam_m_per_h=_round(max(vams)) if vams else None,
        )

    def classify_zones(
        self,
        series: CanonicalSeries,
        zone_config: Optional[ZoneConfig] = None,
        power_zone_config: Optional[PowerZoneConfig] = None,
    ) -> Dict[str, List[ZoneBin]]:
        """Time in heart rate and power zones; a discipline is omitted without zones."""
        zones: Dict[str, List[ZoneBin]] = {}
        if series.is_empty:
            return zones

        interval = median_sample_interval(series.time_s)
        hr_zones = zones_from_config(zone_config)
        if hr_zones is not None:
            zones["heart_rate"] = classify_samples(series.hr_bpm, hr_zones, interval)
        power_zones = power_zones_from_config(power_zone_config)
        if power_zones is not None:
            zones["power"] = classify_samples(series.power_w, power_zones, interval)
        return zones

    def analyze_swim(
        self,
        bundle: TelemetryBundle,
        swim_context: Optional[SwimContext],
        options: AnalysisOptions,
    ) -> Optional[SwimSets]:
        """Swim set analysis, or None for activities without lengths or laps."""
        lengths = bundle.swim_lengths()
        laps = bundle.swim_laps()
        if not lengths and not laps:
            return None
        return analyze_swim(
            lengths,
            laps or None,
            context=swim_context,
            unit_system=options.unit_system,
            settings=self._settings,
        )

    def analyze(
        self,
        bundle: Union[TelemetryBundle, Mapping[str, Any]],
        zone_config: Union[ZoneConfig, Mapping[str, Any], None] = None,
        power_zone_config: Union[PowerZoneConfig, Mapping[str, Any], None] = None,
        swim_context: Union[SwimContext, Mapping[str, Any], None] = None,
        options: Union[AnalysisOptions, Mapping[str, Any], None] = None,
    ) -> AnalysisResult:
        """
        Run the full pipeline for one activity.

        Inputs may be model instances or plain mappings (camelCase or
        snake_case keys).

        Args:
            bundle: Raw telemetry
            zone_config: Heart rate zone configuration
            power_zone_config: Power zone configuration
            swim_context: Pool-length sources for swims
            options: Unit system and point budget

        Returns:
            AnalysisResult with the (optionally downsampled) series, summary,
            zone bins, distance splits and swim sets

        Raises:
            pydantic.ValidationError: If an input mapping is malformed
            ZoneConfigurationError: If supplied zones do not cover [0, inf)
        """
        bundle = TelemetryBundle.model_validate(bundle)
        zone_config = ZoneConfig.model_validate(zone_config) if zone_config is not None else None
        power_zone_config = (
            PowerZoneConfig.model_validate(power_zone_config) if power_zone_config is not None else None
        )
        swim_context = SwimContext.model_validate(swim_context) if swim_context is not None else None
        options = AnalysisOptions.model_validate(options) if options is not None else AnalysisOptions()

        series = self.build_series(bundle)
        ftp = power_zone_config.ftp if power_zone_config else None
        summary = self.summarize(series, bundle.activity_type, ftp)

        zones = self.classify_zones(series, zone_config, power_zone_config)
        swim = self.analyze_swim(bundle, swim_context, options) if bundle.is_swim else None
        splits = [] if swim is not None else compute_distance_splits(series, options.unit_system)

        output_series = series
        if options.point_budget is not None:
            output_series = downsample_series(
                series,
                options.point_budget,
                split_m=split_distance_m(options.unit_system),
                settings=self._settings,
            )

        self._logger.info(
            f"Analyzed {bundle.activity_type}: {len(series)} samples "
            f"({len(output_series)} returned), {len(splits)} splits, "
            f"zones={sorted(zones)}, swim={'yes' if swim else 'no'}"
        )
        return AnalysisResult(
            series=output_series,
            summary=summary,
            zones=zones,
            splits=splits,
            swim=swim,
            unit_system=options.unit_system.value,
        )
