"""Heart rate zone estimation and time-in-zone classification."""

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from ..exceptions import ValidationError, ZoneConfigurationError
from ..models.zones import BandPreset, MaxHrFormula, ZoneBand, ZoneBin, ZoneDefinition


logger = logging.getLogger(__name__)


BAND_PRESETS = {
    BandPreset.CLASSIC: (0.50, 0.60, 0.70, 0.80, 0.90, 1.00),
    BandPreset.RUN: (0.60, 0.70, 0.80, 0.87, 0.93, 1.00),
}

HR_ZONE_NAMES = ("Recovery", "Aerobic", "Tempo", "Threshold", "VO2max")

FEMALE = {"f", "female", "woman"}


def estimate_max_hr(
    age: float,
    formula: Union[MaxHrFormula, str] = MaxHrFormula.TANAKA,
    sex: Optional[str] = None,
) -> int:
    """
    Estimate maximum heart rate from age.

    Formulas:
    - tanaka: 208 - 0.7 * age (default, more accurate than 220 - age)
    - fox: 220 - age
    - gellish: 207 - 0.7 * age
    - gulati: 206 - 0.88 * age, derived for women; other sexes use fox
    - auto: gulati for women, tanaka otherwise

    Args:
        age: Age in years
        formula: One of MaxHrFormula
        sex: Optional sex ("female"/"f" selects the female formula)

    Returns:
        Estimated maximum heart rate (bpm, rounded)

    Raises:
        ValidationError: If age is not positive or the formula is unknown
    """
    if age is None or age <= 0:
        raise ValidationError(f"Age must be positive, got {age}", field="age")
    try:
        formula = MaxHrFormula(formula.lower() if isinstance(formula, str) else formula)
    except ValueError:
        raise ValidationError(f"Unknown max HR formula: {formula!r}", field="formula")

    is_female = sex is not None and str(sex).strip().lower() in FEMALE
    if formula == MaxHrFormula.AUTO:
        formula = MaxHrFormula.GULATI if is_female else MaxHrFormula.TANAKA

    if formula == MaxHrFormula.FOX:
        estimate = 220 - age
    elif formula == MaxHrFormula.GELLISH:
        estimate = 207 - 0.7 * age
    elif formula == MaxHrFormula.GULATI:
        estimate = 206 - 0.88 * age if is_female else 220 - age
    else:
        estimate = 208 - 0.7 * age

    return int(round(estimate))


def validate_zone_definition(bands: Sequence[ZoneBand]) -> None:
    """
    Check that bands cover [0, inf) in order with no gaps or overlaps.

    Raises:
        ZoneConfigurationError: On empty bands, a first band not starting at
            0, an empty or inverted band, a gap or overlap between
            neighbors, or a last band not ending at infinity
    """
    if not bands:
        raise ZoneConfigurationError("Zone definition has no bands")

    if bands[0].lower_bound != 0:
        raise ZoneConfigurationError(
            "First zone must start at 0",
            details={"lower_bound": bands[0].lower_bound},
        )
    if not math.isinf(bands[-1].upper_bound):
        raise ZoneConfigurationError(
            "Last zone must be unbounded",
            details={"upper_bound": bands[-1].upper_bound},
        )

    for i, band in enumerate(bands):
        if not band.lower_bound < band.upper_bound:
            raise ZoneConfigurationError(
                f"Zone {i + 1} ({band.name}) is empty or inverted",
                details={"index": i, "lower_bound": band.lower_bound, "upper_bound": band.upper_bound},
            )
        if i > 0 and band.lower_bound != bands[i - 1].upper_bound:
            kind = "gap" if band.lower_bound > bands[i - 1].upper_bound else "overlap"
            raise ZoneConfigurationError(
                f"Zones {i} and {i + 1} have a {kind}",
                details={
                    "index": i,
                    "previous_upper": bands[i - 1].upper_bound,
                    "lower_bound": band.lower_bound,
                },
            )


def zones_from_boundaries(
    boundaries: Sequence[Optional[float]],
    names: Sequence[str],
    unit: str = "bpm",
) -> ZoneDefinition:
    """
    Build a full-coverage definition from nominal boundaries.

    ``boundaries`` holds N+1 edges for N zones. Classification bounds extend
    zone 1 down to 0 and the last zone up to infinity; the nominal edges are
    kept as display values. A final edge of None leaves the top zone without
    a nominal ceiling.
    """
    count = len(boundaries) - 1
    bands = []
    for i in range(count):
        bands.append(
            ZoneBand(
                name=names[i] if i < len(names) else f"Zone {i + 1}",
                lower_bound=0.0 if i == 0 else float(boundaries[i]),
                upper_bound=math.inf if i == count - 1 else float(boundaries[i + 1]),
                display_min=float(boundaries[i]),
                display_max=None if boundaries[i + 1] is None else float(boundaries[i + 1]),
            )
        )
    validate_zone_definition(bands)
    return ZoneDefinition(bands=tuple(bands), unit=unit)


def build_hr_zones(
    max_hr: float,
    preset: Union[BandPreset, str] = BandPreset.CLASSIC,
    rest_hr: Optional[float] = None,
    use_reserve: bool = False,
) -> ZoneDefinition:
    """
    Build five heart rate zones from max HR and a banding scheme.

    Boundaries are ``band * max_hr``, or with reserve (Karvonen) mode and a
    resting HR, ``rest_hr + band * (max_hr - rest_hr)``. Boundaries are
    rounded to whole bpm.

    Args:
        max_hr: Maximum heart rate
        preset: "classic" (50/60/70/80/90/100) or "run" (60/70/80/87/93/100)
        rest_hr: Resting heart rate (used only in reserve mode)
        use_reserve: Band against heart rate reserve instead of max HR

    Returns:
        ZoneDefinition with 5 bands covering [0, inf)

    Raises:
        ValidationError: If max_hr/rest_hr are invalid or the preset is unknown
    """
    if max_hr is None or max_hr <= 0:
        raise ValidationError(f"max_hr must be positive, got {max_hr}", field="max_hr")
    try:
        bands = BAND_PRESETS[BandPreset(preset.lower() if isinstance(preset, str) else preset)]
    except ValueError:
        raise ValidationError(f"Unknown band preset: {preset!r}", field="band_preset")

    if use_reserve and rest_hr is None:
        logger.warning("Reserve zones requested without a resting HR; using %max bands")
    if use_reserve and rest_hr is not None:
        if not 0 < rest_hr < max_hr:
            raise ValidationError(
                f"rest_hr must be between 0 and max_hr ({max_hr}), got {rest_hr}",
                field="rest_hr",
            )
        hr_reserve = max_hr - rest_hr
        boundaries = [int(round(rest_hr + band * hr_reserve)) for band in bands]
    else:
        boundaries = [int(round(band * max_hr)) for band in bands]

    return zones_from_boundaries(boundaries, HR_ZONE_NAMES, unit="bpm")


def zones_from_bands(bands: Iterable[Union[ZoneBand, Mapping[str, Any]]], unit: str = "bpm") -> ZoneDefinition:
    """
    Build a definition from caller-supplied bands.

    Bands may be ZoneBand instances or mappings with ``name``, ``min`` and
    ``max`` (``max`` None for the open top zone). Explicit bands are taken
    as-is and must already cover [0, inf).

    Raises:
        ZoneConfigurationError: If the bands do not cover [0, inf) exactly
    """
    parsed: List[ZoneBand] = []
    for i, band in enumerate(bands):
        if isinstance(band, ZoneBand):
            parsed.append(band)
            continue
        lower = band.get("min", band.get("lower_bound"))
        upper = band.get("max", band.get("upper_bound"))
        if lower is None:
            raise ZoneConfigurationError(f"Zone {i + 1} has no lower bound", details={"index": i})
        parsed.append(
            ZoneBand(
                name=str(band.get("name") or f"Zone {i + 1}"),
                lower_bound=float(lower),
                upper_bound=math.inf if upper is None else float(upper),
            )
        )
    validate_zone_definition(parsed)
    return ZoneDefinition(bands=tuple(parsed), unit=unit)


def zones_from_config(config) -> Optional[ZoneDefinition]:
    """
    Resolve heart rate zones from a ZoneConfig.

    Explicit bands win; otherwise max HR (supplied, or estimated from age)
    with the configured preset. Returns None when neither is available.
    """
    if config is None:
        return None
    if config.zones:
        return zones_from_bands([band.model_dump() for band in config.zones], unit="bpm")

    max_hr = config.max_hr
    if max_hr is None and config.age is not None:
        max_hr = estimate_max_hr(config.age, config.formula, config.sex)
    if max_hr is None:
        logger.warning("Zone config has neither bands, max HR nor age; skipping HR zones")
        return None

    return build_hr_zones(
        max_hr,
        preset=config.band_preset,
        rest_hr=config.rest_hr,
        use_reserve=config.use_reserve,
    )


def classify_value(value: Optional[float], zones: ZoneDefinition) -> Optional[int]:
    """
    Return the 0-based index of the zone containing ``value``.

    Zones are lower-inclusive, upper-exclusive. Missing, non-finite or
    negative values are not classified.
    """
    if value is None or not math.isfinite(value) or value < 0:
        return None
    for i, band in enumerate(zones):
        if band.contains(value):
            return i
    return None


def bins_from_durations(durations: Sequence[float], zones: ZoneDefinition) -> List[ZoneBin]:
    """
    Build one ZoneBin per zone from a precomputed duration vector.

    Shorter vectors are padded with zeros; percentages are of the total.

    Raises:
        ZoneConfigurationError: If there are more durations than zones
        ValidationError: If a duration is negative or not finite
    """
    if len(durations) > len(zones):
        raise ZoneConfigurationError(
            f"Got {len(durations)} zone durations for {len(zones)} zones",
            details={"durations": len(durations), "zones": len(zones)},
        )
    for value in durations:
        if value is None or not math.isfinite(value) or value < 0:
            raise ValidationError(f"Zone durations must be non-negative, got {value}", field="durations")

    padded = list(durations) + [0.0] * (len(zones) - len(durations))
    total = sum(padded)
    return [
        ZoneBin(
            zone_index=i,
            name=band.name,
            duration_s=float(padded[i]),
            range_min=band.range_min,
            range_max=band.range_max,
            percentage=round(padded[i] / total * 100, 1) if total > 0 else 0.0,
        )
        for i, band in enumerate(zones)
    ]


def classify_samples(
    values: Iterable[Optional[float]],
    zones: ZoneDefinition,
    sample_duration_s: float = 1.0,
) -> List[ZoneBin]:
    """
    Bucket per-sample values into time-in-zone.

    Each classified sample contributes ``sample_duration_s``; unclassifiable
    samples (None, negative) contribute nothing. Every zone gets a bin.

    Args:
        values: Heart rate or power per sample
        zones: Zone definition
        sample_duration_s: Seconds represented by each sample

    Returns:
        ZoneBin per zone, in zone order
    """
    if sample_duration_s <= 0:
        raise ValidationError("sample_duration_s must be positive", field="sample_duration_s")

    durations = [0.0] * len(zones)
    for value in values:
        index = classify_value(value, zones)
        if index is not None:
            durations[index] += sample_duration_s
    return bins_from_durations(durations, zones)
