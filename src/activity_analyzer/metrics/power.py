"""Cycling power metrics (power zones, NP, IF)."""

from typing import List, Optional, Sequence

from ..exceptions import ValidationError
from ..models.zones import ZoneDefinition
from .zones import zones_from_bands, zones_from_boundaries


# Coggan zone edges as fractions of FTP
POWER_ZONE_FRACTIONS = (0.0, 0.55, 0.75, 0.90, 1.05, 1.20, 1.50)

POWER_ZONE_NAMES = (
    "Active Recovery",
    "Endurance",
    "Tempo",
    "Threshold",
    "VO2max",
    "Anaerobic",
    "Neuromuscular",
)


def build_power_zones(ftp: float) -> ZoneDefinition:
    """
    Build 7 power zones from FTP.

    Uses the classic Coggan power zones model:
    - Zone 1: Active Recovery (<55% FTP)
    - Zone 2: Endurance (55-75% FTP)
    - Zone 3: Tempo (75-90% FTP)
    - Zone 4: Threshold (90-105% FTP)
    - Zone 5: VO2max (105-120% FTP)
    - Zone 6: Anaerobic (120-150% FTP)
    - Zone 7: Neuromuscular (>150% FTP)

    Args:
        ftp: Functional Threshold Power in watts

    Returns:
        ZoneDefinition in watts covering [0, inf)

    Raises:
        ValidationError: If FTP is not positive
    """
    if ftp is None or ftp <= 0:
        raise ValidationError(f"FTP must be positive, got {ftp}", field="ftp")

    edges = [int(round(ftp * fraction)) for fraction in POWER_ZONE_FRACTIONS]
    return zones_from_boundaries(edges + [None], POWER_ZONE_NAMES, unit="W")


def power_zones_from_config(config) -> Optional[ZoneDefinition]:
    """Resolve power zones from a PowerZoneConfig: explicit bands, else FTP."""
    if config is None:
        return None
    if config.zones:
        return zones_from_bands([band.model_dump() for band in config.zones], unit="W")
    if config.ftp:
        return build_power_zones(config.ftp)
    return None


def calculate_normalized_power(power_samples: Sequence[Optional[float]], sample_rate_hz: float = 1) -> Optional[float]:
    """
    Calculate Normalized Power (NP) using 30-second rolling average.

    NP accounts for the physiological cost of variable power output.
    It uses a 30-second rolling average, then takes the 4th power mean.

    Formula: NP = (mean(rolling_30s_power^4))^0.25

    Missing samples are skipped.

    Args:
        power_samples: Power values in watts (one per sample)
        sample_rate_hz: Samples per second, default 1

    Returns:
        Normalized Power in watts, or None if there is under 30 s of data
    """
    samples = [p for p in power_samples if p is not None]
    window_size = max(1, int(round(30 * sample_rate_hz)))
    if len(samples) < window_size:
        return None

    rolling_averages: List[float] = []
    window_sum = sum(samples[:window_size])
    rolling_averages.append(window_sum / window_size)
    for i in range(window_size, len(samples)):
        window_sum += samples[i] - samples[i - window_size]
        rolling_averages.append(window_sum / window_size)

    fourth_power_mean = sum(avg ** 4 for avg in rolling_averages) / len(rolling_averages)
    return round(fourth_power_mean ** 0.25, 1)


def calculate_intensity_factor(normalized_power: Optional[float], ftp: Optional[float]) -> Optional[float]:
    """
    Calculate Intensity Factor (IF = NP / FTP).

    IF = 1.0 means the normalized power equals FTP (threshold effort).
    """
    if normalized_power is None or not ftp or ftp <= 0:
        return None
    return round(normalized_power / ftp, 3)
