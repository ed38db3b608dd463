"""Series normalization, distance/elevation resolution and downsampling."""

from .fields import FIELD_CANDIDATES, FieldCandidate, normalize_timestamp, resolve_field, to_float
from .normalizer import join_sensor_samples, normalize_series
from .resolver import (
    elevation_gain_loss,
    haversine_m,
    resolve_distance_and_elevation,
    smooth_elevation_ema,
)
from .downsample import downsample_series

__all__ = [
    # Field resolution
    "FIELD_CANDIDATES",
    "FieldCandidate",
    "normalize_timestamp",
    "resolve_field",
    "to_float",
    # Normalizer
    "join_sensor_samples",
    "normalize_series",
    # Distance and elevation
    "elevation_gain_loss",
    "haversine_m",
    "resolve_distance_and_elevation",
    "smooth_elevation_ema",
    # Downsampling
    "downsample_series",
]
