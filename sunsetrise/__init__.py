"""Sunrise and sunset times from the NOAA solar-calculator approximation."""

from .offsets import UtcOffsetError, fixed_offset, resolve_offset_provider, system_utc_offset
from .solar import compute_sun_times, sunrise_at, sunrise_today, sunset_at, sunset_today

__all__ = [
    "compute_sun_times",
    "sunrise_at",
    "sunrise_today",
    "sunset_at",
    "sunset_today",
    "UtcOffsetError",
    "fixed_offset",
    "resolve_offset_provider",
    "system_utc_offset",
]
