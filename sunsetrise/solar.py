"""Sunrise and sunset times from the NOAA solar-calculator approximation."""

from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional

from .offsets import UtcOffsetProvider, system_utc_offset, today

__all__ = [
    "julian_day",
    "julian_day_for",
    "julian_century",
    "geometric_mean_longitude",
    "geometric_mean_anomaly",
    "eccentricity",
    "equation_of_center",
    "true_longitude",
    "apparent_longitude",
    "mean_obliquity",
    "corrected_obliquity",
    "declination",
    "equation_of_time",
    "hour_angle_argument",
    "hour_angle",
    "sunrise_utc_minutes",
    "sunset_utc_minutes",
    "refined_sunrise_utc_minutes",
    "refined_sunset_utc_minutes",
    "solar_noon_utc_minutes",
    "local_event_time",
    "sunrise_at",
    "sunset_at",
    "sunrise_today",
    "sunset_today",
    "compute_sun_times",
]

LOGGER = logging.getLogger(__name__)

J2000_JULIAN_DAY = 2451545.0
DAYS_PER_JULIAN_CENTURY = 36525.0
MINUTES_PER_DAY = 1440.0
SOLAR_NOON_MINUTES = 720.0
MINUTES_PER_DEGREE = 4.0

# Geometric horizon plus atmospheric refraction and the solar semi-diameter.
SUNRISE_ZENITH_DEGREES = 90.833


# ---------------------------------------------------------------------------
# Calendar and time scale
# ---------------------------------------------------------------------------


def julian_day(year: int, month: int, day: int) -> float:
    """Return the Julian Day at 00:00 UTC of a proleptic Gregorian date.

    The date is not validated; out-of-range months or days give a wrong but
    finite result.
    """

    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100.0)
    b = 2 - a + math.floor(a / 4)
    return math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5


def julian_day_for(day: date) -> float:
    return julian_day(day.year, day.month, day.day)


def julian_century(jd: float) -> float:
    """Julian centuries elapsed since J2000.0."""

    return (jd - J2000_JULIAN_DAY) / DAYS_PER_JULIAN_CENTURY


# ---------------------------------------------------------------------------
# Solar orbit model (all angles in degrees)
# ---------------------------------------------------------------------------


def geometric_mean_longitude(t: float) -> float:
    """Geometric mean longitude of the sun, normalised into [0, 360)."""

    longitude = 280.46646 + t * (36000.76983 + 0.0003032 * t)
    while longitude >= 360.0:
        longitude -= 360.0
    while longitude < 0.0:
        longitude += 360.0
    return longitude


def geometric_mean_anomaly(t: float) -> float:
    return 357.52911 + t * (35999.05029 - 0.0001537 * t)


def eccentricity(t: float) -> float:
    """Unitless eccentricity of the Earth's orbit."""

    return 0.016708634 - t * (0.000042037 + 0.0000001267 * t)


def equation_of_center(t: float) -> float:
    m_rad = math.radians(geometric_mean_anomaly(t))
    return (
        math.sin(m_rad) * (1.914602 - t * (0.004817 + 0.000014 * t))
        + math.sin(2.0 * m_rad) * (0.019993 - 0.000101 * t)
        + math.sin(3.0 * m_rad) * 0.000289
    )


def true_longitude(t: float) -> float:
    return geometric_mean_longitude(t) + equation_of_center(t)


def _ascending_node(t: float) -> float:
    """Longitude of the Moon's ascending node, drives the nutation terms."""

    return 125.04 - 1934.136 * t


def apparent_longitude(t: float) -> float:
    """True longitude corrected for nutation and aberration."""

    omega = _ascending_node(t)
    return true_longitude(t) - 0.00569 - 0.00478 * math.sin(math.radians(omega))


def mean_obliquity(t: float) -> float:
    """Mean obliquity of the ecliptic from the 23°26'xx" polynomial."""

    seconds = 21.448 - t * (46.8150 + t * (0.00059 - t * 0.001813))
    return 23.0 + (26.0 + seconds / 60.0) / 60.0


def corrected_obliquity(t: float) -> float:
    omega = _ascending_node(t)
    return mean_obliquity(t) + 0.00256 * math.cos(math.radians(omega))


def declination(t: float) -> float:
    """Solar declination in degrees."""

    sin_dec = math.sin(math.radians(corrected_obliquity(t))) * math.sin(
        math.radians(apparent_longitude(t))
    )
    return math.degrees(math.asin(sin_dec))


def equation_of_time(t: float) -> float:
    """Apparent minus mean solar time, in minutes of time."""

    epsilon = math.radians(corrected_obliquity(t))
    l0 = math.radians(geometric_mean_longitude(t))
    e = eccentricity(t)
    m = math.radians(geometric_mean_anomaly(t))

    y = math.tan(epsilon / 2.0) ** 2

    sin_2l0 = math.sin(2.0 * l0)
    cos_2l0 = math.cos(2.0 * l0)
    sin_4l0 = math.sin(4.0 * l0)
    sin_m = math.sin(m)
    sin_2m = math.sin(2.0 * m)

    e_time = (
        y * sin_2l0
        - 2.0 * e * sin_m
        + 4.0 * e * y * sin_m * cos_2l0
        - 0.5 * y * y * sin_4l0
        - 1.25 * e * e * sin_2m
    )
    return math.degrees(e_time) * MINUTES_PER_DEGREE


# ---------------------------------------------------------------------------
# Hour angle and event times
# ---------------------------------------------------------------------------


def hour_angle_argument(latitude: float, solar_declination: float) -> float:
    """Cosine of the sunrise hour angle; outside [-1, 1] the sun never crosses.

    Values below -1 mean the sun stays up all day, above 1 that it never rises.
    """

    lat_rad = math.radians(latitude)
    dec_rad = math.radians(solar_declination)
    return math.cos(math.radians(SUNRISE_ZENITH_DEGREES)) / (
        math.cos(lat_rad) * math.cos(dec_rad)
    ) - math.tan(lat_rad) * math.tan(dec_rad)


def hour_angle(latitude: float, solar_declination: float) -> float:
    """Sunrise hour angle in radians, or NaN on polar day / polar night."""

    argument = hour_angle_argument(latitude, solar_declination)
    if not -1.0 <= argument <= 1.0:
        return math.nan
    return math.acos(argument)


def _event_utc_minutes(jd: float, latitude: float, longitude: float, rising: bool) -> float:
    t = julian_century(jd)
    eq_time = equation_of_time(t)
    angle = hour_angle(latitude, declination(t))
    if not rising:
        angle = -angle
    delta = longitude + math.degrees(angle)
    return SOLAR_NOON_MINUTES - MINUTES_PER_DEGREE * delta - eq_time


def sunrise_utc_minutes(jd: float, latitude: float, longitude: float) -> float:
    """Minutes after 00:00 UTC of sunrise, evaluated once at *jd*."""

    return _event_utc_minutes(jd, latitude, longitude, rising=True)


def sunset_utc_minutes(jd: float, latitude: float, longitude: float) -> float:
    """Minutes after 00:00 UTC of sunset, evaluated once at *jd*."""

    return _event_utc_minutes(jd, latitude, longitude, rising=False)


def _refine(
    single_pass: Callable[[float, float, float], float],
    jd: float,
    latitude: float,
    longitude: float,
) -> float:
    estimate = single_pass(jd, latitude, longitude)
    if math.isnan(estimate):
        return estimate
    return single_pass(jd + estimate / MINUTES_PER_DAY, latitude, longitude)


def refined_sunrise_utc_minutes(jd: float, latitude: float, longitude: float) -> float:
    """Sunrise minutes recomputed at the estimated event instant."""

    return _refine(sunrise_utc_minutes, jd, latitude, longitude)


def refined_sunset_utc_minutes(jd: float, latitude: float, longitude: float) -> float:
    """Sunset minutes recomputed at the estimated event instant."""

    return _refine(sunset_utc_minutes, jd, latitude, longitude)


def solar_noon_utc_minutes(jd: float, longitude: float) -> float:
    """Minutes after 00:00 UTC at which the sun crosses the local meridian."""

    t = julian_century(jd + 0.5 - longitude / 360.0)
    return SOLAR_NOON_MINUTES - MINUTES_PER_DEGREE * longitude - equation_of_time(t)


# ---------------------------------------------------------------------------
# Local time composition and public entry points
# ---------------------------------------------------------------------------


def local_event_time(
    utc_minutes: float,
    utc_offset: float,
    day: date,
    daylight_saving: bool = False,
) -> Optional[datetime]:
    """Shift UTC minutes into a naive local timestamp on *day*.

    Returns ``None`` when *utc_minutes* is NaN, i.e. the event does not happen.
    The result may fall on the previous or the next calendar day.
    """

    if math.isnan(utc_minutes):
        return None
    minutes = utc_minutes + utc_offset * 60.0
    if daylight_saving:
        minutes += 60.0
    midnight = datetime(day.year, day.month, day.day)
    return midnight + timedelta(minutes=minutes)


def _resolve_offset(
    day: date,
    utc_offset: Optional[float],
    offset_provider: Optional[UtcOffsetProvider],
) -> float:
    if utc_offset is not None:
        return utc_offset
    provider = offset_provider or system_utc_offset
    return provider(day)


def _event_at(
    kind: str,
    refine: Callable[[float, float, float], float],
    latitude: float,
    longitude: float,
    day: date,
    utc_offset: Optional[float],
    daylight_saving: bool,
    offset_provider: Optional[UtcOffsetProvider],
) -> Optional[datetime]:
    offset = _resolve_offset(day, utc_offset, offset_provider)
    minutes = refine(julian_day_for(day), latitude, longitude)
    result = local_event_time(minutes, offset, day, daylight_saving)
    if result is None:
        LOGGER.debug(
            json.dumps(
                {
                    "event": "no_" + kind,
                    "lat": latitude,
                    "lon": longitude,
                    "date": day.isoformat(),
                }
            )
        )
    return result


def sunrise_at(
    latitude: float,
    longitude: float,
    day: date,
    utc_offset: Optional[float] = None,
    *,
    daylight_saving: bool = False,
    offset_provider: Optional[UtcOffsetProvider] = None,
) -> Optional[datetime]:
    """Local time of sunrise on *day*, or ``None`` if the sun does not rise.

    Parameters
    ----------
    latitude, longitude:
        Decimal degrees, south and west negative. Not validated.
    day:
        Calendar date of the event.
    utc_offset:
        Hours east of UTC. When omitted it is taken from *offset_provider*,
        which defaults to the host's local timezone.
    daylight_saving:
        Add one hour on top of *utc_offset*.
    """

    return _event_at(
        "sunrise",
        refined_sunrise_utc_minutes,
        latitude,
        longitude,
        day,
        utc_offset,
        daylight_saving,
        offset_provider,
    )


def sunset_at(
    latitude: float,
    longitude: float,
    day: date,
    utc_offset: Optional[float] = None,
    *,
    daylight_saving: bool = False,
    offset_provider: Optional[UtcOffsetProvider] = None,
) -> Optional[datetime]:
    """Local time of sunset on *day*, or ``None`` if the sun does not set.

    Takes the same arguments as :func:`sunrise_at`.
    """

    return _event_at(
        "sunset",
        refined_sunset_utc_minutes,
        latitude,
        longitude,
        day,
        utc_offset,
        daylight_saving,
        offset_provider,
    )


def sunrise_today(
    latitude: float,
    longitude: float,
    *,
    clock: Optional[Callable[[], date]] = None,
    offset_provider: Optional[UtcOffsetProvider] = None,
) -> Optional[datetime]:
    day = (clock or today)()
    return sunrise_at(latitude, longitude, day, offset_provider=offset_provider)


def sunset_today(
    latitude: float,
    longitude: float,
    *,
    clock: Optional[Callable[[], date]] = None,
    offset_provider: Optional[UtcOffsetProvider] = None,
) -> Optional[datetime]:
    day = (clock or today)()
    return sunset_at(latitude, longitude, day, offset_provider=offset_provider)


def compute_sun_times(
    day: date,
    latitude: float,
    longitude: float,
    utc_offset: float,
    daylight_saving: bool = False,
) -> Dict[str, object]:
    """Compute sunrise, solar noon and sunset for *day* at one location.

    Returns
    -------
    dict
        ``sunrise``, ``solar_noon`` and ``sunset`` as naive local datetimes
        (``None`` when the event is absent), their UTC minute offsets under
        ``*_utc_minutes``, and a ``status`` of ``ok``, ``polar_day`` or
        ``polar_night``.
    """

    jd = julian_day_for(day)
    sunrise_minutes = refined_sunrise_utc_minutes(jd, latitude, longitude)
    sunset_minutes = refined_sunset_utc_minutes(jd, latitude, longitude)
    noon_minutes = solar_noon_utc_minutes(jd, longitude)

    if not (math.isnan(sunrise_minutes) and math.isnan(sunset_minutes)):
        status = "ok"
    else:
        noon_declination = declination(julian_century(jd + noon_minutes / MINUTES_PER_DAY))
        if hour_angle_argument(latitude, noon_declination) < -1.0:
            status = "polar_day"
        else:
            status = "polar_night"

    return {
        "sunrise": local_event_time(sunrise_minutes, utc_offset, day, daylight_saving),
        "solar_noon": local_event_time(noon_minutes, utc_offset, day, daylight_saving),
        "sunset": local_event_time(sunset_minutes, utc_offset, day, daylight_saving),
        "sunrise_utc_minutes": None if math.isnan(sunrise_minutes) else sunrise_minutes,
        "sunset_utc_minutes": None if math.isnan(sunset_minutes) else sunset_minutes,
        "status": status,
    }
