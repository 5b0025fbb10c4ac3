"""UTC offset and calendar-date sources consulted by the default entry points."""

from __future__ import annotations

import json
import logging
import os
from datetime import date, datetime
from typing import Callable

LOGGER = logging.getLogger(__name__)

OFFSET_ENV_VAR = "SUNSETRISE_UTC_OFFSET"
MAX_OFFSET_HOURS = 24.0

UtcOffsetProvider = Callable[[date], float]


class UtcOffsetError(ValueError):
    """Raised when no usable UTC offset can be determined."""


def system_utc_offset(day: date) -> float:
    """Return the host local timezone's offset from UTC, in hours, on *day*.

    The offset is sampled at local midnight and includes daylight saving.
    """

    local_midnight = datetime(day.year, day.month, day.day).astimezone()
    offset = local_midnight.utcoffset()
    if offset is None:  # pragma: no cover - astimezone() always attaches an offset.
        raise UtcOffsetError(f"Host timezone reports no UTC offset for {day.isoformat()}")
    return offset.total_seconds() / 3600.0


def fixed_offset(hours: float) -> UtcOffsetProvider:
    """Return a provider that ignores the date and always yields *hours*."""

    if not -MAX_OFFSET_HOURS <= hours <= MAX_OFFSET_HOURS:
        raise UtcOffsetError(f"UTC offset must be within ±24 hours, got {hours}")

    def _provider(day: date) -> float:
        return hours

    return _provider


def resolve_offset_provider() -> UtcOffsetProvider:
    """Return the configured offset provider.

    ``SUNSETRISE_UTC_OFFSET`` pins a fixed offset in hours; without it the
    host's local timezone is used.
    """

    override = os.environ.get(OFFSET_ENV_VAR)
    if not override:
        return system_utc_offset
    try:
        hours = float(override)
    except ValueError as exc:
        raise UtcOffsetError(
            f"{OFFSET_ENV_VAR} must be a number of hours, got {override!r}"
        ) from exc
    LOGGER.debug(json.dumps({"event": "utc_offset_override", "hours": hours}))
    return fixed_offset(hours)


def today() -> date:
    """Current calendar date in the host's local timezone."""

    return date.today()
