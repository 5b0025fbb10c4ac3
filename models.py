"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SunQueryParams(BaseModel):
    """Validated query parameters for the ``/sun`` endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    day: date = Field(..., alias="date", description="Local calendar date (YYYY-MM-DD)")
    offset_hours: Optional[float] = Field(
        None,
        description="Hours east of UTC; the server default is used when omitted",
    )
    dst: bool = Field(False, description="Add one hour of daylight saving")

    @field_validator("offset_hours")
    def validate_offset_hours(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if not -24.0 <= value <= 24.0:
            raise ValueError("offset_hours must be within ±24 hours")
        return value


class SunResponse(BaseModel):
    """Successful sunrise/sunset response payload."""

    ok: bool = True
    status: str = Field(..., description="ok, polar_day or polar_night")
    day: date = Field(..., alias="date", description="Requested local date")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    offset_hours: float = Field(..., description="Applied offset from UTC in hours")
    daylight_saving: bool = Field(..., description="Whether one DST hour was added")
    sunrise: Optional[str] = Field(None, description="Local sunrise (ISO-8601, no zone)")
    solar_noon: Optional[str] = Field(None, description="Local solar noon (ISO-8601, no zone)")
    sunset: Optional[str] = Field(None, description="Local sunset (ISO-8601, no zone)")
    sunrise_utc: Optional[str] = Field(None, description="Sunrise time in UTC (ISO-8601)")
    sunset_utc: Optional[str] = Field(None, description="Sunset time in UTC (ISO-8601)")
    source: Literal["NOAA"] = Field("NOAA", description="Solar model identifier")

    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    source: Literal["NOAA"] = "NOAA"
    offset_source: str


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
