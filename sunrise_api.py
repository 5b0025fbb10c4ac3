"""FastAPI application exposing sunrise and sunset computations."""

from __future__ import annotations

import json
import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta
from typing import Annotated, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models import ErrorResponse, HealthResponse, SunQueryParams, SunResponse
from sunsetrise.offsets import OFFSET_ENV_VAR, UtcOffsetError, resolve_offset_provider
from sunsetrise.solar import compute_sun_times

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("sunrise-api")

APP_DESCRIPTION = "Sunrise and sunset calculations based on the NOAA solar calculator"

CORS_ENV_VAR = "SUNSETRISE_CORS_ORIGINS"


def _cors_origins() -> List[str]:
    raw = os.environ.get(CORS_ENV_VAR, "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _offset_source() -> str:
    return "env" if os.environ.get(OFFSET_ENV_VAR) else "system"


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        resolve_offset_provider()
    except UtcOffsetError as exc:
        LOGGER.error(json.dumps({"event": "offset_config_invalid", "error": str(exc)}))
        raise
    LOGGER.info(json.dumps({"event": "startup", "offset_source": _offset_source()}))
    yield


app = FastAPI(
    title="Sunsetrise API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _format_local(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat()


def _format_utc(day: date, minutes: Optional[float]) -> Optional[str]:
    if minutes is None:
        return None
    instant = datetime(day.year, day.month, day.day) + timedelta(minutes=minutes)
    return instant.isoformat() + "Z"


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(ok=True, offset_source=_offset_source())


@app.get(
    "/sun",
    response_model=SunResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def sun_endpoint(params: Annotated[SunQueryParams, Query()]) -> SunResponse:
    start_time = time.perf_counter()
    try:
        offset_hours = params.offset_hours
        if offset_hours is None:
            offset_hours = resolve_offset_provider()(params.day)
        result = compute_sun_times(
            day=params.day,
            latitude=params.lat,
            longitude=params.lon,
            utc_offset=offset_hours,
            daylight_saving=params.dst,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    duration_ms = (time.perf_counter() - start_time) * 1000.0

    response = SunResponse(
        status=result["status"],
        day=params.day,
        latitude=params.lat,
        longitude=params.lon,
        offset_hours=offset_hours,
        daylight_saving=params.dst,
        sunrise=_format_local(result["sunrise"]),
        solar_noon=_format_local(result["solar_noon"]),
        sunset=_format_local(result["sunset"]),
        sunrise_utc=_format_utc(params.day, result["sunrise_utc_minutes"]),
        sunset_utc=_format_utc(params.day, result["sunset_utc_minutes"]),
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "sun",
                "lat": params.lat,
                "lon": params.lon,
                "date": params.day.isoformat(),
                "offset_hours": offset_hours,
                "status": response.status,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response
