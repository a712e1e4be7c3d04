"""FastAPI application exposing solar position and day-phase computations."""

from __future__ import annotations

import json
import logging
import math
import os
import time
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from typing import Annotated, List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.astro import (
    EphemerisError,
    InvalidInputError,
    SolarEvent,
    classify_day,
    compute_day_events,
    compute_position,
    compute_single_elevation_events,
    configure_ephemeris,
    default_engine,
)
from core.dayphase import PhaseWindow, interval_between, resolve
from core.location import (
    LocationStoreError,
    load_location,
    location_max_age,
    save_location,
)
from models import (
    ElevationQueryParams,
    ElevationResponse,
    ErrorResponse,
    HealthResponse,
    LocationResponse,
    LocationUpdate,
    PhaseQueryParams,
    PhaseResponse,
    PhaseWindowModel,
    PositionQueryParams,
    PositionResponse,
    SolarEventModel,
    TimesQueryParams,
    TimesResponse,
)

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("sunphase-api")

APP_DESCRIPTION = "Solar position, twilight events and day-phase tracking"

CONFIGURED_NAMES: List[str] = []


@asynccontextmanager
async def lifespan(app: FastAPI):
    global CONFIGURED_NAMES
    source = os.environ.get("SUNPHASE_EVENTS_FILE")
    try:
        CONFIGURED_NAMES = configure_ephemeris(source)
    except EphemerisError as exc:
        LOGGER.error(json.dumps({"event": "ephemeris_config_failed", "error": str(exc)}))
        raise
    LOGGER.info(json.dumps({"event": "startup", "events_source": source}))
    yield


app = FastAPI(
    title="Sunphase API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)


def _format_utc(dt: datetime) -> str:
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _as_utc(dt: Optional[datetime]) -> datetime:
    if dt is None:
        return datetime.now(UTC)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def _noon_utc(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, 12, tzinfo=UTC)


def _event_model(event: SolarEvent) -> SolarEventModel:
    return SolarEventModel(
        name=event.name,
        utc=_format_utc(event.instant),
        julian_day=event.julian_day,
        elevation_degrees=event.elevation_degrees,
        valid=event.is_valid,
        position=event.ordinal_position,
        deprecated=event.is_deprecated_alias,
    )


def _window_model(window: PhaseWindow) -> PhaseWindowModel:
    return PhaseWindowModel(
        name=window.name,
        label=window.label,
        utc=_format_utc(window.instant),
        valid=window.is_valid,
    )


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


def _log_request(event: str, start_time: float, **fields: object) -> None:
    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(
        json.dumps({"event": event, **fields, "duration_ms": round(duration_ms, 3)}, default=str)
    )


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
    table = default_engine().table
    return HealthResponse(
        ok=True,
        table_frozen=table.frozen,
        events=table.canonical_names(),
        aliases=table.alias_names(),
    )


@app.get(
    "/position",
    response_model=PositionResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def position_endpoint(params: Annotated[PositionQueryParams, Query()]) -> PositionResponse:
    start_time = time.perf_counter()
    at = _as_utc(params.at)
    try:
        position = compute_position(at, params.lat, params.lon)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    _log_request("position", start_time, lat=params.lat, lon=params.lon, at=_format_utc(at))
    return PositionResponse(
        at=_format_utc(at),
        latitude=params.lat,
        longitude=params.lon,
        azimuth_degrees=position.azimuth_degrees,
        altitude_degrees=position.altitude_degrees,
        zenith_degrees=position.zenith_degrees,
        declination_degrees=math.degrees(position.declination_radians),
    )


@app.get(
    "/times",
    response_model=TimesResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def times_endpoint(params: Annotated[TimesQueryParams, Query()]) -> TimesResponse:
    start_time = time.perf_counter()
    try:
        events = compute_day_events(
            _noon_utc(params.day),
            params.lat,
            params.lon,
            observer_height_m=params.height_m,
            include_aliases=params.aliases,
            use_utc_noon_anchor=True,
        )
        status = classify_day(params.day, params.lat, params.lon)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except EphemerisError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    _log_request(
        "times",
        start_time,
        lat=params.lat,
        lon=params.lon,
        date=params.day.isoformat(),
        status=status,
    )
    return TimesResponse(
        status=status,
        day=params.day,
        latitude=params.lat,
        longitude=params.lon,
        height_m=params.height_m,
        events={name: _event_model(event) for name, event in events.items()},
    )


@app.get(
    "/elevation",
    response_model=ElevationResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def elevation_endpoint(params: Annotated[ElevationQueryParams, Query()]) -> ElevationResponse:
    start_time = time.perf_counter()
    try:
        result = compute_single_elevation_events(
            _noon_utc(params.day),
            params.lat,
            params.lon,
            params.angle,
            observer_height_m=params.height_m,
            use_utc_noon_anchor=True,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    _log_request(
        "elevation",
        start_time,
        lat=params.lat,
        lon=params.lon,
        date=params.day.isoformat(),
        angle=params.angle,
        valid=result["set"].is_valid,
    )
    return ElevationResponse(
        day=params.day,
        latitude=params.lat,
        longitude=params.lon,
        angle=params.angle,
        rise=_event_model(result["rise"]),
        set=_event_model(result["set"]),
    )


@app.get(
    "/phase",
    response_model=PhaseResponse,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def phase_endpoint(params: Annotated[PhaseQueryParams, Query()]) -> PhaseResponse:
    start_time = time.perf_counter()
    now = _as_utc(params.at)
    if (params.lat is None) != (params.lon is None):
        raise HTTPException(status_code=400, detail="lat and lon must be given together")

    if params.lat is None:
        try:
            sample = load_location()
            max_age = location_max_age()
        except LocationStoreError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
        lat, lon = sample.latitude, sample.longitude
        location_current = sample.is_current(now, max_age)
    else:
        lat, lon = params.lat, params.lon
        location_current = True

    try:
        phase = resolve(now, lat, lon)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except EphemerisError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    left = interval_between(phase.upcoming_part.instant, now)
    _log_request(
        "phase",
        start_time,
        lat=lat,
        lon=lon,
        at=_format_utc(now),
        current=phase.current_part.name,
        upcoming=phase.upcoming_part.name,
    )
    return PhaseResponse(
        at=_format_utc(now),
        latitude=lat,
        longitude=lon,
        location_current=location_current,
        current_part=_window_model(phase.current_part),
        upcoming_part=_window_model(phase.upcoming_part),
        time_left_seconds=phase.time_left(now).total_seconds(),
        time_left={
            "days": left.days,
            "hours": left.hours,
            "minutes": left.minutes,
            "seconds": left.seconds,
        },
        progress=phase.progress(now),
    )


@app.put(
    "/location",
    response_model=LocationResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def location_endpoint(update: LocationUpdate) -> LocationResponse:
    try:
        sample = save_location(
            update.latitude,
            update.longitude,
            _as_utc(update.sampled_at),
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except LocationStoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return LocationResponse(
        latitude=sample.latitude,
        longitude=sample.longitude,
        sampled_at=_format_utc(sample.sampled_at),
    )
