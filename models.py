"""Pydantic models for API requests and responses."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PositionQueryParams(BaseModel):
    """Validated query parameters for the ``/position`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    at: Optional[dt.datetime] = Field(
        None, description="Instant (ISO-8601); defaults to now, naive values are UTC"
    )


class TimesQueryParams(BaseModel):
    """Validated query parameters for the ``/times`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    day: dt.date = Field(..., description="Calendar date (YYYY-MM-DD)")
    height_m: float = Field(0.0, ge=0.0, description="Observer height above the horizon in meters")
    aliases: bool = Field(False, description="Include deprecated alias names")


class ElevationQueryParams(BaseModel):
    """Validated query parameters for the ``/elevation`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    day: dt.date = Field(..., description="Calendar date (YYYY-MM-DD)")
    angle: float = Field(..., ge=-90.0, le=90.0, description="Solar elevation angle in degrees")
    height_m: float = Field(0.0, ge=0.0, description="Observer height above the horizon in meters")


class PhaseQueryParams(BaseModel):
    """Validated query parameters for the ``/phase`` endpoint.

    Coordinates fall back to the stored location when omitted.
    """

    lat: Optional[float] = Field(None, ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: Optional[float] = Field(None, ge=-180.0, le=180.0, description="Longitude in degrees")
    at: Optional[dt.datetime] = Field(
        None, description="Instant (ISO-8601); defaults to now, naive values are UTC"
    )


class LocationUpdate(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    sampled_at: Optional[dt.datetime] = Field(None, description="Sample time; defaults to now")


class PositionResponse(BaseModel):
    ok: bool = True
    at: str = Field(..., description="Instant in UTC (ISO-8601)")
    latitude: float
    longitude: float
    azimuth_degrees: float
    altitude_degrees: float
    zenith_degrees: float
    declination_degrees: float


class SolarEventModel(BaseModel):
    name: str
    utc: str = Field(..., description="Event instant in UTC (ISO-8601)")
    julian_day: float
    elevation_degrees: float
    valid: bool
    position: int
    deprecated: bool = False


class TimesResponse(BaseModel):
    ok: bool = True
    status: str = Field(..., description="Sunrise status: ok, polar_day or polar_night")
    day: dt.date
    latitude: float
    longitude: float
    height_m: float
    events: Dict[str, SolarEventModel]


class ElevationResponse(BaseModel):
    ok: bool = True
    day: dt.date
    latitude: float
    longitude: float
    angle: float
    rise: SolarEventModel
    set: SolarEventModel


class PhaseWindowModel(BaseModel):
    name: str
    label: str
    utc: str
    valid: bool


class PhaseResponse(BaseModel):
    ok: bool = True
    at: str
    latitude: float
    longitude: float
    location_current: bool = Field(
        ..., description="False when coordinates come from a stale stored sample"
    )
    current_part: PhaseWindowModel
    upcoming_part: PhaseWindowModel
    time_left_seconds: float
    time_left: Dict[str, int]
    progress: float = Field(..., ge=0.0, le=1.0)


class LocationResponse(BaseModel):
    ok: bool = True
    latitude: float
    longitude: float
    sampled_at: str


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    table_frozen: bool
    events: List[str]
    aliases: List[str]


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
