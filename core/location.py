"""Persistence of the last known observer location."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Optional

from .astro import InvalidInputError, validate_coordinates

LOGGER = logging.getLogger(__name__)

DEFAULT_LATITUDE = 1.3521
DEFAULT_LONGITUDE = 103.8198
DEFAULT_LOCATION_FILE = Path.home() / ".sunphase" / "location.json"
DEFAULT_MAX_AGE = timedelta(minutes=20)


class LocationStoreError(RuntimeError):
    """Raised when the location file cannot be read or written."""


@dataclass(frozen=True)
class LocationSample:
    latitude: float
    longitude: float
    sampled_at: datetime

    def is_current(self, now: datetime, max_age: timedelta = DEFAULT_MAX_AGE) -> bool:
        """Whether the sample is younger than *max_age* at *now*."""

        return now - self.sampled_at < max_age


DEFAULT_SAMPLE = LocationSample(
    latitude=DEFAULT_LATITUDE,
    longitude=DEFAULT_LONGITUDE,
    sampled_at=datetime(1970, 1, 1, tzinfo=UTC),
)


def resolve_location_path() -> Path:
    """Return the location file path, honouring ``SUNPHASE_LOCATION_FILE``."""

    override = os.environ.get("SUNPHASE_LOCATION_FILE")
    if override:
        return Path(override).expanduser()
    return DEFAULT_LOCATION_FILE


def location_max_age() -> timedelta:
    """Freshness window from ``SUNPHASE_LOCATION_MAX_AGE_S`` (seconds)."""

    raw = os.environ.get("SUNPHASE_LOCATION_MAX_AGE_S")
    if not raw:
        return DEFAULT_MAX_AGE
    try:
        seconds = float(raw)
    except ValueError as exc:
        raise LocationStoreError(f"Invalid SUNPHASE_LOCATION_MAX_AGE_S: {raw!r}") from exc
    if seconds <= 0:
        raise LocationStoreError(f"SUNPHASE_LOCATION_MAX_AGE_S must be positive: {raw!r}")
    return timedelta(seconds=seconds)


def _write(path: Path, sample: LocationSample) -> None:
    payload = {
        "latitude": sample.latitude,
        "longitude": sample.longitude,
        "sampled_at": sample.sampled_at.isoformat(),
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
    except OSError as exc:
        raise LocationStoreError(f"Failed to write location file '{path}': {exc}") from exc


def load_location(path: Optional[Path] = None) -> LocationSample:
    """Read the stored sample, seeding the file with defaults if it is missing."""

    path = path if path is not None else resolve_location_path()
    if not path.exists():
        _write(path, DEFAULT_SAMPLE)
        LOGGER.info(json.dumps({"event": "location_seeded", "path": str(path)}))
        return DEFAULT_SAMPLE

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        sample = LocationSample(
            latitude=float(payload["latitude"]),
            longitude=float(payload["longitude"]),
            sampled_at=datetime.fromisoformat(payload["sampled_at"]),
        )
    except (OSError, ValueError, KeyError, TypeError) as exc:
        raise LocationStoreError(f"Unreadable location file '{path}': {exc}") from exc
    try:
        validate_coordinates(sample.latitude, sample.longitude)
    except InvalidInputError as exc:
        raise LocationStoreError(f"Invalid coordinates in location file '{path}': {exc}") from exc
    if sample.sampled_at.tzinfo is None:
        sample = LocationSample(
            sample.latitude, sample.longitude, sample.sampled_at.replace(tzinfo=UTC)
        )
    return sample


def save_location(
    latitude: float,
    longitude: float,
    sampled_at: Optional[datetime] = None,
    path: Optional[Path] = None,
) -> LocationSample:
    """Validate and persist a new location sample."""

    validate_coordinates(latitude, longitude)
    path = path if path is not None else resolve_location_path()
    if sampled_at is None:
        sampled_at = datetime.now(UTC)
    elif sampled_at.tzinfo is None:
        sampled_at = sampled_at.replace(tzinfo=UTC)
    sample = LocationSample(latitude=latitude, longitude=longitude, sampled_at=sampled_at)
    _write(path, sample)
    LOGGER.info(
        json.dumps(
            {
                "event": "location_saved",
                "path": str(path),
                "lat": latitude,
                "lon": longitude,
                "sampled_at": sample.sampled_at.isoformat(),
            }
        )
    )
    return sample
