"""Closed-form solar position and day-event computations."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, time, timedelta
from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

__all__ = [
    "ALIAS_POSITION",
    "DEFAULT_ALIASES",
    "DEFAULT_EVENTS",
    "NADIR",
    "SOLAR_NOON",
    "AliasDefinition",
    "Ephemeris",
    "EphemerisError",
    "EventDefinition",
    "EventTable",
    "InvalidInputError",
    "SolarEvent",
    "SolarPosition",
    "classify_day",
    "compute_day_events",
    "compute_elevation_profile",
    "compute_position",
    "compute_single_elevation_events",
    "configure_ephemeris",
    "default_engine",
    "register_alias",
    "register_event",
    "validate_coordinates",
]

LOGGER = logging.getLogger(__name__)

RAD = math.pi / 180.0
DAY_MS = 86_400_000
J1970 = 2440587.5
J2000 = 2451545.0
J0 = 0.0009  # Julian cycle offset of the transit approximation.
OBLIQUITY = RAD * 23.4397  # Obliquity of the Earth.
PERIHELION = RAD * 102.9372  # Perihelion of the Earth.
REFRACTION_DEGREES = 0.833  # Standard refraction plus solar semi-diameter.

SOLAR_NOON = "solarNoon"
NADIR = "nadir"
ALIAS_POSITION = -2

# Ordered from the highest elevation to the lowest.
DEFAULT_EVENTS: Tuple[Tuple[float, str, str], ...] = (
    (6.0, "goldenHourDawnEnd", "goldenHourDuskStart"),
    (-0.3, "sunriseEnd", "sunsetStart"),
    (-0.833, "sunriseStart", "sunsetEnd"),
    (-1.0, "goldenHourDawnStart", "goldenHourDuskEnd"),
    (-4.0, "blueHourDawnEnd", "blueHourDuskStart"),
    (-6.0, "civilDawn", "civilDusk"),
    (-8.0, "blueHourDawnStart", "blueHourDuskEnd"),
    (-12.0, "nauticalDawn", "nauticalDusk"),
    (-15.0, "amateurDawn", "amateurDusk"),
    (-18.0, "astronomicalDawn", "astronomicalDusk"),
)

DEFAULT_ALIASES: Tuple[Tuple[str, str], ...] = (
    ("dawn", "civilDawn"),
    ("dusk", "civilDusk"),
    ("nightEnd", "astronomicalDawn"),
    ("night", "astronomicalDusk"),
    ("nightStart", "astronomicalDusk"),
    ("goldenHour", "goldenHourDuskStart"),
    ("sunrise", "sunriseStart"),
    ("sunset", "sunsetEnd"),
    ("goldenHourEnd", "goldenHourDawnEnd"),
    ("goldenHourStart", "goldenHourDuskStart"),
)

_NAME_PATTERN = re.compile(r"^(?![0-9])[A-Za-z0-9$_]+$")
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_DEFAULT_ENGINE: "Ephemeris"
_CONFIGURED_NAMES: Optional[List[str]] = None
_CONFIGURE_LOCK = Lock()


class EphemerisError(RuntimeError):
    """Raised when an ephemeris computation or configuration fails."""


class InvalidInputError(EphemerisError, ValueError):
    """Raised for non-finite or out-of-domain arguments."""


@dataclass(frozen=True)
class SolarPosition:
    """Horizontal coordinates of the sun for one instant and observer."""

    azimuth_radians: float
    altitude_radians: float
    zenith_radians: float
    azimuth_degrees: float
    altitude_degrees: float
    zenith_degrees: float
    declination_radians: float


@dataclass(frozen=True)
class SolarEvent:
    """A named solar-elevation event within one solar day.

    ``instant`` is always populated. When ``is_valid`` is false the sun never
    reaches the event's elevation that day and the instant holds the nadir
    default instead.
    """

    name: str
    instant: datetime
    julian_day: float
    elevation_degrees: float
    is_valid: bool
    ordinal_position: int
    is_deprecated_alias: bool = False


@dataclass(frozen=True)
class EventDefinition:
    angle_degrees: float
    rise_name: str
    set_name: str
    rise_position: Optional[int] = None
    set_position: Optional[int] = None


@dataclass(frozen=True)
class AliasDefinition:
    alias_name: str
    canonical_name: str


@dataclass(frozen=True)
class _SolarDay:
    """Quantities shared by every event of one solar day."""

    lw: float
    phi: float
    cycle: int
    mean_anomaly: float
    ecliptic_longitude: float
    declination: float
    j_noon: float
    height_correction: float


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_coordinates(lat: float, lon: float) -> None:
    """Raise :class:`InvalidInputError` unless *lat*/*lon* are usable degrees."""

    for label, value, limit in (("latitude", lat, 90.0), ("longitude", lon, 180.0)):
        if not _is_finite_number(value):
            raise InvalidInputError(f"{label} must be a finite number, got {value!r}")
        if abs(value) > limit:
            raise InvalidInputError(f"{label} must be within ±{limit:g} degrees, got {value}")


def _validate_instant(instant: datetime) -> None:
    if not isinstance(instant, datetime):
        raise InvalidInputError(f"instant must be a datetime, got {type(instant).__name__}")
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidInputError("instant must be timezone-aware")


def _validate_height(height_m: float) -> None:
    if not _is_finite_number(height_m) or height_m < 0:
        raise InvalidInputError(
            f"observer height must be a finite, non-negative number of meters, got {height_m!r}"
        )


# Date conversions. Julian days are counted from the Unix epoch so that
# millisecond timestamps map onto them without calendar arithmetic.


def _to_days(instant: datetime) -> float:
    millis = (instant - _EPOCH) / timedelta(milliseconds=1)
    return millis / DAY_MS + J1970 - J2000


def _from_julian(julian: float) -> datetime:
    return _EPOCH + timedelta(milliseconds=(julian - J1970) * DAY_MS)


# Position formulas. These accept scalars or numpy arrays.


def _solar_mean_anomaly(d):
    return RAD * (357.5291 + 0.98560028 * d)


def _ecliptic_longitude(m):
    center = RAD * (1.9148 * np.sin(m) + 0.02 * np.sin(2 * m) + 0.0003 * np.sin(3 * m))
    return m + center + PERIHELION + np.pi


def _declination(lam):
    return np.arcsin(np.sin(OBLIQUITY) * np.sin(lam))


def _right_ascension(lam):
    return np.arctan2(np.sin(lam) * np.cos(OBLIQUITY), np.cos(lam))


def _sidereal_time(d, lw):
    return RAD * (280.16 + 360.9856235 * d) - lw


def _azimuth(h, phi, dec):
    return np.arctan2(np.sin(h), np.cos(h) * np.sin(phi) - np.tan(dec) * np.cos(phi)) + np.pi


def _altitude(h, phi, dec):
    return np.arcsin(np.sin(phi) * np.sin(dec) + np.cos(phi) * np.cos(dec) * np.cos(h))


# Transit and hour-angle formulas.


def _julian_cycle(d: float, lw: float) -> int:
    # Halves round up.
    return int(math.floor(d - J0 - lw / (2 * math.pi) + 0.5))


def _approx_transit(hour_angle: float, lw: float, cycle: int) -> float:
    return J0 + (hour_angle + lw) / (2 * math.pi) + cycle


def _solar_transit(ds: float, m: float, lam: float) -> float:
    return J2000 + ds + 0.0053 * math.sin(m) - 0.0069 * math.sin(2 * lam)


def _observer_angle(height_m: float) -> float:
    return -2.076 * math.sqrt(height_m) / 60.0


def _set_julian(h: float, day: _SolarDay) -> Optional[float]:
    """Return the Julian day at which the sun sets through elevation *h*.

    ``None`` means the elevation is never reached on this day.
    """

    ratio = (math.sin(h) - math.sin(day.phi) * math.sin(day.declination)) / (
        math.cos(day.phi) * math.cos(day.declination)
    )
    if not -1.0 <= ratio <= 1.0:
        return None
    w = math.acos(ratio)
    a = _approx_transit(w, day.lw, day.cycle)
    return _solar_transit(a, day.mean_anomaly, day.ecliptic_longitude)


def _noon_anchor(instant: datetime, use_utc: bool) -> datetime:
    if use_utc:
        instant = instant.astimezone(UTC)
    return instant.replace(hour=12, minute=0, second=0, microsecond=0)


def _solar_day(
    instant: datetime, lat: float, lon: float, height_m: float, use_utc: bool
) -> _SolarDay:
    validate_coordinates(lat, lon)
    _validate_instant(instant)
    _validate_height(height_m)

    lw = RAD * -lon
    phi = RAD * lat
    d = _to_days(_noon_anchor(instant, use_utc))
    cycle = _julian_cycle(d, lw)
    ds = _approx_transit(0.0, lw, cycle)
    m = float(_solar_mean_anomaly(ds))
    lam = float(_ecliptic_longitude(m))
    return _SolarDay(
        lw=lw,
        phi=phi,
        cycle=cycle,
        mean_anomaly=m,
        ecliptic_longitude=lam,
        declination=float(_declination(lam)),
        j_noon=_solar_transit(ds, m, lam),
        height_correction=_observer_angle(height_m),
    )


class EventTable:
    """Ordered elevation-event and alias configuration.

    The table is mutable until :meth:`freeze` is called; the owning
    :class:`Ephemeris` freezes it on the first day-event query.
    """

    def __init__(
        self,
        events: Sequence[Tuple[float, str, str]] = DEFAULT_EVENTS,
        aliases: Sequence[Tuple[str, str]] = DEFAULT_ALIASES,
    ) -> None:
        self._events: List[EventDefinition] = [EventDefinition(*entry) for entry in events]
        self._aliases: List[AliasDefinition] = [AliasDefinition(*entry) for entry in aliases]
        self._frozen = False

    @property
    def events(self) -> Tuple[EventDefinition, ...]:
        return tuple(self._events)

    @property
    def aliases(self) -> Tuple[AliasDefinition, ...]:
        return tuple(self._aliases)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        if not self._frozen:
            self._frozen = True
            LOGGER.info(
                json.dumps(
                    {
                        "event": "event_table_frozen",
                        "events": len(self._events),
                        "aliases": len(self._aliases),
                    }
                )
            )

    def canonical_names(self) -> List[str]:
        names = [SOLAR_NOON, NADIR]
        for definition in self._events:
            names.extend((definition.rise_name, definition.set_name))
        return names

    def alias_names(self) -> List[str]:
        return [alias.alias_name for alias in self._aliases]

    def phase_order(self) -> List[str]:
        """Canonical names sorted by ordinal position, ties in table order."""

        count = len(self._events)
        ranked: List[Tuple[int, str]] = [(count, SOLAR_NOON), (2 * count + 1, NADIR)]
        ranks = _angle_ranks(self._events)
        for definition, rank in zip(self._events, ranks):
            rise_pos, set_pos = _ordinal_positions(definition, rank, count)
            ranked.append((rise_pos, definition.rise_name))
            ranked.append((set_pos, definition.set_name))
        return [name for _, name in sorted(ranked, key=lambda item: item[0])]

    def _reject(self, kind: str, reason: str, **details: object) -> bool:
        LOGGER.warning(
            json.dumps({"event": f"{kind}_rejected", "reason": reason, **details}, default=str)
        )
        return False

    def add_event(
        self,
        angle: float,
        rise_name: str,
        set_name: str,
        angle_is_degrees: bool = True,
        rise_position: Optional[int] = None,
        set_position: Optional[int] = None,
    ) -> bool:
        details = {"rise_name": rise_name, "set_name": set_name}
        if self._frozen:
            return self._reject("event", "table_frozen", **details)
        if not _is_finite_number(angle):
            return self._reject("event", "invalid_angle", angle=angle, **details)
        existing = set(self.canonical_names())
        for name in (rise_name, set_name):
            if not isinstance(name, str) or not _NAME_PATTERN.match(name):
                return self._reject("event", "invalid_name", **details)
            if name in existing:
                return self._reject("event", "duplicate_name", **details)
        if rise_name == set_name:
            return self._reject("event", "duplicate_name", **details)

        angle_degrees = angle if angle_is_degrees else math.degrees(angle)
        self._events.append(
            EventDefinition(angle_degrees, rise_name, set_name, rise_position, set_position)
        )
        # A canonical name supersedes a stale alias of the same name.
        self._aliases = [
            alias for alias in self._aliases if alias.alias_name not in (rise_name, set_name)
        ]
        LOGGER.info(
            json.dumps({"event": "event_registered", "angle": angle_degrees, **details})
        )
        return True

    def add_alias(self, alias_name: str, canonical_name: str) -> bool:
        details = {"alias_name": alias_name, "canonical_name": canonical_name}
        if self._frozen:
            return self._reject("alias", "table_frozen", **details)
        if not isinstance(alias_name, str) or not _NAME_PATTERN.match(alias_name):
            return self._reject("alias", "invalid_name", **details)
        canonical = self.canonical_names()
        if alias_name in canonical or alias_name in self.alias_names():
            return self._reject("alias", "duplicate_name", **details)
        if canonical_name not in canonical:
            return self._reject("alias", "unknown_canonical_name", **details)

        self._aliases.append(AliasDefinition(alias_name, canonical_name))
        LOGGER.info(json.dumps({"event": "alias_registered", **details}))
        return True


def _angle_ranks(definitions: Sequence[EventDefinition]) -> List[int]:
    """Rank of each definition by angle, highest first, ties in table order."""

    order = sorted(
        range(len(definitions)), key=lambda index: (-definitions[index].angle_degrees, index)
    )
    ranks = [0] * len(definitions)
    for rank, index in enumerate(order):
        ranks[index] = rank
    return ranks


def _ordinal_positions(definition: EventDefinition, rank: int, count: int) -> Tuple[int, int]:
    rise_pos = definition.rise_position
    set_pos = definition.set_position
    if rise_pos is None:
        rise_pos = count - rank - 1
    if set_pos is None:
        set_pos = count + rank + 1
    return rise_pos, set_pos


class Ephemeris:
    """Solar ephemeris bound to one :class:`EventTable`."""

    def __init__(self, table: Optional[EventTable] = None) -> None:
        self.table = table if table is not None else EventTable()

    def register_event(
        self,
        angle: float,
        rise_name: str,
        set_name: str,
        angle_is_degrees: bool = True,
        rise_position: Optional[int] = None,
        set_position: Optional[int] = None,
    ) -> bool:
        return self.table.add_event(
            angle, rise_name, set_name, angle_is_degrees, rise_position, set_position
        )

    def register_alias(self, alias_name: str, canonical_name: str) -> bool:
        return self.table.add_alias(alias_name, canonical_name)

    def freeze(self) -> None:
        self.table.freeze()

    def phase_order(self) -> List[str]:
        return self.table.phase_order()

    def compute_position(self, instant: datetime, lat: float, lon: float) -> SolarPosition:
        """Compute the sun's horizontal position at *instant* for an observer."""

        validate_coordinates(lat, lon)
        _validate_instant(instant)

        lw = RAD * -lon
        phi = RAD * lat
        d = _to_days(instant)
        m = _solar_mean_anomaly(d)
        lam = _ecliptic_longitude(m)
        dec = _declination(lam)
        h = _sidereal_time(d, lw) - _right_ascension(lam)
        azimuth = float(_azimuth(h, phi, dec))
        altitude = float(_altitude(h, phi, dec))
        return SolarPosition(
            azimuth_radians=azimuth,
            altitude_radians=altitude,
            zenith_radians=math.pi / 2 - altitude,
            azimuth_degrees=math.degrees(azimuth),
            altitude_degrees=math.degrees(altitude),
            zenith_degrees=90.0 - math.degrees(altitude),
            declination_radians=float(dec),
        )

    def compute_day_events(
        self,
        instant: datetime,
        lat: float,
        lon: float,
        observer_height_m: float = 0.0,
        include_aliases: bool = False,
        use_utc_noon_anchor: bool = False,
    ) -> Dict[str, SolarEvent]:
        """Compute every configured event for the solar day containing *instant*.

        Parameters
        ----------
        instant:
            Timezone-aware datetime. Only its calendar date matters; the day
            is anchored at 12:00 in the instant's own timezone, or in UTC when
            *use_utc_noon_anchor* is set.
        lat, lon:
            Geographic coordinates in degrees (east-positive longitude).
        observer_height_m:
            Observer height above the horizon in meters.
        include_aliases:
            Also emit an entry for every registered alias.

        Returns
        -------
        dict
            Mapping of event name to :class:`SolarEvent`, always containing
            ``solarNoon`` and ``nadir``.
        """

        day = _solar_day(instant, lat, lon, observer_height_m, use_utc_noon_anchor)
        self.table.freeze()

        definitions = self.table.events
        count = len(definitions)
        j_nadir = day.j_noon + 0.5
        noon_elevation = 90.0 - abs(math.degrees(day.phi - day.declination))
        nadir_elevation = abs(math.degrees(day.phi + day.declination)) - 90.0

        result: Dict[str, SolarEvent] = {
            SOLAR_NOON: SolarEvent(
                SOLAR_NOON, _from_julian(day.j_noon), day.j_noon, noon_elevation, True, count
            ),
            NADIR: SolarEvent(
                NADIR, _from_julian(j_nadir), j_nadir, nadir_elevation, True, 2 * count + 1
            ),
        }

        ranks = _angle_ranks(definitions)
        for definition, rank in zip(definitions, ranks):
            h0 = (definition.angle_degrees + day.height_correction) * RAD
            j_set = _set_julian(h0, day)
            valid = j_set is not None
            if j_set is None:
                j_set = j_nadir
            # Rise mirrors set around transit.
            j_rise = day.j_noon - (j_set - day.j_noon)
            rise_pos, set_pos = _ordinal_positions(definition, rank, count)

            result[definition.set_name] = SolarEvent(
                definition.set_name,
                _from_julian(j_set),
                j_set,
                definition.angle_degrees,
                valid,
                set_pos,
            )
            result[definition.rise_name] = SolarEvent(
                definition.rise_name,
                _from_julian(j_rise),
                j_rise,
                definition.angle_degrees,
                valid,
                rise_pos,
            )

        if include_aliases:
            for alias in self.table.aliases:
                result[alias.alias_name] = replace(
                    result[alias.canonical_name],
                    is_deprecated_alias=True,
                    ordinal_position=ALIAS_POSITION,
                )
        return result

    def compute_single_elevation_events(
        self,
        instant: datetime,
        lat: float,
        lon: float,
        elevation_angle: float,
        observer_height_m: float = 0.0,
        angle_is_degrees: bool = True,
        use_utc_noon_anchor: bool = False,
    ) -> Dict[str, SolarEvent]:
        """Rise and set instants for an arbitrary elevation angle.

        The standard refraction correction is subtracted from the angle,
        matching the built-in sunrise/sunset entries.
        """

        if not _is_finite_number(elevation_angle):
            raise InvalidInputError(
                f"elevation angle must be a finite number, got {elevation_angle!r}"
            )
        angle_degrees = elevation_angle if angle_is_degrees else math.degrees(elevation_angle)
        day = _solar_day(instant, lat, lon, observer_height_m, use_utc_noon_anchor)

        h0 = (angle_degrees - REFRACTION_DEGREES + day.height_correction) * RAD
        j_set = _set_julian(h0, day)
        valid = j_set is not None
        if j_set is None:
            j_set = day.j_noon + 0.5
        j_rise = day.j_noon - (j_set - day.j_noon)
        return {
            "rise": SolarEvent("rise", _from_julian(j_rise), j_rise, angle_degrees, valid, 0),
            "set": SolarEvent("set", _from_julian(j_set), j_set, angle_degrees, valid, 1),
        }


def compute_elevation_profile(
    day: date, lat: float, lon: float, step_minutes: int = 5
) -> Tuple[List[datetime], np.ndarray]:
    """Sample the solar altitude (degrees) across one UTC day."""

    validate_coordinates(lat, lon)
    if not isinstance(step_minutes, int) or isinstance(step_minutes, bool) or step_minutes <= 0:
        raise InvalidInputError(f"step_minutes must be a positive integer, got {step_minutes!r}")

    start = datetime.combine(day, time.min, tzinfo=UTC)
    offsets = np.arange(0, 24 * 60 + step_minutes, step_minutes)
    d = _to_days(start) + offsets / (24.0 * 60.0)
    lw = RAD * -lon
    phi = RAD * lat
    m = _solar_mean_anomaly(d)
    lam = _ecliptic_longitude(m)
    h = _sidereal_time(d, lw) - _right_ascension(lam)
    altitudes = np.degrees(_altitude(h, phi, _declination(lam)))
    times = [start + timedelta(minutes=int(offset)) for offset in offsets]
    return times, altitudes


def classify_day(
    day: date,
    lat: float,
    lon: float,
    threshold_degrees: float = -REFRACTION_DEGREES,
    step_minutes: int = 5,
) -> str:
    """Return ``ok``, ``polar_day`` or ``polar_night`` for *threshold_degrees*."""

    _, altitudes = compute_elevation_profile(day, lat, lon, step_minutes)
    samples = altitudes - threshold_degrees
    if np.any(samples >= 0) and np.any(samples < 0):
        return "ok"
    if np.max(samples) < 0:
        return "polar_night"
    return "polar_day"


_DEFAULT_ENGINE = Ephemeris()


def default_engine() -> Ephemeris:
    return _DEFAULT_ENGINE


def compute_position(instant: datetime, lat: float, lon: float) -> SolarPosition:
    return _DEFAULT_ENGINE.compute_position(instant, lat, lon)


def compute_day_events(
    instant: datetime,
    lat: float,
    lon: float,
    observer_height_m: float = 0.0,
    include_aliases: bool = False,
    use_utc_noon_anchor: bool = False,
) -> Dict[str, SolarEvent]:
    return _DEFAULT_ENGINE.compute_day_events(
        instant, lat, lon, observer_height_m, include_aliases, use_utc_noon_anchor
    )


def compute_single_elevation_events(
    instant: datetime,
    lat: float,
    lon: float,
    elevation_angle: float,
    observer_height_m: float = 0.0,
    angle_is_degrees: bool = True,
    use_utc_noon_anchor: bool = False,
) -> Dict[str, SolarEvent]:
    return _DEFAULT_ENGINE.compute_single_elevation_events(
        instant,
        lat,
        lon,
        elevation_angle,
        observer_height_m,
        angle_is_degrees,
        use_utc_noon_anchor,
    )


def register_event(
    angle: float,
    rise_name: str,
    set_name: str,
    angle_is_degrees: bool = True,
    rise_position: Optional[int] = None,
    set_position: Optional[int] = None,
) -> bool:
    return _DEFAULT_ENGINE.register_event(
        angle, rise_name, set_name, angle_is_degrees, rise_position, set_position
    )


def register_alias(alias_name: str, canonical_name: str) -> bool:
    return _DEFAULT_ENGINE.register_alias(alias_name, canonical_name)


def configure_ephemeris(config_path: Optional[str]) -> List[str]:
    """Register custom events and aliases from a JSON file, then freeze.

    The file holds ``{"events": [{"angle", "rise", "set", "degrees"?,
    "rise_position"?, "set_position"?}], "aliases": [{"alias", "canonical"}]}``.

    Parameters
    ----------
    config_path:
        Path to the JSON file, or ``None`` to only freeze the defaults.

    Returns
    -------
    list[str]
        Names that were registered, in registration order.

    Raises
    ------
    EphemerisError
        If the file is missing or malformed.
    """

    global _CONFIGURED_NAMES

    if _CONFIGURED_NAMES is not None:
        return _CONFIGURED_NAMES

    with _CONFIGURE_LOCK:
        if _CONFIGURED_NAMES is not None:
            return _CONFIGURED_NAMES

        registered: List[str] = []
        rejected = 0
        if config_path:
            path = Path(config_path).expanduser()
            if not path.is_file():
                raise EphemerisError(f"Event configuration file not found: {path}")
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
                events = payload.get("events", [])
                aliases = payload.get("aliases", [])
                for entry in events:
                    if register_event(
                        entry["angle"],
                        entry["rise"],
                        entry["set"],
                        entry.get("degrees", True),
                        entry.get("rise_position"),
                        entry.get("set_position"),
                    ):
                        registered.extend((entry["rise"], entry["set"]))
                    else:
                        rejected += 1
                for entry in aliases:
                    if register_alias(entry["alias"], entry["canonical"]):
                        registered.append(entry["alias"])
                    else:
                        rejected += 1
            except (ValueError, KeyError, TypeError, AttributeError) as exc:
                raise EphemerisError(
                    f"Malformed event configuration '{path}': {exc}"
                ) from exc

        _DEFAULT_ENGINE.freeze()
        _CONFIGURED_NAMES = registered
        LOGGER.info(
            json.dumps(
                {
                    "event": "ephemeris_configured",
                    "source": config_path,
                    "registered": registered,
                    "rejected": rejected,
                }
            )
        )
        return registered
