"""Day-phase resolution over a three-day event timeline."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from .astro import EphemerisError, Ephemeris, InvalidInputError, default_engine

__all__ = [
    "PHASE_LABELS",
    "PhaseResolutionError",
    "PhaseWindow",
    "ResolvedPhase",
    "TimeInterval",
    "build_timeline",
    "interval_between",
    "resolve",
]

LOGGER = logging.getLogger(__name__)

# Display labels in default enumeration order.
PHASE_LABELS: Dict[str, str] = {
    "astronomicalDawn": "Astronomical Dawn",
    "amateurDawn": "Amateur Dawn",
    "nauticalDawn": "Nautical Dawn",
    "blueHourDawnStart": "Blue Hour Dawn Start",
    "civilDawn": "Civil Dawn",
    "blueHourDawnEnd": "Blue Hour Dawn End",
    "goldenHourDawnStart": "Golden Hour Dawn Start",
    "sunriseStart": "Sunrise Start",
    "sunriseEnd": "Sunrise End",
    "goldenHourDawnEnd": "Golden Hour Dawn End",
    "solarNoon": "Solar Noon",
    "goldenHourDuskStart": "Golden Hour Dusk Start",
    "sunsetStart": "Sunset Start",
    "sunsetEnd": "Sunset End",
    "goldenHourDuskEnd": "Golden Hour Dusk End",
    "blueHourDuskStart": "Blue Hour Dusk Start",
    "civilDusk": "Civil Dusk",
    "blueHourDuskEnd": "Blue Hour Dusk End",
    "nauticalDusk": "Nautical Dusk",
    "amateurDusk": "Amateur Dusk",
    "astronomicalDusk": "Astronomical Dusk",
    "nadir": "Solar Nadir",
}


class PhaseResolutionError(EphemerisError):
    """Raised when *now* is not bracketed by the assembled timeline."""


@dataclass(frozen=True)
class PhaseWindow:
    """One boundary of the day-phase timeline."""

    name: str
    instant: datetime
    is_valid: bool = True

    @property
    def label(self) -> str:
        return PHASE_LABELS.get(self.name, self.name)


@dataclass(frozen=True)
class TimeInterval:
    days: int
    hours: int
    minutes: int
    seconds: int


@dataclass(frozen=True)
class ResolvedPhase:
    """The phase in progress and the boundary that ends it."""

    current_part: PhaseWindow
    upcoming_part: PhaseWindow

    @property
    def duration(self) -> timedelta:
        return self.upcoming_part.instant - self.current_part.instant

    def time_left(self, now: datetime) -> timedelta:
        return self.upcoming_part.instant - now

    def progress(self, now: datetime) -> float:
        """Fraction of the current phase elapsed at *now*, within ``[0, 1]``."""

        total = self.duration.total_seconds()
        if total <= 0:
            return 1.0
        elapsed = (now - self.current_part.instant).total_seconds()
        return min(1.0, max(0.0, elapsed / total))


def interval_between(a: datetime, b: datetime) -> TimeInterval:
    """Split the absolute difference between *a* and *b* into whole units."""

    remaining = int(abs((a - b).total_seconds()))
    days, remaining = divmod(remaining, 86400)
    hours, remaining = divmod(remaining, 3600)
    minutes, seconds = divmod(remaining, 60)
    return TimeInterval(days=days, hours=hours, minutes=minutes, seconds=seconds)


def build_timeline(
    now: datetime,
    lat: float,
    lon: float,
    engine: Optional[Ephemeris] = None,
    phase_order: Optional[Sequence[str]] = None,
) -> List[PhaseWindow]:
    """Concatenate yesterday's, today's and tomorrow's events around *now*.

    Each day contributes its canonical events in *phase_order*, which
    defaults to the engine's ordinal ordering.
    """

    engine = engine if engine is not None else default_engine()
    order = list(phase_order) if phase_order is not None else engine.phase_order()

    timeline: List[PhaseWindow] = []
    for offset in (-1, 0, 1):
        events = engine.compute_day_events(
            now + timedelta(days=offset), lat, lon, use_utc_noon_anchor=True
        )
        for name in order:
            try:
                event = events[name]
            except KeyError as exc:
                raise InvalidInputError(f"Unknown phase name: {name}") from exc
            timeline.append(PhaseWindow(event.name, event.instant, event.is_valid))
    return timeline


def resolve(
    now: datetime,
    lat: float,
    lon: float,
    engine: Optional[Ephemeris] = None,
    phase_order: Optional[Sequence[str]] = None,
) -> ResolvedPhase:
    """Find the phase boundaries bracketing *now*.

    The upcoming part is the first timeline entry strictly later than
    *now*; the current part is the entry just before it.

    Raises
    ------
    PhaseResolutionError
        If *now* falls outside the three-day timeline.
    """

    timeline = build_timeline(now, lat, lon, engine, phase_order)
    for index, window in enumerate(timeline):
        if window.instant > now:
            if index == 0:
                break
            return ResolvedPhase(current_part=timeline[index - 1], upcoming_part=window)

    LOGGER.error(
        json.dumps(
            {
                "event": "phase_unresolved",
                "now": now.isoformat(),
                "lat": lat,
                "lon": lon,
                "entries": len(timeline),
            }
        )
    )
    raise PhaseResolutionError(f"{now.isoformat()} is outside the computed phase timeline")
