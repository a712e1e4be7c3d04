"""Solar ephemeris and day-phase utilities for the Sunphase API."""

from .astro import (
    DEFAULT_ALIASES,
    DEFAULT_EVENTS,
    Ephemeris,
    EphemerisError,
    EventTable,
    InvalidInputError,
    compute_day_events,
    compute_position,
    compute_single_elevation_events,
    configure_ephemeris,
    register_alias,
    register_event,
)
from .dayphase import PHASE_LABELS, PhaseResolutionError, ResolvedPhase, resolve

__all__ = [
    "DEFAULT_ALIASES",
    "DEFAULT_EVENTS",
    "PHASE_LABELS",
    "Ephemeris",
    "EphemerisError",
    "EventTable",
    "InvalidInputError",
    "PhaseResolutionError",
    "ResolvedPhase",
    "compute_day_events",
    "compute_position",
    "compute_single_elevation_events",
    "configure_ephemeris",
    "register_alias",
    "register_event",
    "resolve",
]
