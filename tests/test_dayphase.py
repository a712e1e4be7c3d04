from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from core.astro import Ephemeris, InvalidInputError
from core.dayphase import (
    PHASE_LABELS,
    PhaseWindow,
    ResolvedPhase,
    TimeInterval,
    build_timeline,
    interval_between,
    resolve,
)

EQUINOX = datetime(2025, 3, 20, 12, tzinfo=UTC)


@pytest.fixture
def engine() -> Ephemeris:
    return Ephemeris()


def test_resolve_around_sunrise(engine: Ephemeris) -> None:
    sunrise = engine.compute_day_events(EQUINOX, 0.0, 0.0, use_utc_noon_anchor=True)[
        "sunriseStart"
    ].instant

    after = resolve(sunrise + timedelta(seconds=1), 0.0, 0.0, engine)
    assert after.current_part.name == "sunriseStart"
    assert after.current_part.instant == sunrise
    assert after.upcoming_part.name == "sunriseEnd"

    before = resolve(sunrise - timedelta(seconds=1), 0.0, 0.0, engine)
    assert before.upcoming_part.name == "sunriseStart"
    assert before.current_part.name == "goldenHourDawnStart"


def test_resolve_at_exact_boundary_starts_the_phase(engine: Ephemeris) -> None:
    noon = engine.compute_day_events(EQUINOX, 0.0, 0.0, use_utc_noon_anchor=True)[
        "solarNoon"
    ].instant
    phase = resolve(noon, 0.0, 0.0, engine)
    assert phase.current_part.name == "solarNoon"
    assert phase.upcoming_part.name == "goldenHourDuskStart"


def test_resolve_across_midnight(engine: Ephemeris) -> None:
    after_nadir = resolve(datetime(2025, 3, 20, 0, 30, tzinfo=UTC), 0.0, 0.0, engine)
    assert after_nadir.current_part.name == "nadir"
    assert after_nadir.current_part.instant.date() == datetime(2025, 3, 20).date()
    assert after_nadir.upcoming_part.name == "astronomicalDawn"

    before_nadir = resolve(datetime(2025, 3, 20, 0, 5, tzinfo=UTC), 0.0, 0.0, engine)
    assert before_nadir.current_part.name == "astronomicalDusk"
    assert before_nadir.upcoming_part.name == "nadir"


def test_resolve_accepts_any_timezone(engine: Ephemeris) -> None:
    now = datetime(2025, 3, 20, 14, tzinfo=UTC)
    shifted = now.astimezone(timezone(timedelta(hours=-5)))
    assert resolve(now, 0.0, 0.0, engine) == resolve(shifted, 0.0, 0.0, engine)


def test_timeline_spans_three_days_in_order(engine: Ephemeris) -> None:
    timeline = build_timeline(EQUINOX, 0.0, 0.0, engine)
    assert len(timeline) == 3 * len(PHASE_LABELS)
    assert [window.name for window in timeline[: len(PHASE_LABELS)]] == list(PHASE_LABELS)
    instants = [window.instant for window in timeline]
    assert instants == sorted(instants)
    assert timeline[0].instant < EQUINOX < timeline[-1].instant


def test_polar_day_still_brackets(engine: Ephemeris) -> None:
    now = datetime(2025, 6, 21, 10, tzinfo=UTC)
    phase = resolve(now, 80.0, 15.0, engine)
    assert phase.current_part.instant <= now < phase.upcoming_part.instant
    assert phase.upcoming_part.name == "solarNoon"
    assert phase.upcoming_part.is_valid
    assert phase.current_part.name == "goldenHourDawnEnd"
    assert not phase.current_part.is_valid


def test_polar_day_brackets_every_hour(engine: Ephemeris) -> None:
    start = datetime(2025, 6, 21, tzinfo=UTC)
    for hour in range(24):
        now = start + timedelta(hours=hour)
        phase = resolve(now, 80.0, 15.0, engine)
        assert phase.current_part.instant <= now < phase.upcoming_part.instant


def test_custom_phase_order(engine: Ephemeris) -> None:
    order = ["civilDawn", "solarNoon", "civilDusk", "nadir"]
    phase = resolve(datetime(2025, 3, 20, 9, tzinfo=UTC), 0.0, 0.0, engine, order)
    assert phase.current_part.name == "civilDawn"
    assert phase.upcoming_part.name == "solarNoon"

    with pytest.raises(InvalidInputError):
        resolve(EQUINOX, 0.0, 0.0, engine, ["civilDawn", "notAnEvent"])


def test_resolve_with_registered_events(engine: Ephemeris) -> None:
    assert engine.register_event(3.0, "morningLight", "eveningLight")
    assert engine.register_event(-3.0, "earlyDawn", "lateDusk")

    timeline = build_timeline(EQUINOX, 0.0, 0.0, engine)
    instants = [window.instant for window in timeline]
    assert instants == sorted(instants)

    events = engine.compute_day_events(EQUINOX, 0.0, 0.0, use_utc_noon_anchor=True)
    morning = resolve(events["morningLight"].instant + timedelta(seconds=1), 0.0, 0.0, engine)
    assert morning.current_part.name == "morningLight"
    assert morning.upcoming_part.name == "goldenHourDawnEnd"

    before_morning = resolve(events["sunriseEnd"].instant + timedelta(seconds=1), 0.0, 0.0, engine)
    assert before_morning.current_part.name == "sunriseEnd"
    assert before_morning.upcoming_part.name == "morningLight"

    early = resolve(events["earlyDawn"].instant + timedelta(seconds=1), 0.0, 0.0, engine)
    assert early.current_part.name == "earlyDawn"
    assert early.upcoming_part.name == "goldenHourDawnStart"

    evening = resolve(events["eveningLight"].instant + timedelta(seconds=1), 0.0, 0.0, engine)
    assert evening.current_part.name == "eveningLight"
    assert evening.upcoming_part.name == "sunsetStart"


def test_resolved_phase_progress() -> None:
    start = datetime(2025, 3, 20, 6, tzinfo=UTC)
    phase = ResolvedPhase(
        current_part=PhaseWindow("sunriseStart", start),
        upcoming_part=PhaseWindow("sunriseEnd", start + timedelta(minutes=4)),
    )
    now = start + timedelta(minutes=1)
    assert phase.duration == timedelta(minutes=4)
    assert phase.time_left(now) == timedelta(minutes=3)
    assert phase.progress(now) == pytest.approx(0.25)
    assert phase.progress(start - timedelta(minutes=1)) == 0.0
    assert phase.progress(start + timedelta(hours=1)) == 1.0


def test_window_labels() -> None:
    assert PhaseWindow("nadir", EQUINOX).label == "Solar Nadir"
    assert PhaseWindow("customEvent", EQUINOX).label == "customEvent"


def test_interval_between() -> None:
    a = datetime(2025, 3, 21, 8, 4, 5, 900000, tzinfo=UTC)
    b = datetime(2025, 3, 20, 6, 2, 3, tzinfo=UTC)
    assert interval_between(a, b) == TimeInterval(days=1, hours=2, minutes=2, seconds=2)
    assert interval_between(b, a) == interval_between(a, b)
    assert interval_between(a, a) == TimeInterval(0, 0, 0, 0)
