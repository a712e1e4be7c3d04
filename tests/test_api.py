from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterable[TestClient]:
    monkeypatch.setenv("SUNPHASE_LOCATION_FILE", str(tmp_path / "location.json"))
    monkeypatch.delenv("SUNPHASE_EVENTS_FILE", raising=False)
    monkeypatch.delenv("SUNPHASE_LOCATION_MAX_AGE_S", raising=False)
    from sunphase_api import app

    with TestClient(app) as client:
        yield client


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["table_frozen"] is True
    assert "sunriseStart" in payload["events"]
    assert "dawn" in payload["aliases"]


def test_times_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/times", params={"lat": 0, "lon": 0, "day": "2025-03-20", "aliases": "true"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    events = payload["events"]
    assert events["sunriseStart"]["utc"].startswith("2025-03-20T06:05")
    assert events["sunsetEnd"]["utc"].startswith("2025-03-20T18:12")
    assert events["sunrise"]["deprecated"] is True
    assert events["sunrise"]["position"] == -2


def test_times_endpoint_polar_day(api_client: TestClient) -> None:
    response = api_client.get("/times", params={"lat": 80, "lon": 15, "day": "2025-06-21"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "polar_day"
    assert payload["events"]["civilDawn"]["valid"] is False
    assert payload["events"]["solarNoon"]["valid"] is True


def test_position_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/position", params={"lat": 0, "lon": 0, "at": "2025-03-20T12:08:46Z"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["altitude_degrees"] > 89.0
    assert payload["at"] == "2025-03-20T12:08:46Z"


def test_elevation_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/elevation", params={"lat": 0, "lon": 0, "day": "2025-03-20", "angle": 0}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["rise"]["utc"].startswith("2025-03-20T06:05")
    assert payload["set"]["valid"] is True


def test_phase_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/phase", params={"lat": 0, "lon": 0, "at": "2025-03-20T00:30:00Z"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["current_part"]["name"] == "nadir"
    assert payload["current_part"]["label"] == "Solar Nadir"
    assert payload["upcoming_part"]["name"] == "astronomicalDawn"
    assert payload["location_current"] is True
    assert 0.0 <= payload["progress"] <= 1.0
    assert payload["time_left"]["hours"] == 4
    assert payload["time_left_seconds"] > 0


def test_phase_uses_stored_location(api_client: TestClient) -> None:
    stale = api_client.get("/phase")
    assert stale.status_code == 200
    assert stale.json()["location_current"] is False
    assert stale.json()["latitude"] == pytest.approx(1.3521)

    update = api_client.put("/location", json={"latitude": 51.5074, "longitude": -0.1278})
    assert update.status_code == 200

    fresh = api_client.get("/phase")
    assert fresh.status_code == 200
    assert fresh.json()["location_current"] is True
    assert fresh.json()["latitude"] == pytest.approx(51.5074)


def test_phase_requires_both_coordinates(api_client: TestClient) -> None:
    response = api_client.get("/phase", params={"lat": 10})
    assert response.status_code == 400
    assert response.json()["code"] == "http_400"


def test_validation_error(api_client: TestClient) -> None:
    response = api_client.get(
        "/times",
        params={
            "lat": 95,  # invalid latitude
            "lon": 0,
            "day": "2025-10-21",
        },
    )
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["ok"] is False
