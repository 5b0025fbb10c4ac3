from __future__ import annotations

from pathlib import Path
from typing import Iterable

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient

from sunsetrise.offsets import OFFSET_ENV_VAR


@pytest.fixture()
def api_client(monkeypatch: pytest.MonkeyPatch) -> Iterable[TestClient]:
    monkeypatch.setenv(OFFSET_ENV_VAR, "-5")
    from sunrise_api import app

    with TestClient(app) as client:
        yield client


def test_sun_endpoint_new_york(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={"lat": 40.72, "lon": -74.02, "date": "2018-12-25", "offset_hours": -5},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["status"] == "ok"
    assert payload["date"] == "2018-12-25"
    assert payload["source"] == "NOAA"
    assert payload["sunrise"].startswith("2018-12-25T07:")
    assert payload["sunrise_utc"].startswith("2018-12-25T12:")
    assert payload["sunrise_utc"].endswith("Z")
    assert payload["sunrise"] < payload["solar_noon"] < payload["sunset"]


def test_sun_endpoint_uses_configured_offset(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun", params={"lat": 40.72, "lon": -74.02, "date": "2018-12-25"}
    )
    assert response.status_code == 200
    assert response.json()["offset_hours"] == -5.0


def test_sun_endpoint_dst_flag(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={"lat": 40.72, "lon": -74.02, "date": "2018-06-21", "offset_hours": -5, "dst": "true"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["daylight_saving"] is True
    assert payload["sunrise"].startswith("2018-06-21T05:")


def test_sun_endpoint_polar_day(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={"lat": 68.96, "lon": 32.95, "date": "2018-06-21", "offset_hours": 3},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "polar_day"
    assert payload["sunrise"] is None
    assert payload["sunset"] is None
    assert payload["sunrise_utc"] is None


def test_validation_error(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun",
        params={
            "lat": 95,  # invalid latitude
            "lon": 0,
            "date": "2018-06-21",
        },
    )
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["ok"] is False


def test_invalid_offset_config_is_bad_request(
    api_client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(OFFSET_ENV_VAR, "CET")
    response = api_client.get("/sun", params={"lat": 0, "lon": 0, "date": "2018-06-21"})
    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "http_400"
    assert "SUNSETRISE_UTC_OFFSET" in payload["error"]


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["source"] == "NOAA"
    assert payload["offset_source"] == "env"
