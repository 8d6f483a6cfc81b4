"""Unit tests for integrations.weather_gateway and the /weather endpoint.

Test strategy
-------------
No real weather provider is contacted. The gateway gets a fake `session`
injected; endpoint tests patch `weather_service.build_gateway` so the
blueprint talks to a gateway backed by that fake session.

Coverage
--------
    1. parse_forecast maps condition codes, rounds temperatures, converts 12h → 24h
    2. Unknown condition code falls back to the provider text
    3. fetch_forecast sends key/q/dt/lang params and never raises
    4. Endpoint error mapping: 400 missing params, 400 bad place, 502 network,
       404 no forecast day, 500 not configured
"""

import pytest
import requests

from callsheet.integrations.weather_gateway import (
    CONDITION_LABELS,
    WeatherGateway,
    parse_forecast,
    to_24_hour,
)
from callsheet.services import weather_service


def _forecast_body(code=1000, text="Sunny", mintemp=3.5, maxtemp=14.4, rain=20):
    return {
        "location": {"name": "Seoul"},
        "forecast": {
            "forecastday": [
                {
                    "date": "2024-03-15",
                    "day": {
                        "mintemp_c": mintemp,
                        "maxtemp_c": maxtemp,
                        "daily_chance_of_rain": rain,
                        "condition": {"code": code, "text": text},
                    },
                    "astro": {"sunrise": "06:41 AM", "sunset": "06:39 PM"},
                }
            ]
        },
    }


class _FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class _FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


# ── Parsing ─────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "raw, expected",
    [("06:12 AM", "06:12"), ("07:45 PM", "19:45"), ("12:05 AM", "00:05"), ("12:30 PM", "12:30"),
     ("18:00", "18:00")],
)
def test_to_24_hour(raw, expected):
    assert to_24_hour(raw) == expected


def test_parse_forecast_maps_condition_and_rounds():
    snapshot = parse_forecast(_forecast_body(code=1189, mintemp=3.5, maxtemp=14.4, rain=80))
    assert snapshot == {
        "weather": "비",
        "temp_min": "4℃",
        "temp_max": "14℃",
        "precipitation": "80%",
        "sunrise": "06:41",
        "sunset": "18:39",
    }


def test_parse_forecast_unknown_code_uses_provider_text():
    assert parse_forecast(_forecast_body(code=9999, text="화산재"))["weather"] == "화산재"


def test_parse_forecast_without_days():
    assert parse_forecast({"forecast": {"forecastday": []}}) is None
    assert parse_forecast(None) is None


def test_condition_table_covers_thunderstorms():
    assert CONDITION_LABELS[1000] == "맑음"
    assert CONDITION_LABELS[1282] == "뇌우+폭설"


# ── Gateway ─────────────────────────────────────────────────────────────────


def test_fetch_forecast_success_sends_params():
    session = _FakeSession(_FakeResponse(200, _forecast_body()))
    gateway = WeatherGateway(api_key="k", base_url="http://weather.test/forecast", timeout=3, session=session)

    result = gateway.fetch_forecast("서울 강남구", "2024-03-15")
    assert result.ok
    assert result.status_code == 200
    assert session.calls[0]["params"] == {"key": "k", "q": "서울 강남구", "dt": "2024-03-15", "lang": "ko"}
    assert session.calls[0]["timeout"] == 3


def test_fetch_forecast_provider_error():
    body = {"error": {"code": 1006, "message": "No matching location found."}}
    gateway = WeatherGateway(api_key="k", session=_FakeSession(_FakeResponse(400, body)))
    result = gateway.fetch_forecast("nowhere", "2024-03-15")
    assert not result.ok
    assert result.status_code == 400
    assert result.error == "No matching location found."


def test_fetch_forecast_network_failure_does_not_raise():
    gateway = WeatherGateway(api_key="k", session=_FakeSession(exc=requests.ConnectionError("down")))
    result = gateway.fetch_forecast("서울", "2024-03-15")
    assert not result.ok
    assert result.status_code is None
    assert "down" in result.error


def test_fetch_forecast_non_json_body():
    gateway = WeatherGateway(api_key="k", session=_FakeSession(_FakeResponse(200, None)))
    assert not gateway.fetch_forecast("서울", "2024-03-15").ok


# ── Endpoint ────────────────────────────────────────────────────────────────


@pytest.fixture()
def fake_gateway(monkeypatch):
    """Route the endpoint to a gateway backed by a settable fake session."""
    session = _FakeSession()
    monkeypatch.setattr(
        weather_service, "build_gateway", lambda: WeatherGateway(api_key="k", session=session),
    )
    return session


def test_weather_endpoint_success(client, fake_gateway):
    fake_gateway.response = _FakeResponse(200, _forecast_body())
    res = client.get("/api/v1/weather?location=서울&date=2024-03-15")
    assert res.status_code == 200
    data = res.get_json()
    assert data["weather"] == "맑음"
    assert data["sunset"] == "18:39"


def test_weather_endpoint_missing_params(client, fake_gateway):
    res = client.get("/api/v1/weather?location=서울")
    assert res.status_code == 400
    assert fake_gateway.calls == []


def test_weather_endpoint_bad_location(client, fake_gateway):
    fake_gateway.response = _FakeResponse(400, {"error": {"message": "No matching location found."}})
    res = client.get("/api/v1/weather?location=xx&date=2024-03-15")
    assert res.status_code == 400
    assert res.get_json()["error"] == "Invalid location or date"


def test_weather_endpoint_network_failure(client, fake_gateway):
    fake_gateway.exc = requests.Timeout("slow")
    res = client.get("/api/v1/weather?location=서울&date=2024-03-15")
    assert res.status_code == 502


def test_weather_endpoint_no_forecast_day(client, fake_gateway):
    fake_gateway.response = _FakeResponse(200, {"forecast": {"forecastday": []}})
    res = client.get("/api/v1/weather?location=서울&date=2030-01-01")
    assert res.status_code == 404


def test_weather_endpoint_not_configured(app, client, monkeypatch):
    monkeypatch.setitem(app.config, "WEATHER_API_KEY", None)
    res = client.get("/api/v1/weather?location=서울&date=2024-03-15")
    assert res.status_code == 500
    assert res.get_json()["code"] == "ERR_CONFIG_MISSING"
