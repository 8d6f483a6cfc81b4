"""
Weather forecast gateway (WeatherAPI.com forecast endpoint).

All outbound HTTP calls to the weather provider go through this class.
Direct `requests` calls in services or blueprints are FORBIDDEN.

  - Single attempt, no retry: the form simply asks again.
  - Timeout: WEATHER_TIMEOUT seconds (default 10).
  - Structured result returned to the caller; the gateway never raises for
    HTTP or network failures.

Testability: pass a fake `session` to WeatherGateway() in tests instead of
letting it create a real requests.Session internally.
"""

from __future__ import annotations

import logging
import math
import time

import requests

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10
DEFAULT_FORECAST_URL = "https://api.weatherapi.com/v1/forecast.json"

# Provider condition code → Korean label; unknown codes fall back to the provider text
CONDITION_LABELS = {
    1000: "맑음",
    1003: "구름조금",
    1006: "구름많음",
    1009: "흐림",
    1030: "안개",
    1063: "가끔 비",
    1066: "가끔 눈",
    1069: "가끔 진눈깨비",
    1072: "가끔 이슬비",
    1087: "천둥",
    1114: "눈보라",
    1117: "폭설",
    1135: "안개",
    1147: "짙은안개",
    1150: "이슬비",
    1153: "이슬비",
    1168: "이슬비",
    1171: "이슬비",
    1180: "비",
    1183: "비",
    1186: "비",
    1189: "비",
    1192: "폭우",
    1195: "폭우",
    1198: "진눈깨비",
    1201: "진눈깨비",
    1204: "진눈깨비",
    1207: "진눈깨비",
    1210: "눈",
    1213: "눈",
    1216: "눈",
    1219: "눈",
    1222: "폭설",
    1225: "폭설",
    1237: "우박",
    1240: "소나기",
    1243: "소나기",
    1246: "폭우",
    1249: "진눈깨비",
    1252: "진눈깨비",
    1255: "눈",
    1258: "눈",
    1261: "우박",
    1264: "우박",
    1273: "뇌우",
    1276: "뇌우",
    1279: "뇌우+눈",
    1282: "뇌우+폭설",
}


class GatewayResult:
    """Structured return value from WeatherGateway calls.

    Attributes:
        ok:           True if the call succeeded (HTTP 2xx + JSON body).
        status_code:  HTTP status code (None if network-level failure).
        data:         Parsed JSON response body, else None.
        error:        Human-readable error message or None.
        duration_ms:  Round-trip latency in milliseconds.
    """

    def __init__(
        self,
        ok: bool,
        status_code: int | None,
        data: dict | None,
        error: str | None,
        duration_ms: int,
    ) -> None:
        self.ok = ok
        self.status_code = status_code
        self.data = data
        self.error = error
        self.duration_ms = duration_ms

    def __repr__(self):
        return f"<GatewayResult ok={self.ok} status={self.status_code} error={self.error!r}>"


def to_24_hour(value: str) -> str:
    """'06:12 AM' → '06:12', '07:45 PM' → '19:45'; anything else is returned unchanged."""
    parts = (value or "").split(" ")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return value
    clock, modifier = parts[0], parts[1].upper()
    hours, _, minutes = clock.partition(":")
    if not hours or not minutes:
        return value
    try:
        hour = int(hours)
    except ValueError:
        return value
    if modifier == "PM" and hour != 12:
        hour += 12
    elif modifier == "AM" and hour == 12:
        hour = 0
    return f"{hour:02d}:{minutes}"


def _round_half_up(value) -> int:
    return math.floor(float(value) + 0.5)


def parse_forecast(data: dict | None) -> dict | None:
    """Extract the call sheet weather snapshot from a forecast body.

    Returns None when the body holds no forecast day.
    """
    days = ((data or {}).get("forecast") or {}).get("forecastday") or []
    if not days:
        return None
    day = days[0].get("day") or {}
    astro = days[0].get("astro") or {}
    condition = day.get("condition") or {}

    weather = CONDITION_LABELS.get(condition.get("code")) or condition.get("text")
    return {
        "weather": weather,
        "temp_min": f"{_round_half_up(day['mintemp_c'])}℃" if day.get("mintemp_c") is not None else None,
        "temp_max": f"{_round_half_up(day['maxtemp_c'])}℃" if day.get("maxtemp_c") is not None else None,
        "precipitation": (
            f"{day['daily_chance_of_rain']}%" if day.get("daily_chance_of_rain") is not None else None
        ),
        "sunrise": to_24_hour(astro.get("sunrise")) if astro.get("sunrise") else None,
        "sunset": to_24_hour(astro.get("sunset")) if astro.get("sunset") else None,
    }


class WeatherGateway:
    """WeatherAPI.com forecast client.

    Usage:
        gateway = WeatherGateway(api_key=key)
        result = gateway.fetch_forecast("서울 강남구", "2024-03-15")
        if result.ok:
            snapshot = parse_forecast(result.data)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_FORECAST_URL,
        timeout: int = _DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        # Inject custom session for testing; create real one lazily otherwise.
        self._session: requests.Session | None = session

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def fetch_forecast(self, location: str, date: str) -> GatewayResult:
        """GET the forecast for one place and day (Korean condition text).

        Returns:
            GatewayResult — always returns (never raises). Callers check .ok.
        """
        params = {"key": self.api_key, "q": location, "dt": date, "lang": "ko"}
        t0 = time.perf_counter()
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            duration_ms = int((time.perf_counter() - t0) * 1000)
            logger.warning("Weather request failed location=%s date=%s: %s", location, date, exc)
            return GatewayResult(ok=False, status_code=None, data=None,
                                 error=str(exc), duration_ms=duration_ms)
        duration_ms = int((time.perf_counter() - t0) * 1000)

        try:
            body = resp.json()
        except ValueError:
            body = None

        if not 200 <= resp.status_code < 300:
            message = None
            if isinstance(body, dict):
                error = body.get("error")
                message = error.get("message") if isinstance(error, dict) else error
            logger.warning(
                "Weather provider returned %s location=%s date=%s: %s",
                resp.status_code, location, date, message,
            )
            return GatewayResult(ok=False, status_code=resp.status_code, data=body,
                                 error=message or f"HTTP {resp.status_code}",
                                 duration_ms=duration_ms)

        if not isinstance(body, dict):
            return GatewayResult(ok=False, status_code=resp.status_code, data=None,
                                 error="Weather provider returned a non-JSON body",
                                 duration_ms=duration_ms)

        logger.debug("Weather forecast fetched location=%s date=%s (%dms)", location, date, duration_ms)
        return GatewayResult(ok=True, status_code=resp.status_code, data=body,
                             error=None, duration_ms=duration_ms)
