"""Weather lookup for the call sheet form.

The form asks for a forecast by place and date and copies the result into
the call sheet's weather snapshot fields. Renderers never call this.
"""

from __future__ import annotations

import logging

from flask import current_app

from callsheet.core.exceptions import NotFoundError, UpstreamError, ValidationError
from callsheet.integrations.weather_gateway import DEFAULT_FORECAST_URL, WeatherGateway, parse_forecast

logger = logging.getLogger(__name__)


class WeatherNotConfiguredError(Exception):
    """WEATHER_API_KEY is not set."""


def build_gateway() -> WeatherGateway:
    cfg = current_app.config
    if not cfg.get("WEATHER_API_KEY"):
        raise WeatherNotConfiguredError("Weather API key is not configured")
    return WeatherGateway(
        api_key=cfg["WEATHER_API_KEY"],
        base_url=cfg.get("WEATHER_API_URL") or DEFAULT_FORECAST_URL,
        timeout=cfg.get("WEATHER_TIMEOUT", 10),
    )


def lookup_weather(location: str, date: str, *, gateway: WeatherGateway | None = None) -> dict:
    """Return ``{weather, temp_min, temp_max, precipitation, sunrise, sunset}``.

    Raises:
        ValidationError: location or date missing.
        WeatherNotConfiguredError: no API key.
        UpstreamError: provider rejected the request (400 for a bad place/date).
        NotFoundError: provider has no forecast for that day.
    """
    location = (location or "").strip()
    date = (date or "").strip()
    if not location:
        raise ValidationError("location parameter is required", details={"location": "missing"})
    if not date:
        raise ValidationError("date parameter is required", details={"date": "missing"})

    gateway = gateway or build_gateway()
    result = gateway.fetch_forecast(location, date)

    if not result.ok:
        if result.status_code == 400:
            raise UpstreamError("Invalid location or date", status_code=400)
        if result.status_code is None:
            raise UpstreamError("Weather provider unreachable", status_code=502)
        raise UpstreamError("Failed to fetch weather information", status_code=result.status_code)

    snapshot = parse_forecast(result.data)
    if snapshot is None:
        raise NotFoundError(resource="WeatherForecast", resource_id=date)
    logger.info("Weather lookup location=%s date=%s → %s", location, date, snapshot["weather"])
    return snapshot
