"""
Weather lookup endpoint used by the call sheet form.

    GET /api/v1/weather?location=<place>&date=<YYYY-MM-DD>
        → {weather, temp_min, temp_max, precipitation, sunrise, sunset}
"""

import logging

from flask import Blueprint, jsonify, request

from callsheet.core.exceptions import NotFoundError, UpstreamError, ValidationError
from callsheet.services import weather_service
from callsheet.utils.errors import E, api_error

logger = logging.getLogger(__name__)

weather_bp = Blueprint("weather", __name__, url_prefix="/api/v1")


@weather_bp.errorhandler(ValidationError)
def _handle_validation(error: ValidationError):
    return api_error(E.VALIDATION_REQUIRED, str(error), details=error.details)


@weather_bp.errorhandler(weather_service.WeatherNotConfiguredError)
def _handle_not_configured(error):
    logger.error("Weather lookup requested but WEATHER_API_KEY is not set")
    return api_error(E.CONFIG_MISSING, str(error))


@weather_bp.errorhandler(UpstreamError)
def _handle_upstream(error: UpstreamError):
    return api_error(E.UPSTREAM, str(error), status=error.status_code)


@weather_bp.errorhandler(NotFoundError)
def _handle_no_forecast(error: NotFoundError):
    return api_error(E.NOT_FOUND, "No forecast available for that date")


@weather_bp.errorhandler(Exception)
def _handle_unexpected(error: Exception):
    logger.exception("Unexpected error in weather lookup")
    return api_error(E.INTERNAL, "Error while fetching weather information")


@weather_bp.route("/weather", methods=["GET"])
def get_weather():
    snapshot = weather_service.lookup_weather(
        request.args.get("location"), request.args.get("date"),
    )
    return jsonify(snapshot)
