"""
Rate limiting configuration.

Applies per-blueprint rate limits using Flask-Limiter.
The Limiter instance is created in callsheet/__init__.py with no default
limits; this module applies granular limits per route category.

Usage:
    from callsheet.middleware.rate_limiter import init_rate_limits
    init_rate_limits(app, limiter)
"""

import logging

logger = logging.getLogger(__name__)

# Blueprint name -> limit string (per remote IP)
BLUEPRINT_LIMITS = {
    # Weather proxies a metered third-party API
    "weather": "30/minute",
    # Document renders are CPU-heavy
    "export": "20/minute",
    "project": "120/minute",
    "call_sheet": "120/minute",
}


def init_rate_limits(app, limiter):
    """
    Apply rate limits to API blueprints.

    Limits (per remote IP):
        - Weather lookup:   30/minute
        - PDF/XLSX export:  20/minute
        - CRUD endpoints:   120/minute
        - Health check:     exempt

    Rate limiting is disabled in testing mode.
    """

    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    for bp_name, limit in BLUEPRINT_LIMITS.items():
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(limit)(bp)

    bp = app.blueprints.get("health")
    if bp:
        limiter.exempt(bp)

    app.logger.info(
        "Rate limiter configured: weather 30/min, export 20/min, crud 120/min"
    )
