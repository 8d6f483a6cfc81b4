"""
Call Sheet Planner
Flask Application Factory.

Usage:
    from callsheet import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os
import re

import click
from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from callsheet.config import config
from callsheet.models import db
from callsheet.middleware.logging_config import configure_logging
from callsheet.middleware.timing import init_request_timing
from callsheet.middleware.security_headers import init_security_headers
from callsheet.middleware.rate_limiter import init_rate_limits

logger = logging.getLogger(__name__)

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit — apply per-blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),  # Redis in production, memory for dev
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Security headers + request timing ────────────────────────────────
    init_security_headers(app)
    init_request_timing(app)

    app.config.setdefault("MAX_CONTENT_LENGTH", 2 * 1024 * 1024)  # 2 MB

    # ── Database tables ──────────────────────────────────────────────────
    from callsheet.models import call_sheet, project  # noqa: F401  (register models)

    # Development SQLite file lives under instance/
    os.makedirs(app.instance_path, exist_ok=True)
    with app.app_context():
        db.create_all()

    # ── Blueprints ───────────────────────────────────────────────────────
    from callsheet.blueprints.project_bp import project_bp
    from callsheet.blueprints.call_sheet_bp import call_sheet_bp
    from callsheet.blueprints.export_bp import export_bp
    from callsheet.blueprints.weather_bp import weather_bp
    from callsheet.blueprints.health_bp import health_bp

    app.register_blueprint(project_bp)
    app.register_blueprint(call_sheet_bp)
    app.register_blueprint(export_bp)
    app.register_blueprint(weather_bp)
    app.register_blueprint(health_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("export-call-sheet")
    @click.argument("call_sheet_id", type=int)
    @click.option("--format", "fmt", type=click.Choice(["pdf", "xlsx"]), default="pdf",
                  show_default=True, help="Output document type.")
    @click.option("--output", "output", type=click.Path(dir_okay=False), default=None,
                  help="Target file. Defaults to the download filename in the current directory.")
    def export_call_sheet_cmd(call_sheet_id, fmt, output):
        """Render a call sheet to a PDF or XLSX file."""
        from callsheet.services.call_sheet_layout import build_filename
        from callsheet.services.call_sheet_service import call_sheet_snapshot
        from callsheet.services.export_service import export_call_sheet_xlsx
        from callsheet.services.pdf_export_service import DEFAULT_FONT_NAME, export_call_sheet_pdf

        cs = call_sheet_snapshot(call_sheet_id)
        if fmt == "xlsx":
            content = export_call_sheet_xlsx(cs, creator=app.config["APP_NAME"])
        else:
            content = export_call_sheet_pdf(
                cs,
                font_name=app.config.get("PDF_FONT_NAME") or DEFAULT_FONT_NAME,
                font_path=app.config.get("PDF_FONT_PATH"),
                creator=app.config["APP_NAME"],
            )
        # Project titles may contain path separators; keep the file in the working directory.
        path = output or re.sub(r"[\\/]", "_", build_filename(cs, fmt))
        with open(path, "wb") as fh:
            fh.write(content)
        click.echo(f"Wrote {len(content)} bytes to {path}")

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        from flask import request
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error"}, 500

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(429)
    def rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
