"""
Call sheet document export endpoints.

    GET /api/v1/call-sheets/<id>/export/xlsx       — workbook download
    GET /api/v1/call-sheets/<id>/export/pdf        — A4 landscape PDF download
    GET /api/v1/call-sheets/<id>/preview           — HTML print preview
        print: true | false (default: false) — open the print dialog on load

Documents are rendered in memory from one snapshot of the call sheet; no
temp files. A render failure answers 500 JSON, never partial bytes.
"""

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from callsheet.core.exceptions import NotFoundError, RenderError
from callsheet.services import call_sheet_layout as layout
from callsheet.services.call_sheet_service import call_sheet_snapshot
from callsheet.services.export_service import export_call_sheet_xlsx
from callsheet.services.pdf_export_service import (
    DEFAULT_FONT_NAME,
    export_call_sheet_html,
    export_call_sheet_pdf,
)
from callsheet.utils.errors import E, api_error

logger = logging.getLogger(__name__)

export_bp = Blueprint("export", __name__, url_prefix="/api/v1")

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIMETYPE = "application/pdf"


@export_bp.errorhandler(NotFoundError)
def _handle_not_found(error: NotFoundError):
    return api_error(E.NOT_FOUND, str(error))


@export_bp.errorhandler(RenderError)
def _handle_render_error(error: RenderError):
    logger.error(
        "Call sheet %s render failed endpoint=%s: %s",
        error.document, request.endpoint, error.cause,
        exc_info=error.cause,
        extra={"document": error.document},
    )
    return jsonify({"error": "Export failed. Please try again."}), 500


@export_bp.errorhandler(Exception)
def _handle_unexpected(error: Exception):
    logger.exception("Unexpected export error endpoint=%s", request.endpoint)
    return jsonify({"error": "Export failed. Please try again."}), 500


def _attachment(content: bytes, mimetype: str, filename: str) -> Response:
    return Response(
        content,
        mimetype=mimetype,
        headers={"Content-Disposition": layout.content_disposition(filename)},
    )


@export_bp.route("/call-sheets/<int:call_sheet_id>/export/xlsx", methods=["GET"])
def export_xlsx(call_sheet_id: int):
    """Download the call sheet as an .xlsx workbook (one or two sheets)."""
    cs = call_sheet_snapshot(call_sheet_id)
    content = export_call_sheet_xlsx(cs, creator=current_app.config.get("APP_NAME"))
    return _attachment(content, XLSX_MIMETYPE, layout.build_filename(cs, "xlsx"))


@export_bp.route("/call-sheets/<int:call_sheet_id>/export/pdf", methods=["GET"])
def export_pdf(call_sheet_id: int):
    """Download the call sheet as a PDF (one or two A4 landscape pages)."""
    cs = call_sheet_snapshot(call_sheet_id)
    cfg = current_app.config
    content = export_call_sheet_pdf(
        cs,
        font_name=cfg.get("PDF_FONT_NAME") or DEFAULT_FONT_NAME,
        font_path=cfg.get("PDF_FONT_PATH"),
        creator=cfg.get("APP_NAME"),
    )
    return _attachment(content, PDF_MIMETYPE, layout.build_filename(cs, "pdf"))


@export_bp.route("/call-sheets/<int:call_sheet_id>/preview", methods=["GET"])
def preview(call_sheet_id: int):
    cs = call_sheet_snapshot(call_sheet_id)
    print_mode = request.args.get("print", "false").lower() in ("1", "true", "yes")
    html = export_call_sheet_html(cs, print_mode=print_mode)
    return Response(html, mimetype="text/html")
