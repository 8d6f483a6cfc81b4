"""
Tests for the document export endpoints (blueprints.export_bp).

Covers:
  - XLSX / PDF downloads: MIME type, Content-Disposition with UTF-8 filename
  - HTML preview, print mode
  - Missing call sheet → 404 JSON, no document bytes
  - Render failure → 500 JSON, no partial document
"""

import io
from urllib.parse import quote

import pytest
from openpyxl import load_workbook

from callsheet.core.exceptions import RenderError
from callsheet.services import pdf_export_service

pytestmark = pytest.mark.integration

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def test_export_xlsx(client, call_sheet):
    res = client.get(f"/api/v1/call-sheets/{call_sheet.id}/export/xlsx")
    assert res.status_code == 200
    assert res.mimetype == XLSX_MIMETYPE

    disposition = res.headers["Content-Disposition"]
    assert disposition.startswith("attachment;")
    assert f"filename*=UTF-8''{quote('[봄날의 기억]_일촬표_1회차.xlsx')}" in disposition

    wb = load_workbook(io.BytesIO(res.data))
    assert wb.sheetnames == ["일일촬영계획표", "상세정보"]


def test_export_pdf(client, call_sheet):
    res = client.get(f"/api/v1/call-sheets/{call_sheet.id}/export/pdf")
    assert res.status_code == 200
    assert res.mimetype == "application/pdf"
    assert res.data.startswith(b"%PDF")
    assert quote("[봄날의 기억]_일촬표_1회차.pdf") in res.headers["Content-Disposition"]


def test_preview_html(client, call_sheet):
    res = client.get(f"/api/v1/call-sheets/{call_sheet.id}/preview")
    assert res.status_code == 200
    assert res.mimetype == "text/html"
    body = res.get_data(as_text=True)
    assert "일일촬영계획표" in body
    assert "window.print()" not in body

    printed = client.get(f"/api/v1/call-sheets/{call_sheet.id}/preview?print=true")
    assert "window.print()" in printed.get_data(as_text=True)


@pytest.mark.parametrize("path", ["export/xlsx", "export/pdf", "preview"])
def test_missing_call_sheet_is_404(client, path):
    res = client.get(f"/api/v1/call-sheets/999/{path}")
    assert res.status_code == 404
    assert res.is_json
    assert res.get_json()["code"] == "ERR_NOT_FOUND"


def test_render_failure_returns_500_without_document(client, call_sheet, monkeypatch):
    def _boom(*args, **kwargs):
        raise RenderError("pdf", cause=MemoryError("too many scenes"))

    monkeypatch.setattr("callsheet.blueprints.export_bp.export_call_sheet_pdf", _boom)
    res = client.get(f"/api/v1/call-sheets/{call_sheet.id}/export/pdf")
    assert res.status_code == 500
    assert res.is_json
    assert res.get_json() == {"error": "Export failed. Please try again."}
    assert "Content-Disposition" not in res.headers


def test_bad_font_surfaces_as_export_failure(app, client, call_sheet, monkeypatch):
    monkeypatch.setitem(app.config, "PDF_FONT_NAME", "NoSuchFont-Medium")
    monkeypatch.setattr(pdf_export_service, "_registered_fonts", set())
    res = client.get(f"/api/v1/call-sheets/{call_sheet.id}/export/pdf")
    assert res.status_code == 500
    assert res.get_json()["error"] == "Export failed. Please try again."


def test_cli_export_writes_file(app, call_sheet, tmp_path):
    target = tmp_path / "sheet.xlsx"
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        "export-call-sheet", str(call_sheet.id), "--format", "xlsx", "--output", str(target),
    ])
    assert result.exit_code == 0, result.output
    assert target.read_bytes()[:2] == b"PK"


def test_cli_default_filename_keeps_slash_titles_in_cwd(app, call_sheet, tmp_path, monkeypatch):
    from callsheet.services import project_service

    project_service.update_project(call_sheet.project_id, {"title": "A/B 시즌2"})
    monkeypatch.chdir(tmp_path)
    result = app.test_cli_runner().invoke(args=[
        "export-call-sheet", str(call_sheet.id), "--format", "xlsx",
    ])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "[A_B 시즌2]_일촬표_1회차.xlsx").is_file()
