"""
Call Sheet Planner
XLSX export for daily call sheets.

Sheet 1 (일일촬영계획표) mirrors the first PDF page: title, info grid, scene
table and notes. Sheet 2 (상세정보) holds schedule, staff, details and cast,
and is only created when at least one of them has content.

All cell values come from services.call_sheet_layout so the workbook and
the PDF print the same text.
"""

import io
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from callsheet.core.exceptions import RenderError
from callsheet.services import call_sheet_layout as layout

logger = logging.getLogger(__name__)

SUMMARY_SHEET_TITLE = "일일촬영계획표"
DETAIL_SHEET_TITLE = "상세정보"
DEFAULT_CREATOR = "Call Sheet Planner"

HEADER_FILL = PatternFill(start_color="354A5F", end_color="354A5F", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True, size=10)
INFO_HEADER_FILL = PatternFill(start_color="F0F0F0", end_color="F0F0F0", fill_type="solid")
INFO_HEADER_FONT = Font(bold=True, size=10)
TITLE_FONT = Font(size=16, bold=True)
SECTION_FONT = Font(size=11, bold=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)
CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
WRAP = Alignment(vertical="top", wrap_text=True)

SCENE_COL_COUNT = len(layout.SCENE_COLUMNS)
DETAIL_VALUE_FIRST_COL = 2   # B
DETAIL_VALUE_LAST_COL = 7    # G


def _apply_header_style(ws, row: int, col_count: int, start_col: int = 1):
    """Dark fill, white bold font, centered, bordered."""
    for col in range(start_col, start_col + col_count):
        cell = ws.cell(row=row, column=col)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = CENTER
        cell.border = THIN_BORDER


def _border_range(ws, row: int, first_col: int, last_col: int):
    for col in range(first_col, last_col + 1):
        ws.cell(row=row, column=col).border = THIN_BORDER


def _text_cell(ws, row: int, column: int, value):
    """Write ``value`` as literal text. A leading "=" stays text, never a formula."""
    cell = ws.cell(row=row, column=column, value=value)
    if isinstance(value, str):
        cell.data_type = "s"
    return cell


def _merged_text(ws, row: int, first_col: int, last_col: int, value, alignment=WRAP):
    """Write ``value`` into a (possibly) merged horizontal range and border it."""
    cell = _text_cell(ws, row, first_col, value)
    cell.alignment = alignment
    if last_col > first_col:
        ws.merge_cells(start_row=row, start_column=first_col, end_row=row, end_column=last_col)
    _border_range(ws, row, first_col, last_col)
    return cell


def _row_height(texts, base: float = 18, line: float = 13) -> float:
    lines = max((str(t).count("\n") + 1 for t in texts if t), default=1)
    return max(base, lines * line + 4)


# ── Sheet 1 ──────────────────────────────────────────────────────────────────

def _write_info_grid(ws, cs: dict, first_row: int) -> int:
    row = first_row
    for grid_row in layout.build_info_grid(cs):
        col = 1
        for info in grid_row:
            last = col + info.span - 1
            cell = _merged_text(
                ws, row, col, last, info.text,
                alignment=CENTER if info.header else Alignment(vertical="center", wrap_text=True),
            )
            if info.header:
                cell.fill = INFO_HEADER_FILL
                cell.font = INFO_HEADER_FONT
            col = last + 1
        ws.row_dimensions[row].height = 20
        row += 1
    return row


def _write_scene_table(ws, cs: dict, first_row: int) -> int:
    row = first_row
    ws.cell(row=row, column=1, value=layout.SECTION_SCENES).font = SECTION_FONT
    row += 1

    for col, header in enumerate(layout.SCENE_HEADERS, 1):
        ws.cell(row=row, column=col, value=header)
    _apply_header_style(ws, row, SCENE_COL_COUNT)
    ws.row_dimensions[row].height = 28
    row += 1

    rows = layout.SceneRowFormatter().format_rows(cs.get("scenes"))
    if not rows:
        _merged_text(ws, row, 1, SCENE_COL_COUNT, layout.NO_SCENES_TEXT, alignment=CENTER)
        ws.row_dimensions[row].height = 30
        return row + 1

    for values in rows:
        for col, (column, value) in enumerate(zip(layout.SCENE_COLUMNS, values), 1):
            cell = _text_cell(ws, row, col, value)
            cell.border = THIN_BORDER
            cell.alignment = CENTER if column.centered else WRAP
        ws.row_dimensions[row].height = _row_height(values)
        row += 1
    return row


def _write_notes(ws, cs: dict, first_row: int) -> int:
    notes = cs.get("general_notes") or ""
    if not notes.strip():
        return first_row
    row = first_row + 1
    ws.cell(row=row, column=1, value=layout.SECTION_NOTES).font = SECTION_FONT
    row += 1
    _merged_text(ws, row, 1, SCENE_COL_COUNT, notes)
    ws.row_dimensions[row].height = _row_height([notes], base=40)
    return row + 1


def _build_summary_sheet(ws, cs: dict):
    ws.title = SUMMARY_SHEET_TITLE

    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=SCENE_COL_COUNT)
    ws["A1"] = layout.document_title(cs)
    ws["A1"].font = TITLE_FONT
    ws["A1"].alignment = Alignment(horizontal="center", vertical="center")
    ws.row_dimensions[1].height = 28

    row = _write_info_grid(ws, cs, first_row=3)
    row = _write_scene_table(ws, cs, first_row=row + 1)
    _write_notes(ws, cs, first_row=row)

    for col, column in enumerate(layout.SCENE_COLUMNS, 1):
        ws.column_dimensions[get_column_letter(col)].width = column.xlsx_width

    ws.page_setup.orientation = "landscape"
    ws.page_setup.paperSize = ws.PAPERSIZE_A4
    ws.page_setup.fitToWidth = 1
    ws.page_setup.fitToHeight = 0
    ws.sheet_properties.pageSetUpPr.fitToPage = True


# ── Sheet 2 ──────────────────────────────────────────────────────────────────

def _write_section_label(ws, row: int, label: str) -> int:
    ws.cell(row=row + 1, column=1, value=label).font = SECTION_FONT
    return row + 2


def _write_table(ws, table: layout.SecondaryTable, first_row: int) -> int:
    row = _write_section_label(ws, first_row, table.label)
    for col, header in enumerate(table.headers, 1):
        ws.cell(row=row, column=col, value=header)
    _apply_header_style(ws, row, len(table.headers))
    row += 1
    for values in table.rows:
        for col, value in enumerate(values, 1):
            cell = _text_cell(ws, row, col, value)
            cell.border = THIN_BORDER
            cell.alignment = WRAP
        ws.row_dimensions[row].height = _row_height(values)
        row += 1
    return row


def _write_details(ws, cs: dict, first_row: int) -> int:
    row = _write_section_label(ws, first_row, layout.SECTION_DETAILS)
    ws.cell(row=row, column=1, value="구분")
    ws.cell(row=row, column=DETAIL_VALUE_FIRST_COL, value="내용")
    ws.merge_cells(
        start_row=row, start_column=DETAIL_VALUE_FIRST_COL,
        end_row=row, end_column=DETAIL_VALUE_LAST_COL,
    )
    _apply_header_style(ws, row, DETAIL_VALUE_LAST_COL)
    row += 1
    for label, value in layout.detail_items(cs):
        label_cell = _text_cell(ws, row, 1, label)
        label_cell.font = INFO_HEADER_FONT
        label_cell.fill = INFO_HEADER_FILL
        label_cell.alignment = CENTER
        label_cell.border = THIN_BORDER
        _merged_text(ws, row, DETAIL_VALUE_FIRST_COL, DETAIL_VALUE_LAST_COL, value)
        ws.row_dimensions[row].height = _row_height([value], base=30)
        row += 1
    return row


def _build_detail_sheet(ws, cs: dict, sections: layout.DocumentSections):
    cast = layout.cast_table(cs)
    width = len(cast.headers)

    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=width)
    ws["A1"] = layout.detail_title(cs)
    ws["A1"].font = TITLE_FONT
    ws["A1"].alignment = Alignment(horizontal="center", vertical="center")
    ws.row_dimensions[1].height = 28

    tables = []
    row = 2
    if sections.has_schedules:
        table = layout.schedule_table(cs)
        tables.append(table)
        row = _write_table(ws, table, row)
    if sections.has_staff:
        table = layout.staff_table(cs)
        tables.append(table)
        row = _write_table(ws, table, row)
    if sections.has_details:
        row = _write_details(ws, cs, row)
    if sections.has_cast:
        tables.append(cast)
        row = _write_table(ws, cast, row)

    widths = list(cast.xlsx_widths)
    for table in tables:
        for i, w in enumerate(table.xlsx_widths):
            widths[i] = max(widths[i], w)
    for col, w in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(col)].width = w

    ws.page_setup.orientation = "landscape"
    ws.page_setup.paperSize = ws.PAPERSIZE_A4
    ws.page_setup.fitToWidth = 1
    ws.page_setup.fitToHeight = 0
    ws.sheet_properties.pageSetUpPr.fitToPage = True


def export_call_sheet_xlsx(cs: dict, creator: str = DEFAULT_CREATOR) -> bytes:
    """
    Generate the call sheet workbook.

    ``cs`` is the full call sheet snapshot (children and project included).
    Returns the XLSX file as bytes; raises RenderError instead of returning
    a partial workbook.
    """
    try:
        wb = Workbook()
        wb.properties.creator = creator

        _build_summary_sheet(wb.active, cs)

        sections = layout.DocumentSections.from_call_sheet(cs)
        if sections.has_second_page:
            _build_detail_sheet(wb.create_sheet(DETAIL_SHEET_TITLE), cs, sections)

        buf = io.BytesIO()
        wb.save(buf)
    except Exception as exc:
        raise RenderError("xlsx", cause=exc) from exc

    logger.info(
        "Rendered call sheet xlsx: id=%s sheets=%d",
        cs.get("id"), len(wb.sheetnames),
        extra={"call_sheet_id": cs.get("id"), "document": "xlsx"},
    )
    return buf.getvalue()
