"""
Call Sheet Planner
PDF export and print preview for daily call sheets.

Rendering happens in two steps:

    build_page_plan(cs)        → list[FlowPage]  (logical layout, no reportlab)
    export_call_sheet_pdf(cs)  → bytes           (reportlab platypus, A4 landscape)
    export_call_sheet_html(cs) → str             (same plan, HTML print preview)

Page 1 always exists: title, info grid, scene table and optional notes.
Page 2 exists only when the call sheet has schedule, staff, cast or detail
content. Cell text comes from services.call_sheet_layout.
"""

import io
import logging
from dataclasses import dataclass, field
from xml.sax.saxutils import escape

from flask import render_template
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from callsheet.core.exceptions import RenderError
from callsheet.services import call_sheet_layout as layout

logger = logging.getLogger(__name__)

PAGE_SIZE = landscape(A4)
PAGE_MARGIN = 20
CONTENT_WIDTH = PAGE_SIZE[0] - 2 * PAGE_MARGIN
SIDE_GAP = 12
DETAILS_PER_ROW = 3

DEFAULT_FONT_NAME = "HYGothic-Medium"
DEFAULT_CREATOR = "Call Sheet Planner"

GRID_COLOR = colors.HexColor("#333333")
INFO_HEADER_BG = colors.HexColor("#F0F0F0")
TABLE_HEADER_BG = colors.HexColor("#E5E5E5")


# ── Page plan ────────────────────────────────────────────────────────────────

@dataclass
class InfoGridBlock:
    rows: list
    kind: str = "info_grid"


@dataclass
class SectionLabel:
    text: str
    kind: str = "section"


@dataclass
class TableBlock:
    headers: list
    rows: list
    widths: list
    centered: list = field(default_factory=list)
    placeholder: str | None = None
    kind: str = "table"


@dataclass
class NotesBlock:
    text: str
    kind: str = "notes"


@dataclass
class DetailGridBlock:
    items: list
    per_row: int = DETAILS_PER_ROW
    kind: str = "detail_grid"

    def grid_rows(self) -> list:
        """Items chunked into rows of ``per_row``, last row padded with None."""
        rows = []
        for start in range(0, len(self.items), self.per_row):
            chunk = list(self.items[start:start + self.per_row])
            chunk += [None] * (self.per_row - len(chunk))
            rows.append(chunk)
        return rows


@dataclass
class SideBySideBlock:
    left: list
    right: list
    kind: str = "side_by_side"


@dataclass
class FlowPage:
    title: str
    blocks: list = field(default_factory=list)

    def section_labels(self) -> list[str]:
        labels = []
        for block in self.blocks:
            if isinstance(block, SectionLabel):
                labels.append(block.text)
            elif isinstance(block, SideBySideBlock):
                labels.extend(b.text for b in block.left + block.right if isinstance(b, SectionLabel))
        return labels

    def tables(self) -> list[TableBlock]:
        found = []
        for block in self.blocks:
            if isinstance(block, TableBlock):
                found.append(block)
            elif isinstance(block, SideBySideBlock):
                found.extend(b for b in block.left + block.right if isinstance(b, TableBlock))
        return found


def _fill_widths(widths, total):
    """Replace the single None width with whatever is left of ``total``."""
    fixed = sum(w for w in widths if w is not None)
    flexible = [w for w in widths if w is None]
    rest = max(total - fixed, 40) / (len(flexible) or 1)
    return [rest if w is None else w for w in widths]


def _secondary_blocks(table: layout.SecondaryTable, width: float) -> list:
    return [
        SectionLabel(table.label),
        TableBlock(
            headers=list(table.headers),
            rows=table.rows,
            widths=_fill_widths(table.pdf_widths, width),
            centered=[False] * len(table.headers),
        ),
    ]


def _first_page(cs: dict) -> FlowPage:
    rows = layout.SceneRowFormatter().format_rows(cs.get("scenes"))
    page = FlowPage(title=layout.document_title(cs))
    page.blocks.append(InfoGridBlock(rows=layout.build_info_grid(cs)))
    page.blocks.append(SectionLabel(layout.SECTION_SCENES))
    page.blocks.append(TableBlock(
        headers=list(layout.SCENE_HEADERS),
        rows=rows,
        widths=[col.pdf_width for col in layout.SCENE_COLUMNS],
        centered=[col.centered for col in layout.SCENE_COLUMNS],
        placeholder=None if rows else layout.NO_SCENES_TEXT,
    ))
    notes = cs.get("general_notes") or ""
    if notes.strip():
        page.blocks.append(SectionLabel(layout.SECTION_NOTES))
        page.blocks.append(NotesBlock(notes))
    return page


def _detail_page(cs: dict, sections: layout.DocumentSections) -> FlowPage:
    page = FlowPage(title=layout.detail_title(cs))

    if sections.schedule_and_staff_side_by_side:
        half = (CONTENT_WIDTH - SIDE_GAP) / 2
        page.blocks.append(SideBySideBlock(
            left=_secondary_blocks(layout.schedule_table(cs), half),
            right=_secondary_blocks(layout.staff_table(cs), half),
        ))
    elif sections.has_schedules:
        page.blocks.extend(_secondary_blocks(layout.schedule_table(cs), CONTENT_WIDTH))
    elif sections.has_staff:
        page.blocks.extend(_secondary_blocks(layout.staff_table(cs), CONTENT_WIDTH))

    if sections.has_details:
        page.blocks.append(SectionLabel(layout.SECTION_DETAILS))
        page.blocks.append(DetailGridBlock(items=layout.detail_items(cs)))

    if sections.has_cast:
        page.blocks.extend(_secondary_blocks(layout.cast_table(cs), CONTENT_WIDTH))
    return page


def build_page_plan(cs: dict) -> list[FlowPage]:
    """Logical pages of the printed call sheet (one or two)."""
    pages = [_first_page(cs)]
    sections = layout.DocumentSections.from_call_sheet(cs)
    if sections.has_second_page:
        pages.append(_detail_page(cs, sections))
    return pages


# ── reportlab writer ─────────────────────────────────────────────────────────

_registered_fonts: set[str] = set()


def register_font(font_name: str = DEFAULT_FONT_NAME, font_path: str | None = None) -> str:
    """Register the document font once per process and return its name.

    Without ``font_path`` the name must be one of reportlab's built-in CID
    fonts (HYGothic-Medium, HYSMyeongJo-Medium, ...).
    """
    if font_name in _registered_fonts:
        return font_name
    if font_path:
        pdfmetrics.registerFont(TTFont(font_name, font_path))
    else:
        pdfmetrics.registerFont(UnicodeCIDFont(font_name))
    _registered_fonts.add(font_name)
    logger.debug("Registered PDF font %s (%s)", font_name, font_path or "CID")
    return font_name


def _styles(font_name: str) -> dict:
    base = dict(fontName=font_name, wordWrap="CJK")
    return {
        "title": ParagraphStyle("title", fontSize=14, leading=18, alignment=TA_CENTER,
                                spaceAfter=12, **base),
        "section": ParagraphStyle("section", fontSize=10, leading=13, spaceBefore=4,
                                  spaceAfter=4, **base),
        "cell": ParagraphStyle("cell", fontSize=8, leading=10, **base),
        "cell_center": ParagraphStyle("cell_center", fontSize=8, leading=10,
                                      alignment=TA_CENTER, **base),
        "info": ParagraphStyle("info", fontSize=9, leading=11, **base),
        "info_header": ParagraphStyle("info_header", fontSize=9, leading=11,
                                      alignment=TA_CENTER, **base),
        "notes": ParagraphStyle("notes", fontSize=9, leading=12, leftIndent=8, rightIndent=8,
                                spaceBefore=8, spaceAfter=8, borderWidth=0.75,
                                borderColor=GRID_COLOR, borderPadding=8, **base),
        "detail_label": ParagraphStyle("detail_label", fontSize=8, leading=10,
                                       textColor=colors.HexColor("#333333"), **base),
    }


def _para(text, style) -> Paragraph:
    return Paragraph(escape(str(text or "")).replace("\n", "<br/>"), style)


def _info_grid_flowable(block: InfoGridBlock, styles: dict) -> Table:
    col_width = CONTENT_WIDTH / layout.INFO_GRID_COLUMNS
    data = []
    commands = [
        ("GRID", (0, 0), (-1, -1), 0.75, GRID_COLOR),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    for r, row in enumerate(block.rows):
        cells = []
        c = 0
        for info in row:
            style = styles["info_header"] if info.header else styles["info"]
            cells.append(_para(info.text, style))
            cells.extend([""] * (info.span - 1))
            if info.span > 1:
                commands.append(("SPAN", (c, r), (c + info.span - 1, r)))
            if info.header:
                commands.append(("BACKGROUND", (c, r), (c + info.span - 1, r), INFO_HEADER_BG))
            c += info.span
        data.append(cells)
    table = Table(data, colWidths=[col_width] * layout.INFO_GRID_COLUMNS)
    table.setStyle(TableStyle(commands))
    return table


def _table_flowable(block: TableBlock, styles: dict) -> Table:
    centered = block.centered or [False] * len(block.headers)
    data = [[_para(h, styles["cell_center"]) for h in block.headers]]
    commands = [
        ("GRID", (0, 0), (-1, -1), 0.5, GRID_COLOR),
        ("BACKGROUND", (0, 0), (-1, 0), TABLE_HEADER_BG),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    if block.placeholder:
        data.append([_para(block.placeholder, styles["cell_center"])] + [""] * (len(block.headers) - 1))
        commands += [
            ("SPAN", (0, 1), (-1, 1)),
            ("TOPPADDING", (0, 1), (-1, 1), 16),
            ("BOTTOMPADDING", (0, 1), (-1, 1), 16),
        ]
    for row in block.rows:
        data.append([
            _para(value, styles["cell_center"] if center else styles["cell"])
            for value, center in zip(row, centered)
        ])
    table = Table(data, colWidths=block.widths, repeatRows=1)
    table.setStyle(TableStyle(commands))
    return table


def _notes_flowable(block: NotesBlock, styles: dict) -> Paragraph:
    # A bordered paragraph, not a one-cell table, so long notes flow onto the next page.
    return _para(block.text, styles["notes"])


def _detail_grid_flowable(block: DetailGridBlock, styles: dict) -> Table:
    """
    Details as label/value boxes, ``per_row`` to a band.

    Each band is spread over one table row per value line (label first),
    and every box is drawn with BOX commands over its rows. Rows stay short
    so a band with long text can split across pages.
    """
    data = []
    commands = [
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("TOPPADDING", (0, 0), (-1, -1), 1),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
    ]
    for band in block.grid_rows():
        columns = []
        for item in band:
            if item is None:
                columns.append([])
                continue
            label, value = item
            lines = str(value or "").split("\n")
            columns.append(
                [_para(label, styles["detail_label"])] + [_para(line, styles["cell"]) for line in lines]
            )
        first = len(data)
        height = max(len(col) for col in columns)
        for i in range(height):
            data.append([col[i] if i < len(col) else "" for col in columns])
        last = len(data) - 1
        commands += [
            ("TOPPADDING", (0, first), (-1, first), 4),
            ("BOTTOMPADDING", (0, last), (-1, last), 8),
        ]
        commands += [("BOX", (c, first), (c, last), 0.5, GRID_COLOR) for c in range(block.per_row)]
    table = Table(data, colWidths=[CONTENT_WIDTH / block.per_row] * block.per_row)
    table.setStyle(TableStyle(commands))
    return table


def _label_and_table(blocks: list) -> tuple:
    label = next((b.text for b in blocks if isinstance(b, SectionLabel)), "")
    table = next(b for b in blocks if isinstance(b, TableBlock))
    return label, table


def _side_by_side_flowable(block: SideBySideBlock, styles: dict) -> Table:
    """
    Two tables next to each other, merged into a single table.

    Row 0 holds both section labels, row 1 both header rows, and row i below
    that holds row i of each side with an empty gap column between them.
    Both header rows repeat when the rows continue on the next page.
    """
    left_label, left = _label_and_table(block.left)
    right_label, right = _label_and_table(block.right)
    nl, nr = len(left.headers), len(right.headers)
    gap = nl

    def cells(table, values, width):
        if values is None:
            return [""] * width
        centered = table.centered or [False] * width
        return [
            _para(value, styles["cell_center"] if center else styles["cell"])
            for value, center in zip(values, centered)
        ]

    data = [
        [_para(left_label, styles["section"])] + [""] * (nl - 1)
        + [""] + [_para(right_label, styles["section"])] + [""] * (nr - 1),
        [_para(h, styles["cell_center"]) for h in left.headers]
        + [""] + [_para(h, styles["cell_center"]) for h in right.headers],
    ]
    for i in range(max(len(left.rows), len(right.rows))):
        data.append(
            cells(left, left.rows[i] if i < len(left.rows) else None, nl)
            + [""]
            + cells(right, right.rows[i] if i < len(right.rows) else None, nr)
        )

    commands = [
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LEFTPADDING", (0, 0), (-1, 0), 0),
        ("SPAN", (0, 0), (nl - 1, 0)),
        ("SPAN", (gap + 1, 0), (-1, 0)),
        ("GRID", (0, 1), (nl - 1, len(left.rows) + 1), 0.5, GRID_COLOR),
        ("BACKGROUND", (0, 1), (nl - 1, 1), TABLE_HEADER_BG),
        ("GRID", (gap + 1, 1), (-1, len(right.rows) + 1), 0.5, GRID_COLOR),
        ("BACKGROUND", (gap + 1, 1), (-1, 1), TABLE_HEADER_BG),
    ]
    table = Table(data, colWidths=list(left.widths) + [SIDE_GAP] + list(right.widths), repeatRows=2)
    table.setStyle(TableStyle(commands))
    return table


def _flowables(blocks: list, styles: dict) -> list:
    out = []
    for block in blocks:
        if isinstance(block, InfoGridBlock):
            out += [_info_grid_flowable(block, styles), Spacer(1, 12)]
        elif isinstance(block, SectionLabel):
            out.append(_para(block.text, styles["section"]))
        elif isinstance(block, TableBlock):
            out += [_table_flowable(block, styles), Spacer(1, 12)]
        elif isinstance(block, NotesBlock):
            out += [_notes_flowable(block, styles), Spacer(1, 12)]
        elif isinstance(block, DetailGridBlock):
            out += [_detail_grid_flowable(block, styles), Spacer(1, 12)]
        elif isinstance(block, SideBySideBlock):
            out += [_side_by_side_flowable(block, styles), Spacer(1, 12)]
        else:
            raise TypeError(f"Unknown page block {block!r}")
    return out


def export_call_sheet_pdf(
    cs: dict,
    font_name: str = DEFAULT_FONT_NAME,
    font_path: str | None = None,
    creator: str = DEFAULT_CREATOR,
) -> bytes:
    """
    Render the call sheet as an A4 landscape PDF.

    The whole document is built in memory; on any failure RenderError is
    raised and no bytes are returned.
    """
    try:
        pages = build_page_plan(cs)
        styles = _styles(register_font(font_name, font_path))

        story = []
        for i, page in enumerate(pages):
            if i:
                story.append(PageBreak())
            story.append(_para(page.title, styles["title"]))
            story.extend(_flowables(page.blocks, styles))

        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=PAGE_SIZE,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=layout.document_title(cs),
            author=creator,
            creator=creator,
        )
        doc.build(story)
    except Exception as exc:
        raise RenderError("pdf", cause=exc) from exc

    logger.info(
        "Rendered call sheet pdf: id=%s pages=%d",
        cs.get("id"), len(pages),
        extra={"call_sheet_id": cs.get("id"), "document": "pdf"},
    )
    return buf.getvalue()


def export_call_sheet_html(cs: dict, print_mode: bool = False) -> str:
    """HTML print preview built from the same page plan as the PDF.

    Must run inside a Flask app context (uses the app's templates).
    """
    try:
        pages = build_page_plan(cs)
        return render_template(
            "call_sheet_preview.html",
            document_title=layout.document_title(cs),
            pages=pages,
            print_mode=print_mode,
        )
    except Exception as exc:
        raise RenderError("html", cause=exc) from exc
