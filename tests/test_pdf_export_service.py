"""
Tests for the PDF export and print preview (services.pdf_export_service).

Covers:
  - build_page_plan: one page for an empty call sheet, two when any
    second-page section has content; side-by-side only for schedule + staff
  - export_call_sheet_pdf: valid PDF bytes, page count follows the plan
  - Long crew lists, notes and details flow onto extra pages instead of failing
  - RenderError raised instead of partial output
  - export_call_sheet_html: same titles and scene cells as the plan
"""

import re

import pytest

from callsheet.core.exceptions import RenderError
from callsheet.services import call_sheet_layout as layout
from callsheet.services import pdf_export_service
from callsheet.services.pdf_export_service import (
    DetailGridBlock,
    SideBySideBlock,
    build_page_plan,
    export_call_sheet_html,
    export_call_sheet_pdf,
)

_PAGE_OBJECT = re.compile(rb"/Type\s*/Page(?![a-zA-Z])")


def _page_count(content: bytes) -> int:
    return len(_PAGE_OBJECT.findall(content))


# ── Page plan ───────────────────────────────────────────────────────────────


def test_plan_single_page_without_secondary_sections(make_snapshot):
    pages = build_page_plan(make_snapshot())
    assert len(pages) == 1
    assert pages[0].section_labels() == [layout.SECTION_SCENES]
    scene_table = pages[0].tables()[0]
    assert scene_table.rows == []
    assert scene_table.placeholder == layout.NO_SCENES_TEXT


def test_plan_staff_only_second_page(make_snapshot):
    cs = make_snapshot(staff_list=[{"position": "조명", "name": "정조명", "contact": None}])
    pages = build_page_plan(cs)
    assert len(pages) == 2
    assert pages[1].section_labels() == [layout.SECTION_STAFF]
    assert not any(isinstance(b, SideBySideBlock) for b in pages[1].blocks)
    assert sum(pages[1].tables()[0].widths) == pytest.approx(pdf_export_service.CONTENT_WIDTH)


def test_plan_full_second_page_order(snapshot):
    pages = build_page_plan(snapshot)
    assert pages[0].section_labels() == [layout.SECTION_SCENES, layout.SECTION_NOTES]
    assert pages[1].title == "< 봄날의 기억 > 1회차 - 상세 정보"
    assert isinstance(pages[1].blocks[0], SideBySideBlock)
    assert pages[1].section_labels() == [
        layout.SECTION_SCHEDULE, layout.SECTION_STAFF, layout.SECTION_DETAILS, layout.SECTION_CAST,
    ]


def test_scene_table_widths_fill_the_page(make_snapshot):
    table = build_page_plan(make_snapshot())[0].tables()[0]
    assert sum(table.widths) == pytest.approx(pdf_export_service.CONTENT_WIDTH, abs=0.01)


def test_detail_grid_rows_padded():
    block = DetailGridBlock(items=[("연출", "a"), ("조명", "b"), ("의상", "c"), ("기타", "d")])
    rows = block.grid_rows()
    assert len(rows) == 2
    assert rows[1] == [("기타", "d"), None, None]


# ── PDF bytes ───────────────────────────────────────────────────────────────


def test_pdf_single_page(make_snapshot):
    content = export_call_sheet_pdf(make_snapshot())
    assert content.startswith(b"%PDF")
    assert _page_count(content) == 1


def test_pdf_two_pages_for_full_call_sheet(snapshot):
    content = export_call_sheet_pdf(snapshot)
    assert content.startswith(b"%PDF")
    assert _page_count(content) == 2


def test_pdf_staff_only_two_pages(make_snapshot):
    cs = make_snapshot(staff_list=[{"position": "조명", "name": "정조명", "contact": None}])
    assert _page_count(export_call_sheet_pdf(cs)) == 2


LONG_TEXT = "\n".join(f"{i}번째 줄 안내 사항입니다" for i in range(1, 61))


def _crew(count: int) -> list:
    return [{"position": f"팀{i}", "name": f"스태프{i}", "contact": "010-0000-0000"} for i in range(count)]


@pytest.mark.parametrize(
    "extra",
    [
        {"staff_list": _crew(45), "schedules": [{"time": "07:00", "content": "집합"}]},
        {"general_notes": LONG_TEXT},
        {"detail_camera": LONG_TEXT},
        {"detail_camera": LONG_TEXT, "detail_art": "소품 확인", "detail_etc": LONG_TEXT},
    ],
    ids=["crew-beside-schedule", "notes", "detail", "detail-band"],
)
def test_pdf_long_sections_continue_on_next_page(make_snapshot, extra):
    cs = make_snapshot(**extra)
    content = export_call_sheet_pdf(cs)
    assert content.startswith(b"%PDF")
    assert _page_count(content) > len(build_page_plan(cs))


def test_side_by_side_renders_as_one_row_per_entry(make_snapshot):
    cs = make_snapshot(staff_list=_crew(45), schedules=[{"time": "07:00", "content": "집합"}])
    block = build_page_plan(cs)[1].blocks[0]
    styles = pdf_export_service._styles(pdf_export_service.register_font())

    table = pdf_export_service._side_by_side_flowable(block, styles)
    # labels, headers, then one row per crew member
    assert table._nrows == 2 + 45
    assert table.repeatRows == 2
    widths = [w for side in (block.left, block.right) for b in side if hasattr(b, "widths") for w in b.widths]
    assert sum(widths) + pdf_export_service.SIDE_GAP == pytest.approx(pdf_export_service.CONTENT_WIDTH)


def test_pdf_render_failure_raises_render_error(make_snapshot):
    with pytest.raises(RenderError) as exc_info:
        export_call_sheet_pdf(make_snapshot(), font_name="NoSuchFont-Medium")
    assert exc_info.value.document == "pdf"
    assert exc_info.value.cause is not None


# ── HTML preview ────────────────────────────────────────────────────────────


def test_html_preview_matches_plan(snapshot):
    html = export_call_sheet_html(snapshot)
    assert "&lt; 봄날의 기억 &gt; 일일촬영계획표 - 1회차" in html
    assert "상세 정보" in html
    assert html.count('class="page"') == 2
    assert "window.print()" not in html
    for value in layout.SceneRowFormatter().format_row(1, snapshot["scenes"][1]):
        assert value in html


def test_html_preview_print_mode(make_snapshot):
    html = export_call_sheet_html(make_snapshot(), print_mode=True)
    assert "window.print()" in html
    assert html.count('class="page"') == 1
