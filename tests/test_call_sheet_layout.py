"""
Tests for services.call_sheet_layout — the cell values both documents share.

Covers:
    - Scene row formatting (S# stripping, I/E abbreviation, blanks as "")
    - Info grid: 12 columns per row, "-" for blanks, derived shooting values
    - DocumentSections trigger rules
    - Secondary tables, titles, filenames, Content-Disposition
"""

import pytest

from callsheet.services import call_sheet_layout as layout


# ── Scene rows ───────────────────────────────────────────────────────────


def test_scene_headers_order():
    assert layout.SCENE_HEADERS == (
        "#", "S#", "CUT", "M/D\nE/N", "시작", "소요", "끝", "I/E",
        "장소", "촬영내용", "출연진", "비고",
    )


@pytest.mark.parametrize("raw, expected", [("S#12", "12"), ("12", "12"), ("S#S#3", "S#3"), (None, "")])
def test_strip_scene_prefix(raw, expected):
    assert layout.strip_scene_prefix(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("INT", "I"), ("EXT", "E"), ("INT/EXT", "I/E"), ("int", "I"), ("", ""), (None, ""), ("OTHER", "")],
)
def test_location_abbrev(raw, expected):
    assert layout.location_abbrev(raw) == expected


def test_every_stored_location_type_has_abbreviation():
    from callsheet.models.call_sheet import LOCATION_TYPES

    assert [layout.location_abbrev(t) for t in LOCATION_TYPES] == ["I", "E", "I/E"]
    assert layout.location_abbrev("int-ext") == "I/E"


def test_format_row_full_scene():
    scene = {
        "scene_number": "S#12",
        "pages": "3",
        "day_night": "D",
        "start_time": "09:00",
        "estimated_time": 90,
        "location_type": "EXT",
        "location_name": "벤치",
        "description": "편지",
        "cast": "서연",
        "notes": "드론",
    }
    row = layout.SceneRowFormatter().format_row(0, scene)
    assert row == ["1", "12", "3", "D", "09:00", "90", "10:30", "E", "벤치", "편지", "서연", "드론"]


def test_format_row_blank_scene_uses_empty_strings():
    row = layout.SceneRowFormatter().format_row(4, {})
    assert row[0] == "5"
    assert row[1:] == [""] * 11


def test_format_row_zero_duration_has_no_end_time():
    row = layout.SceneRowFormatter().format_row(0, {"start_time": "09:00", "estimated_time": 0})
    assert row[5] == ""
    assert row[6] == ""


# ── Info grid ────────────────────────────────────────────────────────────


def test_info_grid_rows_span_twelve_columns(make_snapshot):
    grid = layout.build_info_grid(make_snapshot())
    assert len(grid) == 5
    for row in grid:
        assert sum(cell.span for cell in row) == layout.INFO_GRID_COLUMNS


def test_info_grid_blank_values_render_dash(make_snapshot):
    grid = layout.build_info_grid(make_snapshot(date=None))
    texts = [cell.text for row in grid for cell in row if not cell.header]
    assert texts[0] == "-"  # date
    assert "- ~ -" in texts
    assert "- / -" in texts
    assert grid[3][2].text == layout.SAME_AS_LOCATION


def test_info_grid_derived_values(make_snapshot):
    cs = make_snapshot(
        shooting_day=3,
        date="2024-03-15",
        meeting_place="정문 앞",
        scenes=[
            {"start_time": "08:00", "estimated_time": 60},
            {"start_time": "10:00", "estimated_time": 120},
        ],
    )
    grid = layout.build_info_grid(cs)
    assert grid[0][0].text == "3회차"
    assert grid[0][2].text == "2024.03.15 (금)"
    assert grid[1][7].text == "3h 0m"
    assert grid[1][9].text == "12:00"
    assert grid[3][2].text == "정문 앞"


def test_format_call_sheet_date_invalid():
    assert layout.format_call_sheet_date("not-a-date") == "-"
    assert layout.format_call_sheet_date(None) == "-"


# ── Sections ─────────────────────────────────────────────────────────────


def test_empty_call_sheet_has_no_second_page(make_snapshot):
    sections = layout.DocumentSections.from_call_sheet(make_snapshot(detail_etc="   "))
    assert not sections.has_second_page
    assert sections.to_dict()["has_second_page"] is False


def test_staff_only_second_page(make_snapshot):
    cs = make_snapshot(staff_list=[{"position": "촬영", "name": "A", "contact": None}])
    sections = layout.DocumentSections.from_call_sheet(cs)
    assert sections.has_second_page
    assert sections.has_staff
    assert not (sections.has_schedules or sections.has_cast or sections.has_details)
    assert not sections.schedule_and_staff_side_by_side


def test_detail_items_keep_display_order_and_skip_blanks(make_snapshot):
    cs = make_snapshot(detail_etc="기타 메모", detail_direction="연출 메모", detail_sound="")
    assert layout.detail_items(cs) == [("연출", "연출 메모"), ("기타", "기타 메모")]


def test_cast_table_rows(make_snapshot):
    cs = make_snapshot(cast_members=[{"role": "서연", "actor_name": "윤배우", "scenes": "12"}])
    table = layout.cast_table(cs)
    assert table.label == layout.SECTION_CAST
    assert len(table.headers) == 7
    assert table.rows == [["서연", "윤배우", "", "", "12", "", ""]]


# ── Titles and filenames ─────────────────────────────────────────────────


def test_titles_and_filename(make_snapshot):
    cs = make_snapshot(shooting_day=3)
    assert layout.document_title(cs) == "< 테스트 > 일일촬영계획표 - 3회차"
    assert layout.detail_title(cs) == "< 테스트 > 3회차 - 상세 정보"
    assert layout.build_filename(cs, "pdf") == "[테스트]_일촬표_3회차.pdf"


def test_content_disposition_encodes_non_ascii():
    header = layout.content_disposition("[테스트]_일촬표_3회차.xlsx")
    assert header.startswith('attachment; filename="callsheet.xlsx"')
    assert "filename*=UTF-8''%5B%ED%85%8C%EC%8A%A4%ED%8A%B8%5D_" in header
    assert header.endswith("3%ED%9A%8C%EC%B0%A8.xlsx")


def test_content_disposition_ascii_name():
    header = layout.content_disposition("[Demo]_day.pdf")
    assert 'filename="[Demo]_day.pdf"' in header
