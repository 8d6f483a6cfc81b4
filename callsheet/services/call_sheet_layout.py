"""
Call Sheet Planner
Shared layout for call sheet documents.

Both renderers (pdf_export_service, export_service) build their output from
this module so that the PDF page and the XLSX sheet always show the same
cells:

    SCENE_COLUMNS / SceneRowFormatter — scene table headers and row values
    build_info_grid                   — 5 x 12 header block with spans
    DocumentSections                  — which second-page sections exist
    schedule_table / staff_table / cast_table / detail_items
    document_title / detail_title / build_filename / content_disposition

Every function takes the snapshot dict produced by
``DailyCallSheet.to_dict(include_children=True, include_project=True)``.

Blank info values print as "-", blank scene cells as "".
"""

import logging
from dataclasses import dataclass, field
from urllib.parse import quote

from callsheet.models.call_sheet import DETAIL_FIELDS, LOCATION_TYPES
from callsheet.services.time_arithmetic import (
    calculate_end_time,
    format_shooting_duration,
    shooting_end_time,
    total_shooting_minutes,
)
from callsheet.utils.helpers import parse_date

logger = logging.getLogger(__name__)


# ── Labels ───────────────────────────────────────────────────────────────────

SECTION_SCENES = "촬영 씬"
SECTION_NOTES = "공지사항"
SECTION_SCHEDULE = "전체일정"
SECTION_STAFF = "스태프"
SECTION_DETAILS = "세부진행"
SECTION_CAST = "캐스트리스트 및 배우집합"

NO_SCENES_TEXT = "등록된 씬이 없습니다"
SAME_AS_LOCATION = "촬영장소와 동일"
BLANK_INFO = "-"

WEEKDAYS_KO = ("월", "화", "수", "목", "금", "토", "일")

INFO_GRID_COLUMNS = 12


# ── Scene table ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SceneColumn:
    """One scene table column.

    ``pdf_width`` is in points on an A4 landscape page, ``xlsx_width`` in
    Excel character units.
    """

    header: str
    pdf_width: float
    xlsx_width: float
    centered: bool = True


SCENE_COLUMNS = (
    SceneColumn("#", 30, 5),
    SceneColumn("S#", 34, 8),
    SceneColumn("CUT", 34, 8),
    SceneColumn("M/D\nE/N", 38, 8),
    SceneColumn("시작", 40, 8),
    SceneColumn("소요", 34, 8),
    SceneColumn("끝", 40, 8),
    SceneColumn("I/E", 34, 6),
    SceneColumn("장소", 105, 20, centered=False),
    SceneColumn("촬영내용", 180, 30, centered=False),
    SceneColumn("출연진", 100, 20, centered=False),
    SceneColumn("비고", 132.89, 25, centered=False),
)

SCENE_HEADERS = tuple(col.header for col in SCENE_COLUMNS)

_LOCATION_ABBREV = dict(zip(LOCATION_TYPES, ("I", "E", "I/E")))
_LOCATION_ABBREV["INT-EXT"] = "I/E"


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


def strip_scene_prefix(scene_number) -> str:
    """'S#12' → '12'. Only the first 'S#' is removed; bare numbers pass through."""
    return _text(scene_number).replace("S#", "", 1)


def location_abbrev(location_type) -> str:
    return _LOCATION_ABBREV.get(_text(location_type).strip().upper(), "")


class SceneRowFormatter:
    """Turns scene dicts into the twelve display strings of a scene row."""

    headers = SCENE_HEADERS

    def format_row(self, index: int, scene: dict) -> list[str]:
        """Format the scene at zero-based ``index``."""
        estimated = scene.get("estimated_time")
        return [
            str(index + 1),
            strip_scene_prefix(scene.get("scene_number")),
            _text(scene.get("pages")),
            _text(scene.get("day_night")),
            _text(scene.get("start_time")),
            str(estimated) if estimated else "",
            calculate_end_time(scene.get("start_time"), estimated),
            location_abbrev(scene.get("location_type")),
            _text(scene.get("location_name")),
            _text(scene.get("description")),
            _text(scene.get("cast")),
            _text(scene.get("notes")),
        ]

    def format_rows(self, scenes) -> list[list[str]]:
        return [self.format_row(i, scene) for i, scene in enumerate(scenes or [])]


# ── Info grid ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InfoCell:
    text: str
    header: bool = False
    span: int = 1


def _info(value) -> str:
    text = _text(value).strip()
    return text or BLANK_INFO


def format_call_sheet_date(value) -> str:
    """ISO date → 'YYYY.MM.DD (요일)'; '-' when absent or unparseable."""
    parsed = parse_date(value)
    if parsed is None:
        return BLANK_INFO
    return f"{parsed:%Y.%m.%d} ({WEEKDAYS_KO[parsed.weekday()]})"


def build_info_grid(cs: dict) -> list[list[InfoCell]]:
    """The header block of page one: five rows, each spanning 12 columns."""
    scenes = cs.get("scenes") or []
    day = f"{cs.get('shooting_day')}회차"
    meeting_place = _text(cs.get("meeting_place")).strip() or SAME_AS_LOCATION

    grid = [
        [
            InfoCell(day, header=True),
            InfoCell("촬영일시", header=True),
            InfoCell(format_call_sheet_date(cs.get("date")), span=2),
            InfoCell("날씨", header=True),
            InfoCell(_info(cs.get("weather"))),
            InfoCell("기온", header=True),
            InfoCell(f"{_info(cs.get('temp_min'))} ~ {_info(cs.get('temp_max'))}", span=2),
            InfoCell("강수", header=True),
            InfoCell(_info(cs.get("precipitation")), span=2),
        ],
        [
            InfoCell("", header=True),
            InfoCell("집합시간", header=True),
            InfoCell(_info(cs.get("crew_call_time")), span=2),
            InfoCell("일출/일몰", header=True),
            InfoCell(f"{_info(cs.get('sunrise'))} / {_info(cs.get('sunset'))}", span=2),
            InfoCell("Shooting", header=True),
            InfoCell(format_shooting_duration(total_shooting_minutes(scenes))),
            InfoCell("촬영종료", header=True),
            InfoCell(shooting_end_time(scenes), span=2),
        ],
        [
            InfoCell("", header=True),
            InfoCell("촬영장소", header=True),
            InfoCell(_info(cs.get("location")), span=2),
            InfoCell("감독", header=True),
            InfoCell(_info(cs.get("director")), span=2),
            InfoCell("프로듀서", header=True),
            InfoCell(_info(cs.get("producer"))),
            InfoCell("조연출", header=True),
            InfoCell(_info(cs.get("ad_name")), span=2),
        ],
        [
            InfoCell("", header=True),
            InfoCell("집합장소", header=True),
            InfoCell(meeting_place, span=10),
        ],
        [
            InfoCell("", header=True),
            InfoCell("주소", header=True),
            InfoCell(_info(cs.get("address")), span=10),
        ],
    ]
    return grid


# ── Sections ─────────────────────────────────────────────────────────────────

def detail_items(cs: dict) -> list[tuple[str, str]]:
    """(label, text) for each filled-in 세부진행 field, in display order."""
    items = []
    for key, label in DETAIL_FIELDS:
        value = _text(cs.get(key)).strip()
        if value:
            items.append((label, _text(cs.get(key))))
    return items


@dataclass(frozen=True)
class DocumentSections:
    """Which optional sections a call sheet renders."""

    has_schedules: bool
    has_staff: bool
    has_cast: bool
    has_details: bool

    @property
    def has_second_page(self) -> bool:
        return self.has_schedules or self.has_staff or self.has_cast or self.has_details

    @property
    def schedule_and_staff_side_by_side(self) -> bool:
        return self.has_schedules and self.has_staff

    @classmethod
    def from_call_sheet(cls, cs: dict) -> "DocumentSections":
        return cls(
            has_schedules=bool(cs.get("schedules")),
            has_staff=bool(cs.get("staff_list")),
            has_cast=bool(cs.get("cast_members")),
            has_details=bool(detail_items(cs)),
        )

    def to_dict(self) -> dict:
        return {
            "has_schedules": self.has_schedules,
            "has_staff": self.has_staff,
            "has_cast": self.has_cast,
            "has_details": self.has_details,
            "has_second_page": self.has_second_page,
        }


@dataclass
class SecondaryTable:
    """A labelled table on the detail page (schedule, staff, cast)."""

    label: str
    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)
    pdf_widths: list[float] = field(default_factory=list)
    xlsx_widths: list[float] = field(default_factory=list)


def schedule_table(cs: dict) -> SecondaryTable:
    return SecondaryTable(
        label=SECTION_SCHEDULE,
        headers=["일정", "내용"],
        rows=[[_text(s.get("time")), _text(s.get("content"))] for s in cs.get("schedules") or []],
        pdf_widths=[70, None],
        xlsx_widths=[12, 40],
    )


def staff_table(cs: dict) -> SecondaryTable:
    return SecondaryTable(
        label=SECTION_STAFF,
        headers=["직책", "이름", "연락처"],
        rows=[
            [_text(s.get("position")), _text(s.get("name")), _text(s.get("contact"))]
            for s in cs.get("staff_list") or []
        ],
        pdf_widths=[90, 90, None],
        xlsx_widths=[15, 15, 18],
    )


def cast_table(cs: dict) -> SecondaryTable:
    return SecondaryTable(
        label=SECTION_CAST,
        headers=["배역", "연기자", "집합시간", "집합위치", "등장면", "배우 준비 의상/소품", "연락처"],
        rows=[
            [
                _text(c.get("role")),
                _text(c.get("actor_name")),
                _text(c.get("call_time")),
                _text(c.get("call_location")),
                _text(c.get("scenes")),
                _text(c.get("preparation")),
                _text(c.get("contact")),
            ]
            for c in cs.get("cast_members") or []
        ],
        pdf_widths=[80, 80, 60, 100, 80, None, 100],
        xlsx_widths=[12, 12, 10, 18, 12, 30, 16],
    )


# ── Titles and filenames ─────────────────────────────────────────────────────

def _project_title(cs: dict) -> str:
    return _text((cs.get("project") or {}).get("title"))


def document_title(cs: dict) -> str:
    return f"< {_project_title(cs)} > 일일촬영계획표 - {cs.get('shooting_day')}회차"


def detail_title(cs: dict) -> str:
    return f"< {_project_title(cs)} > {cs.get('shooting_day')}회차 - 상세 정보"


def build_filename(cs: dict, extension: str) -> str:
    """'[제목]_일촬표_3회차.pdf'"""
    return f"[{_project_title(cs)}]_일촬표_{cs.get('shooting_day')}회차.{extension}"


def content_disposition(filename: str, disposition: str = "attachment") -> str:
    """Content-Disposition with an ASCII fallback and an RFC 5987 UTF-8 name."""
    if filename.isascii():
        ascii_name = filename.replace('"', "")
    else:
        ascii_name = "callsheet." + filename.rsplit(".", 1)[-1]
    return f"{disposition}; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
