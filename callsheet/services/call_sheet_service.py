"""Daily call sheet service layer.

Rules:
  - db.session.commit() happens only in this file (and project_service).
  - Saving a call sheet replaces its scenes, schedules, staff and cast
    wholesale inside one transaction. No per-row diffing.
  - Every child collection is renumbered 0..n-1 on every write.
  - Pool members are copied by value; later pool edits do not touch
    existing call sheets.
"""

from __future__ import annotations

import logging
from typing import Any

from callsheet.core.exceptions import NotFoundError, ValidationError
from callsheet.models import db
from callsheet.models.call_sheet import (
    DETAIL_FIELDS,
    CastMember,
    DailyCallSheet,
    Scene,
    Schedule,
    Staff,
)
from callsheet.models.project import ProjectCast, ProjectStaff
from callsheet.services import call_sheet_layout as layout
from callsheet.services.project_service import get_project
from callsheet.services.time_arithmetic import (
    format_shooting_duration,
    scene_end_times,
    shooting_end_time,
    total_shooting_minutes,
)
from callsheet.utils.helpers import clean_text, parse_date

logger = logging.getLogger(__name__)

CALL_SHEET_TEXT_FIELDS = (
    "episode",
    "weather", "temp_min", "temp_max", "precipitation", "sunrise", "sunset",
    "director", "producer", "ad_name",
    "location", "address", "meeting_place", "parking_info", "emergency_contact",
    "crew_call_time", "talent_call_time",
    "general_notes",
) + tuple(key for key, _label in DETAIL_FIELDS)

SCENE_TEXT_FIELDS = (
    "scene_number", "description", "location_type", "location_name", "day_night",
    "pages", "start_time", "cast", "notes",
    "props", "wardrobe", "makeup", "special_equip",
)
SCHEDULE_TEXT_FIELDS = ("time", "content")
STAFF_TEXT_FIELDS = ("position", "name", "contact")
CAST_TEXT_FIELDS = (
    "role", "actor_name", "call_time", "call_location", "scenes", "preparation", "contact",
)

# payload key → (model, text fields)
CHILD_COLLECTIONS = {
    "scenes": (Scene, SCENE_TEXT_FIELDS),
    "schedules": (Schedule, SCHEDULE_TEXT_FIELDS),
    "staff_list": (Staff, STAFF_TEXT_FIELDS),
    "cast_members": (CastMember, CAST_TEXT_FIELDS),
}


# ── Queries ──────────────────────────────────────────────────────────────────


def call_sheets_query(*, project_id: int | None = None):
    """Call sheets, latest shooting date first."""
    query = DailyCallSheet.query
    if project_id is not None:
        query = query.filter(DailyCallSheet.project_id == project_id)
    return query.order_by(DailyCallSheet.date.desc(), DailyCallSheet.id.desc())


def get_call_sheet(call_sheet_id: int) -> DailyCallSheet:
    call_sheet = db.session.get(DailyCallSheet, call_sheet_id)
    if call_sheet is None:
        raise NotFoundError(resource="DailyCallSheet", resource_id=call_sheet_id)
    return call_sheet


def call_sheet_snapshot(call_sheet_id: int) -> dict:
    """Fully joined dict consumed by the document renderers."""
    return get_call_sheet(call_sheet_id).to_dict(include_children=True, include_project=True)


# ── Field coercion ───────────────────────────────────────────────────────────


def _optional_int(value: Any, field: str, *, minimum: int | None = None) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", details={field: value}) from None
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field} must be an integer", details={field: value})
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be >= {minimum}", details={field: value})
    return number


def _required_date(value: Any):
    parsed = parse_date(value)
    if parsed is None:
        raise ValidationError("date is required and must be a valid date", details={"date": value})
    return parsed


def _ordered(items: list, key: str) -> list:
    """Sort submitted rows by their ``order`` (list position when absent)."""
    if not isinstance(items, list):
        raise ValidationError(f"{key} must be a list", details={key: type(items).__name__})
    keyed = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"{key}[{position}] must be an object", details={key: position})
        order = _optional_int(item.get("order"), f"{key}[{position}].order")
        keyed.append((position if order is None else order, position, item))
    keyed.sort(key=lambda entry: (entry[0], entry[1]))
    return [item for _order, _position, item in keyed]


def _build_children(key: str, items: list) -> list:
    model, text_fields = CHILD_COLLECTIONS[key]
    rows = []
    for order, item in enumerate(_ordered(items, key)):
        row = model(order=order)
        for field in text_fields:
            setattr(row, field, clean_text(item.get(field)))
        if model is Scene:
            row.estimated_time = _optional_int(
                item.get("estimated_time"), f"scenes[{order}].estimated_time", minimum=0,
            )
            row.extras = _optional_int(item.get("extras"), f"scenes[{order}].extras", minimum=0)
        rows.append(row)
    return rows


def _apply_fields(call_sheet: DailyCallSheet, data: dict):
    shoot_date = _required_date(data.get("date"))
    shooting_day = _optional_int(data.get("shooting_day"), "shooting_day", minimum=1)

    for field in CALL_SHEET_TEXT_FIELDS:
        setattr(call_sheet, field, clean_text(data.get(field)))
    call_sheet.date = shoot_date
    if shooting_day is not None:
        call_sheet.shooting_day = shooting_day


def _build_all_children(data: dict) -> dict:
    return {key: _build_children(key, data.get(key) or []) for key in CHILD_COLLECTIONS}


def _replace_children(call_sheet: DailyCallSheet, built: dict):
    call_sheet.scenes = built["scenes"]
    call_sheet.schedules = built["schedules"]
    call_sheet.staff_list = built["staff_list"]
    call_sheet.cast_members = built["cast_members"]


def _renumber(rows: list):
    for order, row in enumerate(rows):
        row.order = order


# ── CRUD ─────────────────────────────────────────────────────────────────────


def create_call_sheet(data: dict) -> DailyCallSheet:
    project_id = _optional_int(data.get("project_id"), "project_id")
    if project_id is None:
        raise ValidationError("project_id is required", details={"project_id": "missing"})
    project = get_project(project_id)
    next_day = project.call_sheets.count() + 1

    call_sheet = DailyCallSheet(project_id=project.id)
    children = _build_all_children(data)
    _apply_fields(call_sheet, data)
    if call_sheet.shooting_day is None:
        call_sheet.shooting_day = next_day
    _replace_children(call_sheet, children)

    db.session.add(call_sheet)
    db.session.commit()
    logger.info(
        "Created call sheet id=%s project=%s day=%s",
        call_sheet.id, project.id, call_sheet.shooting_day,
        extra={"project_id": project.id, "call_sheet_id": call_sheet.id},
    )
    return call_sheet


def update_call_sheet(call_sheet_id: int, data: dict) -> DailyCallSheet:
    """Replace every field and child collection of a call sheet.

    Child collections missing from ``data`` are saved as empty.
    """
    call_sheet = get_call_sheet(call_sheet_id)
    if "project_id" in data and data["project_id"] is not None:
        if _optional_int(data["project_id"], "project_id") != call_sheet.project_id:
            raise ValidationError(
                "A call sheet cannot be moved to another project",
                details={"project_id": data["project_id"]},
            )

    # Validate every row before touching the stored sheet
    children = _build_all_children(data)
    _apply_fields(call_sheet, data)
    _replace_children(call_sheet, children)

    db.session.commit()
    logger.info(
        "Saved call sheet id=%s scenes=%d schedules=%d staff=%d cast=%d",
        call_sheet.id, len(call_sheet.scenes), len(call_sheet.schedules),
        len(call_sheet.staff_list), len(call_sheet.cast_members),
        extra={"project_id": call_sheet.project_id, "call_sheet_id": call_sheet.id},
    )
    return call_sheet


def delete_call_sheet(call_sheet_id: int) -> None:
    call_sheet = get_call_sheet(call_sheet_id)
    db.session.delete(call_sheet)
    db.session.commit()
    logger.info("Deleted call sheet id=%s", call_sheet_id, extra={"call_sheet_id": call_sheet_id})


# ── Scene ordering ───────────────────────────────────────────────────────────


def reorder_scenes(call_sheet_id: int, from_index: Any, to_index: Any) -> list[Scene]:
    """Move one scene and renumber every scene 0..n-1."""
    call_sheet = get_call_sheet(call_sheet_id)
    scenes = list(call_sheet.scenes)
    src = _optional_int(from_index, "from_index")
    dst = _optional_int(to_index, "to_index")
    count = len(scenes)
    if src is None or dst is None or not (0 <= src < count) or not (0 <= dst < count):
        raise ValidationError(
            "from_index and to_index must be valid scene positions",
            details={"from_index": from_index, "to_index": to_index, "scene_count": count},
        )

    scenes.insert(dst, scenes.pop(src))
    _renumber(scenes)
    db.session.commit()
    # Relationship order is stale until reloaded
    db.session.refresh(call_sheet)
    return list(call_sheet.scenes)


def delete_scene(call_sheet_id: int, scene_id: int) -> list[Scene]:
    """Remove a single scene and close the gap in the ordinals."""
    call_sheet = get_call_sheet(call_sheet_id)
    scene = next((s for s in call_sheet.scenes if s.id == scene_id), None)
    if scene is None:
        raise NotFoundError(resource="Scene", resource_id=scene_id)
    call_sheet.scenes.remove(scene)
    _renumber(call_sheet.scenes)
    db.session.commit()
    return list(call_sheet.scenes)


# ── Copy from project pools ──────────────────────────────────────────────────


def _pool_member(model, member_id: Any, call_sheet: DailyCallSheet, field: str):
    member_pk = _optional_int(member_id, field)
    if member_pk is None:
        raise ValidationError(f"{field} is required", details={field: "missing"})
    member = db.session.get(model, member_pk)
    if member is None or member.project_id != call_sheet.project_id:
        raise NotFoundError(resource=model.__name__, resource_id=member_pk)
    return member


def add_staff_from_pool(call_sheet_id: int, project_staff_id: Any) -> list[Staff]:
    """Append a copy of a pool staff member; same (name, position) is a no-op."""
    call_sheet = get_call_sheet(call_sheet_id)
    member = _pool_member(ProjectStaff, project_staff_id, call_sheet, "project_staff_id")

    if any(s.name == member.name and s.position == member.position for s in call_sheet.staff_list):
        logger.debug("Staff %s/%s already on call sheet %s", member.position, member.name, call_sheet.id)
        return list(call_sheet.staff_list)

    call_sheet.staff_list.append(Staff(
        order=len(call_sheet.staff_list),
        position=member.position,
        name=member.name,
        contact=member.contact,
    ))
    db.session.commit()
    return list(call_sheet.staff_list)


def add_cast_from_pool(call_sheet_id: int, project_cast_id: Any) -> list[CastMember]:
    """Append a copy of a pool actor; same (actor_name, role) is a no-op."""
    call_sheet = get_call_sheet(call_sheet_id)
    member = _pool_member(ProjectCast, project_cast_id, call_sheet, "project_cast_id")

    if any(c.actor_name == member.actor_name and c.role == member.role for c in call_sheet.cast_members):
        logger.debug("Cast %s/%s already on call sheet %s", member.role, member.actor_name, call_sheet.id)
        return list(call_sheet.cast_members)

    call_sheet.cast_members.append(CastMember(
        order=len(call_sheet.cast_members),
        role=member.role,
        actor_name=member.actor_name,
        contact=member.contact,
    ))
    db.session.commit()
    return list(call_sheet.cast_members)


# ── Derived values ───────────────────────────────────────────────────────────


def call_sheet_summary(call_sheet_id: int) -> dict:
    """Values computed from the scenes at read time; none of them are stored."""
    snapshot = call_sheet_snapshot(call_sheet_id)
    scenes = snapshot["scenes"]
    total = total_shooting_minutes(scenes)
    return {
        "call_sheet_id": snapshot["id"],
        "scene_count": len(scenes),
        "total_minutes": total,
        "shooting_duration": format_shooting_duration(total),
        "shooting_end_time": shooting_end_time(scenes),
        "scene_end_times": [
            {"scene_id": scene["id"], "order": scene["order"], "end_time": end}
            for scene, end in zip(scenes, scene_end_times(scenes))
        ],
        "sections": layout.DocumentSections.from_call_sheet(snapshot).to_dict(),
    }
