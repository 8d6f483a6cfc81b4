"""Project CRUD and staff/cast pool management.

Rules:
  - db.session.commit() happens only in the service layer.
  - Missing rows raise NotFoundError; rule violations raise ValidationError.
  - Pool PUT replaces the whole pool.
"""

from __future__ import annotations

import logging

from callsheet.core.exceptions import NotFoundError, ValidationError
from callsheet.models import db
from callsheet.models.project import PROJECT_STATUSES, Project, ProjectCast, ProjectStaff
from callsheet.utils.helpers import clean_text, parse_date

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("type", "production_co", "director", "producer", "ad_name")


def projects_query(*, user_id: str | None = None):
    """Projects, most recently updated first; scoped to ``user_id`` when given."""
    query = Project.query
    if user_id is not None:
        query = query.filter(Project.user_id == user_id)
    return query.order_by(Project.updated_at.desc(), Project.id.desc())


def get_project(project_id: int) -> Project:
    project = db.session.get(Project, project_id)
    if project is None:
        raise NotFoundError(resource="Project", resource_id=project_id)
    return project


def _validate_status(status) -> str:
    status = str(status or "").strip().upper()
    if status not in PROJECT_STATUSES:
        raise ValidationError(
            f"status must be one of {', '.join(PROJECT_STATUSES)}",
            details={"status": status},
        )
    return status


def _apply_dates(project: Project, data: dict):
    for key in ("start_date", "end_date"):
        if key in data:
            value = data.get(key)
            parsed = parse_date(value)
            if value and parsed is None:
                raise ValidationError(f"{key} is not a valid date", details={key: value})
            setattr(project, key, parsed)
    if project.start_date and project.end_date and project.end_date < project.start_date:
        raise ValidationError(
            "end_date must not be before start_date",
            details={"start_date": project.start_date.isoformat(),
                     "end_date": project.end_date.isoformat()},
        )


def create_project(data: dict, *, user_id: str | None = None) -> Project:
    title = clean_text(data.get("title"))
    if not title:
        raise ValidationError("title is required", details={"title": "missing"})

    project = Project(
        user_id=user_id,
        title=title,
        status=_validate_status(data.get("status") or "PREP"),
    )
    for key in _TEXT_FIELDS:
        setattr(project, key, clean_text(data.get(key)))
    _apply_dates(project, data)

    db.session.add(project)
    db.session.commit()
    logger.info("Created project id=%s title=%s", project.id, project.title,
                extra={"project_id": project.id})
    return project


def update_project(project_id: int, data: dict) -> Project:
    """Partial update: only keys present in ``data`` are touched."""
    project = get_project(project_id)

    if "title" in data:
        title = clean_text(data.get("title"))
        if not title:
            raise ValidationError("title cannot be empty", details={"title": "empty"})
        project.title = title
    if "status" in data:
        project.status = _validate_status(data.get("status"))
    for key in _TEXT_FIELDS:
        if key in data:
            setattr(project, key, clean_text(data.get(key)))
    _apply_dates(project, data)

    db.session.commit()
    return project


def delete_project(project_id: int) -> None:
    """Delete a project together with its call sheets and pools."""
    project = get_project(project_id)
    db.session.delete(project)
    db.session.commit()
    logger.info("Deleted project id=%s", project_id, extra={"project_id": project_id})


# ── Pools ────────────────────────────────────────────────────────────────────


def _staff_from(data: dict, index: int | None = None) -> ProjectStaff:
    name = clean_text(data.get("name"))
    position = clean_text(data.get("position"))
    if not name or not position:
        where = f"staff[{index}]" if index is not None else "staff"
        raise ValidationError(
            "name and position are required",
            details={where: {"name": name, "position": position}},
        )
    return ProjectStaff(name=name, position=position, contact=clean_text(data.get("contact")))


def _cast_from(data: dict, index: int | None = None) -> ProjectCast:
    actor_name = clean_text(data.get("actor_name"))
    role = clean_text(data.get("role"))
    if not actor_name or not role:
        where = f"cast[{index}]" if index is not None else "cast"
        raise ValidationError(
            "actor_name and role are required",
            details={where: {"actor_name": actor_name, "role": role}},
        )
    return ProjectCast(actor_name=actor_name, role=role, contact=clean_text(data.get("contact")))


def list_staff_pool(project_id: int) -> list[ProjectStaff]:
    return list(get_project(project_id).staff_pool)


def add_staff_to_pool(project_id: int, data: dict) -> ProjectStaff:
    project = get_project(project_id)
    member = _staff_from(data)
    project.staff_pool.append(member)
    db.session.commit()
    return member


def replace_staff_pool(project_id: int, items: list[dict]) -> list[ProjectStaff]:
    """Replace the entire staff pool; validation happens before anything is deleted."""
    project = get_project(project_id)
    members = [_staff_from(item, i) for i, item in enumerate(items)]
    project.staff_pool = members
    db.session.commit()
    return list(project.staff_pool)


def list_cast_pool(project_id: int) -> list[ProjectCast]:
    return list(get_project(project_id).cast_pool)


def add_cast_to_pool(project_id: int, data: dict) -> ProjectCast:
    project = get_project(project_id)
    member = _cast_from(data)
    project.cast_pool.append(member)
    db.session.commit()
    return member


def replace_cast_pool(project_id: int, items: list[dict]) -> list[ProjectCast]:
    project = get_project(project_id)
    members = [_cast_from(item, i) for i, item in enumerate(items)]
    project.cast_pool = members
    db.session.commit()
    return list(project.cast_pool)


def new_call_sheet_defaults(project_id: int) -> dict:
    """Prefill values for the next call sheet of a project."""
    project = get_project(project_id)
    return {
        "project_id": project.id,
        "shooting_day": project.call_sheets.count() + 1,
        "director": project.director,
        "producer": project.producer,
        "ad_name": project.ad_name,
    }
