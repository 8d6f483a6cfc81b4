"""
Call Sheet Planner
Project domain models: the production and its reusable people pools.

Models:
    - Project:       a production (film, drama, commercial ...) owning its call sheets
    - ProjectStaff:  crew member registered once per project, copied into call sheets
    - ProjectCast:   actor registered once per project, copied into call sheets

Architecture:
    Project ──1:N──▶ DailyCallSheet
    Project ──1:N──▶ ProjectStaff
    Project ──1:N──▶ ProjectCast

Lifecycle states:
    Project:  PREP → SHOOTING → POST → COMPLETED  (any transition allowed)
"""

from datetime import datetime, timezone

from callsheet.models import db


# ── Constants ────────────────────────────────────────────────────────────────

PROJECT_STATUSES = ("PREP", "SHOOTING", "POST", "COMPLETED")

# Suggested values for the project type picker; stored as free text
PROJECT_TYPES = ("영화", "드라마", "웹드라마", "광고", "뮤직비디오", "기타")


class Project(db.Model):
    """A production. Call sheets and pools are deleted with it."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.String(64), nullable=True, index=True,
        comment="Owner id when running multi-user; unused in single-user mode",
    )
    title = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(50), nullable=True, comment="영화 | 드라마 | 웹드라마 | 광고 | ...")
    production_co = db.Column(db.String(200), nullable=True)
    director = db.Column(db.String(100), nullable=True)
    producer = db.Column(db.String(100), nullable=True)
    ad_name = db.Column(db.String(100), nullable=True, comment="Assistant director")
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    status = db.Column(
        db.String(20), nullable=False, default="PREP",
        comment="PREP | SHOOTING | POST | COMPLETED",
    )

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ────────────────────────────────────────────────────
    call_sheets = db.relationship(
        "DailyCallSheet", backref="project", lazy="dynamic",
        cascade="all, delete-orphan",
        order_by="DailyCallSheet.date.desc()",
    )
    staff_pool = db.relationship(
        "ProjectStaff", backref="project",
        cascade="all, delete-orphan", order_by="ProjectStaff.id",
    )
    cast_pool = db.relationship(
        "ProjectCast", backref="project",
        cascade="all, delete-orphan", order_by="ProjectCast.id",
    )

    def to_dict(self, include_call_sheets=False) -> dict:
        """Serialize project fields for API responses."""
        result = {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "type": self.type,
            "production_co": self.production_co,
            "director": self.director,
            "producer": self.producer,
            "ad_name": self.ad_name,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "call_sheet_count": self.call_sheets.count(),
        }
        if include_call_sheets:
            result["call_sheets"] = [cs.to_dict() for cs in self.call_sheets]
        return result

    def __repr__(self):
        return f"<Project {self.id}: {self.title} [{self.status}]>"


class ProjectStaff(db.Model):
    __tablename__ = "project_staff"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = db.Column(db.String(100), nullable=False)
    position = db.Column(db.String(100), nullable=False)
    contact = db.Column(db.String(100), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "name": self.name,
            "position": self.position,
            "contact": self.contact,
        }

    def __repr__(self):
        return f"<ProjectStaff {self.id}: {self.position} {self.name}>"


class ProjectCast(db.Model):
    __tablename__ = "project_cast"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    actor_name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(100), nullable=False)
    contact = db.Column(db.String(100), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "actor_name": self.actor_name,
            "role": self.role,
            "contact": self.contact,
        }

    def __repr__(self):
        return f"<ProjectCast {self.id}: {self.role} {self.actor_name}>"
