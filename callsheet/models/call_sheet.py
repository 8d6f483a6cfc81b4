"""
Call Sheet Planner
Daily call sheet domain models.

Models:
    - DailyCallSheet:  one shooting day of a project (logistics, weather snapshot, details)
    - Scene:           a scene scheduled for the day, with start time and estimated duration
    - Schedule:        free-form timeline row (전체일정)
    - Staff:           crew member working that day
    - CastMember:      actor called that day, with call time and location

Architecture:
    Project ──1:N──▶ DailyCallSheet
    DailyCallSheet ──1:N──▶ Scene | Schedule | Staff | CastMember

Every child row carries a zero-based ``order``. Saves replace the four child
collections wholesale, so ordinals are always 0..n-1. Scene end times are
derived at render time from start_time + estimated_time and never stored.
"""

from datetime import datetime, timezone

from callsheet.models import db


# ── Constants ────────────────────────────────────────────────────────────────

# (column, label) in the fixed display order of the 세부진행 block
DETAIL_FIELDS = (
    ("detail_direction", "연출"),
    ("detail_assist_dir", "조연출"),
    ("detail_camera", "촬영/관련장비"),
    ("detail_lighting", "조명"),
    ("detail_sound", "음향"),
    ("detail_art", "미술"),
    ("detail_wardrobe", "의상"),
    ("detail_production", "제작"),
    ("detail_etc", "기타"),
)

LOCATION_TYPES = ("INT", "EXT", "INT/EXT")


# ═════════════════════════════════════════════════════════════════════════════
# 1. DailyCallSheet
# ═════════════════════════════════════════════════════════════════════════════


class DailyCallSheet(db.Model):
    """A single shooting day. Owns its scenes, schedule, staff and cast rows."""

    __tablename__ = "daily_call_sheets"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    episode = db.Column(db.String(50), nullable=True)
    shooting_day = db.Column(db.Integer, nullable=False, default=1, comment="N회차")
    date = db.Column(db.Date, nullable=False)

    # Weather snapshot taken when the sheet was filled in
    weather = db.Column(db.String(50), nullable=True)
    temp_min = db.Column(db.String(20), nullable=True)
    temp_max = db.Column(db.String(20), nullable=True)
    precipitation = db.Column(db.String(20), nullable=True)
    sunrise = db.Column(db.String(10), nullable=True)
    sunset = db.Column(db.String(10), nullable=True)

    director = db.Column(db.String(100), nullable=True)
    producer = db.Column(db.String(100), nullable=True)
    ad_name = db.Column(db.String(100), nullable=True)

    location = db.Column(db.String(200), nullable=True)
    address = db.Column(db.String(300), nullable=True)
    meeting_place = db.Column(db.String(200), nullable=True)
    parking_info = db.Column(db.String(300), nullable=True)
    emergency_contact = db.Column(db.String(100), nullable=True)

    crew_call_time = db.Column(db.String(10), nullable=True, comment="HH:MM")
    talent_call_time = db.Column(db.String(10), nullable=True, comment="HH:MM")

    general_notes = db.Column(db.Text, nullable=True, comment="공지사항")

    # 세부진행
    detail_direction = db.Column(db.Text, nullable=True)
    detail_assist_dir = db.Column(db.Text, nullable=True)
    detail_camera = db.Column(db.Text, nullable=True)
    detail_lighting = db.Column(db.Text, nullable=True)
    detail_sound = db.Column(db.Text, nullable=True)
    detail_art = db.Column(db.Text, nullable=True)
    detail_wardrobe = db.Column(db.Text, nullable=True)
    detail_production = db.Column(db.Text, nullable=True)
    detail_etc = db.Column(db.Text, nullable=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ────────────────────────────────────────────────────
    scenes = db.relationship(
        "Scene", backref="call_sheet",
        cascade="all, delete-orphan", order_by="Scene.order",
    )
    schedules = db.relationship(
        "Schedule", backref="call_sheet",
        cascade="all, delete-orphan", order_by="Schedule.order",
    )
    staff_list = db.relationship(
        "Staff", backref="call_sheet",
        cascade="all, delete-orphan", order_by="Staff.order",
    )
    cast_members = db.relationship(
        "CastMember", backref="call_sheet",
        cascade="all, delete-orphan", order_by="CastMember.order",
    )

    def to_dict(self, include_children=False, include_project=False):
        """Serialize the call sheet.

        ``include_children=True, include_project=True`` yields the complete
        snapshot the document renderers consume.
        """
        result = {
            "id": self.id,
            "project_id": self.project_id,
            "episode": self.episode,
            "shooting_day": self.shooting_day,
            "date": self.date.isoformat() if self.date else None,
            "weather": self.weather,
            "temp_min": self.temp_min,
            "temp_max": self.temp_max,
            "precipitation": self.precipitation,
            "sunrise": self.sunrise,
            "sunset": self.sunset,
            "director": self.director,
            "producer": self.producer,
            "ad_name": self.ad_name,
            "location": self.location,
            "address": self.address,
            "meeting_place": self.meeting_place,
            "parking_info": self.parking_info,
            "emergency_contact": self.emergency_contact,
            "crew_call_time": self.crew_call_time,
            "talent_call_time": self.talent_call_time,
            "general_notes": self.general_notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        for field, _label in DETAIL_FIELDS:
            result[field] = getattr(self, field)
        if include_children:
            result["scenes"] = [s.to_dict() for s in self.scenes]
            result["schedules"] = [s.to_dict() for s in self.schedules]
            result["staff_list"] = [s.to_dict() for s in self.staff_list]
            result["cast_members"] = [c.to_dict() for c in self.cast_members]
        else:
            result["scene_count"] = len(self.scenes)
        if include_project and self.project is not None:
            result["project"] = {
                "id": self.project.id,
                "title": self.project.title,
                "type": self.project.type,
                "production_co": self.project.production_co,
            }
        return result

    def __repr__(self):
        return f"<DailyCallSheet {self.id}: day {self.shooting_day} {self.date}>"


# ═════════════════════════════════════════════════════════════════════════════
# 2. Child rows
# ═════════════════════════════════════════════════════════════════════════════


class Scene(db.Model):
    __tablename__ = "scenes"

    id = db.Column(db.Integer, primary_key=True)
    call_sheet_id = db.Column(
        db.Integer,
        db.ForeignKey("daily_call_sheets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order = db.Column(db.Integer, nullable=False, default=0)
    scene_number = db.Column(db.String(20), nullable=True, comment="Conventionally S#n")
    description = db.Column(db.Text, nullable=True)
    location_type = db.Column(db.String(10), nullable=True, comment="INT | EXT | INT/EXT")
    location_name = db.Column(db.String(200), nullable=True)
    day_night = db.Column(db.String(5), nullable=True, comment="M | D | E | N")
    pages = db.Column(db.String(20), nullable=True, comment="Cut label shown in the CUT column")
    estimated_time = db.Column(db.Integer, nullable=True, comment="Minutes")
    start_time = db.Column(db.String(10), nullable=True, comment="HH:MM")
    cast = db.Column(db.Text, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # Breakdown extras: stored with the scene, not printed
    extras = db.Column(db.Integer, nullable=True)
    props = db.Column(db.Text, nullable=True)
    wardrobe = db.Column(db.Text, nullable=True)
    makeup = db.Column(db.Text, nullable=True)
    special_equip = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "order": self.order,
            "scene_number": self.scene_number,
            "description": self.description,
            "location_type": self.location_type,
            "location_name": self.location_name,
            "day_night": self.day_night,
            "pages": self.pages,
            "estimated_time": self.estimated_time,
            "start_time": self.start_time,
            "cast": self.cast,
            "notes": self.notes,
            "extras": self.extras,
            "props": self.props,
            "wardrobe": self.wardrobe,
            "makeup": self.makeup,
            "special_equip": self.special_equip,
        }

    def __repr__(self):
        return f"<Scene {self.id}: {self.scene_number} #{self.order}>"


class Schedule(db.Model):
    __tablename__ = "call_sheet_schedules"

    id = db.Column(db.Integer, primary_key=True)
    call_sheet_id = db.Column(
        db.Integer,
        db.ForeignKey("daily_call_sheets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order = db.Column(db.Integer, nullable=False, default=0)
    time = db.Column(db.String(20), nullable=True)
    content = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "order": self.order,
            "time": self.time,
            "content": self.content,
        }

    def __repr__(self):
        return f"<Schedule {self.id}: {self.time} #{self.order}>"


class Staff(db.Model):
    __tablename__ = "call_sheet_staff"

    id = db.Column(db.Integer, primary_key=True)
    call_sheet_id = db.Column(
        db.Integer,
        db.ForeignKey("daily_call_sheets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order = db.Column(db.Integer, nullable=False, default=0)
    position = db.Column(db.String(100), nullable=True)
    name = db.Column(db.String(100), nullable=True)
    contact = db.Column(db.String(100), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "order": self.order,
            "position": self.position,
            "name": self.name,
            "contact": self.contact,
        }

    def __repr__(self):
        return f"<Staff {self.id}: {self.position} {self.name}>"


class CastMember(db.Model):
    __tablename__ = "call_sheet_cast"

    id = db.Column(db.Integer, primary_key=True)
    call_sheet_id = db.Column(
        db.Integer,
        db.ForeignKey("daily_call_sheets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order = db.Column(db.Integer, nullable=False, default=0)
    role = db.Column(db.String(100), nullable=True)
    actor_name = db.Column(db.String(100), nullable=True)
    call_time = db.Column(db.String(20), nullable=True)
    call_location = db.Column(db.String(200), nullable=True)
    scenes = db.Column(db.String(200), nullable=True, comment="Scene numbers the actor appears in")
    preparation = db.Column(db.Text, nullable=True, comment="Wardrobe / props the actor brings")
    contact = db.Column(db.String(100), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "order": self.order,
            "role": self.role,
            "actor_name": self.actor_name,
            "call_time": self.call_time,
            "call_location": self.call_location,
            "scenes": self.scenes,
            "preparation": self.preparation,
            "contact": self.contact,
        }

    def __repr__(self):
        return f"<CastMember {self.id}: {self.role} {self.actor_name}>"
