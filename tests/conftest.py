"""
Shared pytest fixtures for the Call Sheet Planner test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - project / call_sheet: Pre-created entities via the service layer
    - snapshot: Renderer input dict for a fully filled-in call sheet
    - make_snapshot: Factory for hand-built renderer input
"""

import copy

import pytest

from callsheet import create_app
from callsheet.models import db as _db
from callsheet.services import call_sheet_service, project_service


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


FULL_CALL_SHEET = {
    "episode": "3",
    "date": "2024-03-15",
    "weather": "맑음",
    "temp_min": "4℃",
    "temp_max": "15℃",
    "precipitation": "10%",
    "sunrise": "06:41",
    "sunset": "18:39",
    "director": "김감독",
    "producer": "이프로",
    "ad_name": "박조연",
    "location": "한강공원",
    "address": "서울 광진구 자양동 427-6",
    "crew_call_time": "07:00",
    "general_notes": "우천 시 실내 세트로 변경\n물병 지참",
    "detail_direction": "롱테이크 위주",
    "detail_lighting": "반사판 2",
    "scenes": [
        {"scene_number": "S#12", "pages": "3", "day_night": "D", "start_time": "08:00",
         "estimated_time": 60, "location_type": "EXT", "location_name": "벤치",
         "description": "편지를 건넨다", "cast": "서연, 준호"},
        {"scene_number": "S#13", "pages": "2", "day_night": "D", "start_time": "09:30",
         "estimated_time": 90, "location_type": "INT", "location_name": "카페",
         "description": "대화", "cast": "서연", "notes": "창가 자리"},
    ],
    "schedules": [
        {"time": "07:00", "content": "집합"},
        {"time": "12:00", "content": "점심"},
    ],
    "staff_list": [
        {"position": "촬영감독", "name": "최촬영", "contact": "010-1111-2222"},
    ],
    "cast_members": [
        {"role": "서연", "actor_name": "윤배우", "call_time": "07:30",
         "call_location": "분장차", "scenes": "12, 13", "preparation": "트렌치코트"},
    ],
}


@pytest.fixture()
def full_payload():
    """Save payload for a call sheet with every section filled in."""
    return copy.deepcopy(FULL_CALL_SHEET)


@pytest.fixture()
def project():
    """A project created through the service layer."""
    return project_service.create_project({
        "title": "봄날의 기억",
        "type": "드라마",
        "production_co": "한빛픽처스",
        "director": "김감독",
        "producer": "이프로",
        "ad_name": "박조연",
    })


@pytest.fixture()
def call_sheet(project):
    """A fully filled-in call sheet (day 1) of ``project``."""
    return call_sheet_service.create_call_sheet({**FULL_CALL_SHEET, "project_id": project.id})


@pytest.fixture()
def snapshot(call_sheet):
    """Renderer input for ``call_sheet``."""
    return call_sheet_service.call_sheet_snapshot(call_sheet.id)


@pytest.fixture()
def make_snapshot():
    """Factory for plain-dict call sheets; renderer tests need no database rows."""

    def _make(**overrides):
        cs = {
            "id": 1,
            "project_id": 1,
            "shooting_day": 1,
            "date": "2024-03-15",
            "project": {"id": 1, "title": "테스트", "type": None, "production_co": None},
            "scenes": [],
            "schedules": [],
            "staff_list": [],
            "cast_members": [],
        }
        cs.update(overrides)
        return cs

    return _make
