#!/usr/bin/env python3
"""
Call Sheet Planner — Demo Data Seed Script.

Creates one drama production with its staff/cast pools and a filled-in
first-day call sheet, so the preview and both exports have something to show.

Usage:
    python scripts/seed_demo_data.py
    python scripts/seed_demo_data.py --append
    python scripts/seed_demo_data.py --verbose
"""

import argparse
import sys

sys.path.insert(0, ".")

from callsheet import create_app
from callsheet.models import db
from callsheet.models.call_sheet import CastMember, DailyCallSheet, Scene, Schedule, Staff
from callsheet.models.project import Project, ProjectCast, ProjectStaff
from callsheet.services import call_sheet_service, project_service

PROJECT = {
    "title": "봄날의 기억",
    "type": "드라마",
    "production_co": "한빛픽처스",
    "director": "김감독",
    "producer": "이프로",
    "ad_name": "박조연",
    "start_date": "2024-03-01",
    "end_date": "2024-05-31",
    "status": "SHOOTING",
}

STAFF_POOL = [
    {"position": "촬영감독", "name": "최촬영", "contact": "010-1111-2222"},
    {"position": "조명감독", "name": "정조명", "contact": "010-3333-4444"},
    {"position": "동시녹음", "name": "한음향", "contact": "010-5555-6666"},
    {"position": "미술감독", "name": "오미술", "contact": "010-7777-8888"},
]

CAST_POOL = [
    {"role": "서연", "actor_name": "윤배우", "contact": "010-1234-5678"},
    {"role": "준호", "actor_name": "강배우", "contact": "010-8765-4321"},
]

CALL_SHEET = {
    "episode": "3",
    "shooting_day": 1,
    "date": "2024-03-15",
    "weather": "맑음",
    "temp_min": "4℃",
    "temp_max": "15℃",
    "precipitation": "10%",
    "sunrise": "06:41",
    "sunset": "18:39",
    "location": "한강공원 뚝섬지구",
    "address": "서울 광진구 자양동 427-6",
    "parking_info": "뚝섬유원지 제1주차장",
    "emergency_contact": "박조연 010-2468-1357",
    "crew_call_time": "07:00",
    "talent_call_time": "08:00",
    "general_notes": "우천 시 실내 세트로 변경됩니다.\n개인 물병 지참 부탁드립니다.",
    "detail_direction": "S#12 롱테이크, 핸드헬드 위주",
    "detail_camera": "ALEXA Mini, 짐벌 1대",
    "detail_lighting": "반사판 2, HMI 1.8K",
    "scenes": [
        {"scene_number": "S#12", "pages": "3", "day_night": "D", "start_time": "08:00",
         "estimated_time": 60, "location_type": "EXT", "location_name": "한강공원 벤치",
         "description": "서연, 준호에게 편지를 건넨다", "cast": "서연, 준호"},
        {"scene_number": "S#13", "pages": "2", "day_night": "D", "start_time": "09:30",
         "estimated_time": 90, "location_type": "EXT", "location_name": "산책로",
         "description": "둘이 말없이 걷는다", "cast": "서연, 준호", "notes": "드론 촬영"},
        {"scene_number": "S#20", "pages": "4", "day_night": "E", "start_time": "13:00",
         "estimated_time": 120, "location_type": "INT", "location_name": "편의점",
         "description": "준호, 혼자 라면을 먹는다", "cast": "준호", "extras": 3},
    ],
    "schedules": [
        {"time": "07:00", "content": "스태프 집합 및 세팅"},
        {"time": "08:00", "content": "S#12 촬영"},
        {"time": "12:00", "content": "점심"},
        {"time": "16:00", "content": "촬영 종료 예정"},
    ],
    "cast_members": [
        {"role": "서연", "actor_name": "윤배우", "call_time": "07:30",
         "call_location": "분장차", "scenes": "12, 13", "preparation": "베이지 트렌치코트"},
        {"role": "준호", "actor_name": "강배우", "call_time": "07:30",
         "call_location": "분장차", "scenes": "12, 13, 20", "preparation": "편지 소품"},
    ],
}


def seed_all(app, append=False, verbose=False):
    """Seed the demo production."""
    with app.app_context():
        if not append:
            print("🗑️  Clearing existing data...")
            for model in [CastMember, Staff, Schedule, Scene, DailyCallSheet,
                          ProjectCast, ProjectStaff, Project]:
                db.session.query(model).delete()
            db.session.commit()
            print("   Done.\n")

        print("🎬 Creating project...")
        project = project_service.create_project(PROJECT)
        project_service.replace_staff_pool(project.id, STAFF_POOL)
        project_service.replace_cast_pool(project.id, CAST_POOL)

        print("📋 Creating call sheet...")
        call_sheet = call_sheet_service.create_call_sheet({**CALL_SHEET, "project_id": project.id})
        for member in project_service.list_staff_pool(project.id):
            call_sheet_service.add_staff_from_pool(call_sheet.id, member.id)

        if verbose:
            summary = call_sheet_service.call_sheet_summary(call_sheet.id)
            print(f"   scenes={summary['scene_count']} duration={summary['shooting_duration']}"
                  f" end={summary['shooting_end_time']}")

        print(f"\n{'='*60}")
        print(f"🎉 DEMO DATA SEED COMPLETE — project {project.id}, call sheet {call_sheet.id}")
        print(f"{'='*60}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument("--append", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    app = create_app()
    print(f"🎯 DB: {app.config['SQLALCHEMY_DATABASE_URI']}\n")
    seed_all(app, append=args.append, verbose=args.verbose)


if __name__ == "__main__":
    main()
