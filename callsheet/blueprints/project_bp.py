"""
Call Sheet Planner
Project blueprint: productions and their staff/cast pools.

Endpoints:
    PROJECT  /api/v1/projects                           GET, POST
             /api/v1/projects/<id>                      GET, PUT, DELETE

    POOLS    /api/v1/projects/<id>/staff                GET, POST, PUT (replace)
             /api/v1/projects/<id>/cast                 GET, POST, PUT (replace)

    FORM     /api/v1/projects/<id>/call-sheets/defaults GET
"""

import logging

from flask import Blueprint, jsonify, request

from callsheet.blueprints import paginate_query, register_service_error_handlers
from callsheet.services import project_service
from callsheet.utils.errors import E, api_error

logger = logging.getLogger(__name__)

project_bp = Blueprint("project", __name__, url_prefix="/api/v1")

register_service_error_handlers(project_bp, logger)


def _json_object():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")
    return data, None


def _json_list():
    data = request.get_json(silent=True)
    if not isinstance(data, list):
        return None, api_error(E.VALIDATION_INVALID, "Request body must be a JSON array")
    return data, None


# ═══════════════════════════════════════════════════════════════════════════
#  PROJECT CRUD
# ═══════════════════════════════════════════════════════════════════════════

@project_bp.route("/projects", methods=["GET"])
def list_projects():
    user_id = request.args.get("user_id") or None
    projects, total = paginate_query(project_service.projects_query(user_id=user_id))
    return jsonify({"items": [p.to_dict() for p in projects], "total": total})


@project_bp.route("/projects", methods=["POST"])
def create_project():
    data, err = _json_object()
    if err:
        return err
    if not str(data.get("title") or "").strip():
        return api_error(E.VALIDATION_REQUIRED, "title is required")

    project = project_service.create_project(data, user_id=data.get("user_id"))
    return jsonify(project.to_dict()), 201


@project_bp.route("/projects/<int:project_id>", methods=["GET"])
def get_project(project_id):
    project = project_service.get_project(project_id)
    return jsonify(project.to_dict(include_call_sheets=True))


@project_bp.route("/projects/<int:project_id>", methods=["PUT"])
def update_project(project_id):
    data, err = _json_object()
    if err:
        return err
    project = project_service.update_project(project_id, data)
    return jsonify(project.to_dict())


@project_bp.route("/projects/<int:project_id>", methods=["DELETE"])
def delete_project(project_id):
    project_service.delete_project(project_id)
    return jsonify({"message": "Project deleted"}), 200


# ═══════════════════════════════════════════════════════════════════════════
#  STAFF / CAST POOLS
# ═══════════════════════════════════════════════════════════════════════════

@project_bp.route("/projects/<int:project_id>/staff", methods=["GET"])
def list_staff_pool(project_id):
    return jsonify([s.to_dict() for s in project_service.list_staff_pool(project_id)])


@project_bp.route("/projects/<int:project_id>/staff", methods=["POST"])
def add_staff_to_pool(project_id):
    data, err = _json_object()
    if err:
        return err
    member = project_service.add_staff_to_pool(project_id, data)
    return jsonify(member.to_dict()), 201


@project_bp.route("/projects/<int:project_id>/staff", methods=["PUT"])
def replace_staff_pool(project_id):
    items, err = _json_list()
    if err:
        return err
    members = project_service.replace_staff_pool(project_id, items)
    return jsonify([s.to_dict() for s in members])


@project_bp.route("/projects/<int:project_id>/cast", methods=["GET"])
def list_cast_pool(project_id):
    return jsonify([c.to_dict() for c in project_service.list_cast_pool(project_id)])


@project_bp.route("/projects/<int:project_id>/cast", methods=["POST"])
def add_cast_to_pool(project_id):
    data, err = _json_object()
    if err:
        return err
    member = project_service.add_cast_to_pool(project_id, data)
    return jsonify(member.to_dict()), 201


@project_bp.route("/projects/<int:project_id>/cast", methods=["PUT"])
def replace_cast_pool(project_id):
    items, err = _json_list()
    if err:
        return err
    members = project_service.replace_cast_pool(project_id, items)
    return jsonify([c.to_dict() for c in members])


@project_bp.route("/projects/<int:project_id>/call-sheets/defaults", methods=["GET"])
def new_call_sheet_defaults(project_id):
    return jsonify(project_service.new_call_sheet_defaults(project_id))
