"""
Call Sheet Planner
Daily call sheet blueprint.

Endpoints:
    CALL SHEET  /api/v1/call-sheets?project_id=               GET, POST
                /api/v1/call-sheets/<id>                      GET, PUT (replace), DELETE
                /api/v1/call-sheets/<id>/summary              GET

    SCENES      /api/v1/call-sheets/<id>/scenes/reorder       POST {from_index, to_index}
                /api/v1/call-sheets/<id>/scenes/<scene_id>    DELETE

    POOL COPY   /api/v1/call-sheets/<id>/staff/from-pool      POST {project_staff_id}
                /api/v1/call-sheets/<id>/cast/from-pool       POST {project_cast_id}
"""

import logging

from flask import Blueprint, jsonify, request

from callsheet.blueprints import paginate_query, register_service_error_handlers
from callsheet.services import call_sheet_service
from callsheet.utils.errors import E, api_error

logger = logging.getLogger(__name__)

call_sheet_bp = Blueprint("call_sheet", __name__, url_prefix="/api/v1")

register_service_error_handlers(call_sheet_bp, logger)

_CHILD_KEYS = ("scenes", "schedules", "staff_list", "cast_members")


def _call_sheet_body():
    """JSON object body with list-typed child collections, or a 400 response."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, api_error(E.VALIDATION_INVALID, "Request body must be a JSON object")
    for key in _CHILD_KEYS:
        if data.get(key) is not None and not isinstance(data[key], list):
            return None, api_error(E.VALIDATION_INVALID, f"{key} must be an array")
    return data, None


# ═══════════════════════════════════════════════════════════════════════════
#  CALL SHEET CRUD
# ═══════════════════════════════════════════════════════════════════════════

@call_sheet_bp.route("/call-sheets", methods=["GET"])
def list_call_sheets():
    project_id = request.args.get("project_id", type=int)
    sheets, total = paginate_query(call_sheet_service.call_sheets_query(project_id=project_id))
    return jsonify({"items": [cs.to_dict() for cs in sheets], "total": total})


@call_sheet_bp.route("/call-sheets", methods=["POST"])
def create_call_sheet():
    data, err = _call_sheet_body()
    if err:
        return err
    if not data.get("project_id"):
        return api_error(E.VALIDATION_REQUIRED, "project_id is required")
    if not data.get("date"):
        return api_error(E.VALIDATION_REQUIRED, "date is required")

    call_sheet = call_sheet_service.create_call_sheet(data)
    return jsonify(call_sheet.to_dict(include_children=True, include_project=True)), 201


@call_sheet_bp.route("/call-sheets/<int:call_sheet_id>", methods=["GET"])
def get_call_sheet(call_sheet_id):
    return jsonify(call_sheet_service.call_sheet_snapshot(call_sheet_id))


@call_sheet_bp.route("/call-sheets/<int:call_sheet_id>", methods=["PUT"])
def update_call_sheet(call_sheet_id):
    data, err = _call_sheet_body()
    if err:
        return err
    if not data.get("date"):
        return api_error(E.VALIDATION_REQUIRED, "date is required")

    call_sheet = call_sheet_service.update_call_sheet(call_sheet_id, data)
    return jsonify(call_sheet.to_dict(include_children=True, include_project=True))


@call_sheet_bp.route("/call-sheets/<int:call_sheet_id>", methods=["DELETE"])
def delete_call_sheet(call_sheet_id):
    call_sheet_service.delete_call_sheet(call_sheet_id)
    return jsonify({"message": "Call sheet deleted"}), 200


@call_sheet_bp.route("/call-sheets/<int:call_sheet_id>/summary", methods=["GET"])
def call_sheet_summary(call_sheet_id):
    return jsonify(call_sheet_service.call_sheet_summary(call_sheet_id))


# ═══════════════════════════════════════════════════════════════════════════
#  SCENES
# ═══════════════════════════════════════════════════════════════════════════

@call_sheet_bp.route("/call-sheets/<int:call_sheet_id>/scenes/reorder", methods=["POST"])
def reorder_scenes(call_sheet_id):
    data = request.get_json(silent=True) or {}
    if "from_index" not in data or "to_index" not in data:
        return api_error(E.VALIDATION_REQUIRED, "from_index and to_index are required")

    scenes = call_sheet_service.reorder_scenes(call_sheet_id, data["from_index"], data["to_index"])
    return jsonify([s.to_dict() for s in scenes])


@call_sheet_bp.route("/call-sheets/<int:call_sheet_id>/scenes/<int:scene_id>", methods=["DELETE"])
def delete_scene(call_sheet_id, scene_id):
    scenes = call_sheet_service.delete_scene(call_sheet_id, scene_id)
    return jsonify([s.to_dict() for s in scenes])


# ═══════════════════════════════════════════════════════════════════════════
#  COPY FROM PROJECT POOLS
# ═══════════════════════════════════════════════════════════════════════════

@call_sheet_bp.route("/call-sheets/<int:call_sheet_id>/staff/from-pool", methods=["POST"])
def add_staff_from_pool(call_sheet_id):
    data = request.get_json(silent=True) or {}
    if not data.get("project_staff_id"):
        return api_error(E.VALIDATION_REQUIRED, "project_staff_id is required")

    staff = call_sheet_service.add_staff_from_pool(call_sheet_id, data["project_staff_id"])
    return jsonify([s.to_dict() for s in staff])


@call_sheet_bp.route("/call-sheets/<int:call_sheet_id>/cast/from-pool", methods=["POST"])
def add_cast_from_pool(call_sheet_id):
    data = request.get_json(silent=True) or {}
    if not data.get("project_cast_id"):
        return api_error(E.VALIDATION_REQUIRED, "project_cast_id is required")

    cast = call_sheet_service.add_cast_from_pool(call_sheet_id, data["project_cast_id"])
    return jsonify([c.to_dict() for c in cast])
