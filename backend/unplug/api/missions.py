"""Mission API endpoints."""

from flask_jwt_extended import get_jwt_identity, jwt_required

from unplug.api import api_bp, get_services
from unplug.models.mission import MissionType
from unplug.utils import (
    mission_on_cooldown,
    not_found,
    success_response,
    validation_error,
)


@api_bp.route("/missions", methods=["GET"])
@jwt_required()
def get_missions():
    """Mission catalog with availability and today's boost."""
    user_id = int(get_jwt_identity())
    return success_response(get_services().missions.overview(user_id))


@api_bp.route("/missions/<mission_type>/complete", methods=["POST"])
@jwt_required()
def complete_mission(mission_type: str):
    """Complete a mission. Each type has a 24 hour cooldown."""
    user_id = int(get_jwt_identity())

    try:
        mission = MissionType(mission_type)
    except ValueError:
        return validation_error(
            {"mission_type": f"Must be one of: {[m.value for m in MissionType]}"}
        )

    result = get_services().missions.complete(user_id, mission)

    if not result["success"]:
        if result["error"] == "user_not_found":
            return not_found("User not found")
        return mission_on_cooldown(result["available_at"])

    return success_response(result, status_code=201)
