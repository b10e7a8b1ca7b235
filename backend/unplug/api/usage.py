"""Screen usage and draw quota endpoints."""

from flask import request
from flask_jwt_extended import get_jwt_identity, jwt_required

from unplug.api import api_bp, get_services
from unplug.utils import success_response, validation_error


@api_bp.route("/usage", methods=["POST"])
@jwt_required()
def report_usage():
    """
    Append a screen usage sample for today.

    Request body:
    {
        "duration_seconds": 1800
    }
    """
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True) or {}
    duration = data.get("duration_seconds")

    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        return validation_error({"duration_seconds": "Must be a number"})
    if duration < 0:
        return validation_error({"duration_seconds": "Must be non-negative"})

    services = get_services()
    record = services.quota.record_usage(user_id, duration)

    return success_response(
        {"usage": record.to_dict(), "quota": services.quota.quota_status(user_id)},
        status_code=201,
    )


@api_bp.route("/quota", methods=["GET"])
@jwt_required()
def get_quota():
    """Today's usage, draw allowance and progress towards the usage target."""
    user_id = int(get_jwt_identity())
    return success_response({"quota": get_services().quota.quota_status(user_id)})
