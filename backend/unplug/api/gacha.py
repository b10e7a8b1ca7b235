"""Gacha draw API endpoints."""

from flask import request
from flask_jwt_extended import get_jwt_identity, jwt_required

from unplug.api import api_bp, get_services
from unplug.extensions import limiter
from unplug.utils import (
    error_response,
    not_found,
    quota_exhausted,
    success_response,
    validation_error,
)

DRAW_RATE_LIMIT = "30 per minute"


def _draw_refused(result: dict):
    """Map a refused draw result to an error response."""
    error = result.get("error")

    if error == "user_not_found":
        return not_found("User not found")

    if error == "quota_exhausted":
        return quota_exhausted(result["requested"])

    if error == "invalid_count":
        return validation_error(
            {"count": f"Must be between 1 and {result['max_count']}"}
        )

    return error_response("DRAW_REFUSED", str(error))


@api_bp.route("/gacha/rates", methods=["GET"])
@jwt_required()
def get_rates():
    """Base rates, today's boosted rates and guarantee settings."""
    user_id = int(get_jwt_identity())
    return success_response(get_services().gacha.rates_info(user_id))


@api_bp.route("/gacha/draw", methods=["POST"])
@limiter.limit(DRAW_RATE_LIMIT)
@jwt_required()
def draw_single():
    """Draw one card."""
    user_id = int(get_jwt_identity())

    result = get_services().gacha.draw(user_id)
    if not result["success"]:
        return _draw_refused(result)

    return success_response(result, status_code=201)


@api_bp.route("/gacha/draw-multiple", methods=["POST"])
@limiter.limit(DRAW_RATE_LIMIT)
@jwt_required()
def draw_multiple():
    """
    Draw several cards at once.

    Request body:
    {
        "count": 10  // optional, 1..10
    }
    """
    user_id = int(get_jwt_identity())
    data = request.get_json(silent=True) or {}
    count = data.get("count", 10)

    if isinstance(count, bool) or not isinstance(count, int):
        return validation_error({"count": "Must be an integer"})

    result = get_services().gacha.draw_multiple(user_id, count)
    if not result["success"]:
        return _draw_refused(result)

    return success_response(result, status_code=201)


@api_bp.route("/gacha/pity", methods=["GET"])
@jwt_required()
def get_pity():
    """Draws since the last SSR and since the last SR or better."""
    user_id = int(get_jwt_identity())
    return success_response({"pity": get_services().gacha.pity_status(user_id)})


@api_bp.route("/gacha/statistics", methods=["GET"])
@jwt_required()
def get_statistics():
    user_id = int(get_jwt_identity())
    return success_response(get_services().gacha.draw_statistics(user_id))


@api_bp.route("/gacha/history", methods=["GET"])
@jwt_required()
def get_history():
    """
    Recent draws, newest first.

    Query params:
    - limit: number of draws to return (1..100, default 50)
    """
    user_id = int(get_jwt_identity())
    limit = request.args.get("limit", 50, type=int)

    if limit < 1 or limit > 100:
        return validation_error({"limit": "Must be between 1 and 100"})

    history = get_services().gacha.draw_history(user_id, limit=limit)
    return success_response({"draws": history, "total": len(history)})
