"""Owned card API endpoints."""

from flask import request
from flask_jwt_extended import get_jwt_identity, jwt_required

from unplug.api import api_bp, get_services
from unplug.models.card import Rarity
from unplug.services.progression_service import CARD_SORTS
from unplug.utils import not_found, success_response, validation_error


@api_bp.route("/cards", methods=["GET"])
@jwt_required()
def get_user_cards():
    """
    Get user's card collection.

    Query params:
    - sort: newest (default), oldest, level, favorites or rarity
    - rarity: filter by rarity (optional)
    - favorites: "true" to return favorites only
    """
    user_id = int(get_jwt_identity())
    sort = request.args.get("sort", "newest")
    rarity_param = request.args.get("rarity")
    favorites_only = request.args.get("favorites", "").lower() == "true"

    if sort not in CARD_SORTS:
        return validation_error({"sort": f"Must be one of: {list(CARD_SORTS)}"})

    rarity = None
    if rarity_param:
        try:
            rarity = Rarity(rarity_param.upper())
        except ValueError:
            return validation_error(
                {"rarity": f"Must be one of: {[r.value for r in Rarity]}"}
            )

    cards = get_services().progression.list_cards(
        user_id, sort=sort, rarity=rarity, favorites_only=favorites_only
    )

    return success_response(
        {
            "cards": [c.to_dict() for c in cards],
            "total": len(cards),
            "sort": sort,
        }
    )


@api_bp.route("/cards/summary", methods=["GET"])
@jwt_required()
def get_collection_summary():
    user_id = int(get_jwt_identity())
    return success_response(get_services().progression.collection_summary(user_id))


@api_bp.route("/cards/<int:card_id>", methods=["GET"])
@jwt_required()
def get_card_details(card_id: int):
    """Get details of a specific card."""
    user_id = int(get_jwt_identity())

    card = get_services().progression.get_card(user_id, card_id)
    if not card:
        return not_found("Card not found")

    return success_response({"card": card.to_dict()})


@api_bp.route("/cards/<int:card_id>/favorite", methods=["POST"])
@jwt_required()
def toggle_card_favorite(card_id: int):
    user_id = int(get_jwt_identity())

    result = get_services().progression.toggle_favorite(user_id, card_id)
    if not result["success"]:
        return not_found("Card not found")

    return success_response({"card": result["card"]})
