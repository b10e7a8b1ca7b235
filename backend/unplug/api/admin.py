"""Admin API endpoints: experience grants and catalog management."""

import logging

from flask import request

from unplug import db
from unplug.api import api_bp, get_services
from unplug.models.card import UserCard
from unplug.utils import not_found, success_response, validation_error
from unplug.utils.auth import admin_required

logger = logging.getLogger(__name__)


@api_bp.route("/admin/cards/<int:card_id>/experience", methods=["POST"])
@admin_required
def grant_card_experience(card_id: int):
    """
    Grant experience to any user's card.

    Request body:
    {
        "amount": 150
    }
    """
    data = request.get_json(silent=True) or {}
    amount = data.get("amount")

    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        return validation_error({"amount": "Must be a non-negative integer"})

    card = db.session.get(UserCard, card_id)
    if not card:
        return not_found("Card not found")

    result = get_services().progression.grant_experience(card.user_id, card_id, amount)
    if not result["success"]:
        return not_found("Card not found")

    logger.info(f"Admin granted {amount} experience to card {card_id}")
    return success_response(result)


@api_bp.route("/admin/catalog", methods=["GET"])
@admin_required
def get_catalog_statistics():
    """Template counts by rarity and series, and active pool sizes."""
    return success_response(get_services().catalog.statistics())


@api_bp.route("/admin/catalog/templates/<int:template_id>/active", methods=["POST"])
@admin_required
def set_template_active(template_id: int):
    """
    Enable or disable a template for future draws.

    Request body:
    {
        "active": false
    }
    """
    data = request.get_json(silent=True) or {}
    active = data.get("active")

    if not isinstance(active, bool):
        return validation_error({"active": "Must be a boolean"})

    template = get_services().catalog.set_active(template_id, active)
    if not template:
        return not_found("Template not found")

    return success_response({"template": template.to_dict()})
