"""Admin access for catalog and progression tools."""

from functools import wraps

from flask import current_app
from flask_jwt_extended import get_jwt_identity, jwt_required

from unplug import db
from unplug.models.user import User
from unplug.utils.response import forbidden, unauthorized


def get_admin_ids() -> list[int]:
    return current_app.config.get("ADMIN_USER_IDS", [])


def admin_required(fn):
    """
    Allow the view only for users listed in ADMIN_USER_IDS.

    Use instead of @jwt_required(), not together with it.
    """

    @wraps(fn)
    @jwt_required()
    def wrapper(*args, **kwargs):
        user_id = int(get_jwt_identity())

        if db.session.get(User, user_id) is None:
            return unauthorized("User not found")

        if user_id not in get_admin_ids():
            return forbidden()

        return fn(*args, **kwargs)

    return wrapper
