"""Authentication API endpoints."""

import logging

from flask import current_app, request
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required

from unplug import db
from unplug.api import api_bp
from unplug.models import User
from unplug.utils import (
    conflict,
    not_found,
    success_response,
    unauthorized,
    validation_error,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def _token_response(user: User, status_code: int = 200):
    access_token = create_access_token(identity=str(user.id))
    return success_response(
        {"user": user.to_dict(), "token": access_token}, status_code=status_code
    )


@api_bp.route("/auth/register", methods=["POST"])
def register():
    """
    Create an email/password account.

    Request body:
    {
        "email": "user@example.com",
        "password": "secret123",
        "username": "optional"
    }
    """
    data = request.get_json() or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    errors = {}
    if not email or "@" not in email:
        errors["email"] = "A valid email is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = (
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if errors:
        return validation_error(errors)

    if User.query.filter_by(email=email).first():
        return conflict("Email already registered")

    user = User(email=email, username=data.get("username") or email.split("@")[0])
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    logger.info(f"Registered user {user.id}")
    return _token_response(user, status_code=201)


@api_bp.route("/auth/login", methods=["POST"])
def login():
    """Log in with email and password."""
    data = request.get_json() or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return unauthorized("Invalid email or password")

    return _token_response(user)


@api_bp.route("/auth/me", methods=["GET"])
@jwt_required()
def get_current_user():
    """Get current authenticated user."""
    user_id = int(get_jwt_identity())
    user = db.session.get(User, user_id)

    if not user:
        return not_found("User not found")

    return success_response({"user": user.to_dict()})


@api_bp.route("/auth/dev", methods=["POST"])
def dev_authenticate():
    """
    Development-only endpoint for testing without credentials.
    Creates or gets a test user.

    Request body:
    {
        "username": "test_user"
    }
    """
    if not current_app.debug:
        return unauthorized("This endpoint is only available in development mode")

    data = request.get_json() or {}
    username = data.get("username", "test_user")

    user = User.query.filter_by(username=username).first()
    if not user:
        user = User(username=username)
        db.session.add(user)
        db.session.commit()

    return _token_response(user)
