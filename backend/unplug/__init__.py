"""Flask application factory."""

import os

from flask import Flask
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from unplug.config import config

db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()


def create_app(config_name: str | None = None, services=None) -> Flask:
    """Create and configure the Flask application.

    ``services`` lets callers (tests, scripts) inject a prebuilt
    ``GachaServices`` container instead of the one built from config.
    """
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from unplug.extensions import limiter

    limiter.init_app(app)

    # CORS
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    from unplug.logging_config import setup_logging

    setup_logging(app)

    # Service container shared by every request of this app
    if services is None:
        from unplug.services import build_services

        services = build_services(app.config)
    app.extensions["gacha"] = services

    # Register blueprints
    from unplug.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    from unplug.cli import catalog

    app.cli.add_command(catalog)

    # Health check endpoint
    @app.route("/health")
    def health():
        return {"status": "ok"}

    # Shell context
    @app.shell_context_processor
    def make_shell_context():
        from unplug.models import (CardTemplate, DrawRecord, MissionRecord,
                                   UsageRecord, User, UserCard)

        return {
            "db": db,
            "User": User,
            "CardTemplate": CardTemplate,
            "UserCard": UserCard,
            "DrawRecord": DrawRecord,
            "MissionRecord": MissionRecord,
            "UsageRecord": UsageRecord,
            "gacha": app.extensions["gacha"],
        }

    return app
