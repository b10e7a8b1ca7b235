"""WSGI entry point."""

import logging
import os

from unplug import create_app, db

app = create_app(os.environ.get("FLASK_ENV", "production"))

# Make sure every rarity is drawable before serving
with app.app_context():
    db.create_all()
    try:
        app.extensions["gacha"].catalog.seed()
    except Exception as e:
        logging.getLogger(__name__).warning(f"Failed to seed card catalog: {e}")


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000)
