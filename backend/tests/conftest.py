"""Pytest configuration and fixtures."""

import random
from datetime import datetime

import pytest

from unplug import create_app, db
from unplug.models import CardTemplate, Rarity, User, UserCard
from unplug.services import build_services
from unplug.utils.clock import FrozenClock

# Midday, so small clock moves stay on the same calendar day
FROZEN_NOW = datetime(2026, 10, 18, 12, 0, 0)


@pytest.fixture
def clock():
    """Clock pinned to FROZEN_NOW; tests move it with ``clock.advance``."""
    return FrozenClock(FROZEN_NOW, timezone="UTC")


@pytest.fixture
def app(clock):
    """Create and configure a test application instance."""
    services = build_services(
        {"GACHA_TIMEZONE": "UTC"}, clock=clock, rng=random.Random(20261018)
    )
    app = create_app("testing", services=services)

    with app.app_context():
        db.create_all()
        services.catalog.seed()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def services(app):
    """The app's service container."""
    return app.extensions["gacha"]


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def test_user(app):
    """Create a test user in the database."""
    user = User(email="test@example.com", username="test_user")
    user.set_password("password123")
    db.session.add(user)
    db.session.commit()

    # Refresh to get the ID
    db.session.refresh(user)
    return {"id": user.id, "username": user.username}


@pytest.fixture
def make_card(app):
    """Factory for owned cards of a given rarity."""

    def _make_card(user_id, rarity=Rarity.N, level=1, experience=0, **kwargs):
        template = CardTemplate.query.filter_by(rarity=rarity.weight).first()
        card = UserCard(
            user_id=user_id,
            template=template,
            level=level,
            experience=experience,
            **kwargs,
        )
        db.session.add(card)
        db.session.commit()
        return card.id

    return _make_card


@pytest.fixture
def auth_headers(client, test_user):
    """Get authorization headers with JWT token."""
    response = client.post("/api/v1/auth/dev", json={"username": "test_user"})
    assert response.status_code == 200
    token = response.json["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_client(client, auth_headers):
    """Create an authenticated test client wrapper."""

    class AuthenticatedClient:
        def __init__(self, client, headers):
            self._client = client
            self._headers = headers

        def get(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.get(*args, **kwargs)

        def post(self, *args, **kwargs):
            kwargs.setdefault("headers", {}).update(self._headers)
            return self._client.post(*args, **kwargs)

    return AuthenticatedClient(client, auth_headers)
