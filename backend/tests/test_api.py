"""Tests for the REST API."""

from unplug import db
from unplug.models import CardTemplate, Rarity
from unplug.utils.exceptions import MeasurementUnavailable, StorageFailure


class TestAuthAPI:
    """Tests for account endpoints."""

    def test_register_and_login(self, client):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "New@Example.com", "password": "longenough"},
        )
        assert response.status_code == 201
        assert response.json["data"]["user"]["email"] == "new@example.com"
        assert response.json["data"]["token"]

        response = client.post(
            "/api/v1/auth/login",
            json={"email": "new@example.com", "password": "longenough"},
        )
        assert response.status_code == 200

    def test_register_validation(self, client):
        response = client.post(
            "/api/v1/auth/register", json={"email": "nope", "password": "short"}
        )
        assert response.status_code == 400
        assert set(response.json["error"]["details"]) == {"email", "password"}

    def test_register_duplicate(self, client, test_user):
        response = client.post(
            "/api/v1/auth/register",
            json={"email": "test@example.com", "password": "password123"},
        )
        assert response.status_code == 409

    def test_login_wrong_password(self, client, test_user):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "test@example.com", "password": "wrong-password"},
        )
        assert response.status_code == 401

    def test_me(self, auth_client, test_user):
        response = auth_client.get("/api/v1/auth/me")
        assert response.status_code == 200
        assert response.json["data"]["user"]["id"] == test_user["id"]

    def test_me_requires_token(self, client):
        response = client.get("/api/v1/auth/me")
        assert response.status_code == 401

    def test_dev_login_disabled_outside_debug(self, app, client):
        app.debug = False
        response = client.post("/api/v1/auth/dev", json={"username": "x"})
        assert response.status_code == 401


class TestGachaAPI:
    """Tests for draw endpoints."""

    def test_rates(self, auth_client):
        response = auth_client.get("/api/v1/gacha/rates")
        assert response.status_code == 200
        assert response.json["data"]["current_rates"]["SSR"] == 0.01

    def test_draw(self, auth_client):
        response = auth_client.post("/api/v1/gacha/draw")
        assert response.status_code == 201
        data = response.json["data"]
        assert data["card"]["level"] == 1
        assert data["remaining"] == 6

    def test_draw_multiple(self, auth_client):
        response = auth_client.post("/api/v1/gacha/draw-multiple", json={"count": 4})
        assert response.status_code == 201
        cards = response.json["data"]["cards"]
        assert len(cards) == 4

        ranks = [Rarity(c["rarity"]).weight for c in cards]
        assert ranks == sorted(ranks, reverse=True)

    def test_draw_multiple_uses_up_quota(self, auth_client):
        response = auth_client.post("/api/v1/gacha/draw-multiple")
        assert response.status_code == 201
        assert len(response.json["data"]["cards"]) == 10
        assert response.json["data"]["remaining"] == 0

        response = auth_client.post("/api/v1/gacha/draw")
        assert response.status_code == 429
        error = response.json["error"]
        assert error["code"] == "QUOTA_EXHAUSTED"
        assert error["details"] == {"requested": 1, "remaining": 0}

    def test_history(self, auth_client):
        auth_client.post("/api/v1/gacha/draw-multiple", json={"count": 3})
        auth_client.post("/api/v1/gacha/draw")

        response = auth_client.get("/api/v1/gacha/history?limit=2")
        assert response.status_code == 200
        data = response.json["data"]
        assert data["total"] == 2
        assert data["draws"][0]["draw_type"] == "single"
        assert data["draws"][0]["card"]["level"] == 1

    def test_history_bad_limit(self, auth_client):
        for limit in (0, 101):
            response = auth_client.get(f"/api/v1/gacha/history?limit={limit}")
            assert response.status_code == 400

    def test_request_id_echoed(self, auth_client):
        response = auth_client.get(
            "/api/v1/gacha/rates", headers={"X-Request-ID": "abc123"}
        )
        assert response.headers["X-Request-ID"] == "abc123"

    def test_request_id_generated(self, auth_client):
        response = auth_client.get("/api/v1/gacha/rates")
        assert len(response.headers["X-Request-ID"]) == 8

    def test_draw_multiple_invalid_count(self, auth_client):
        for count in (0, 11, "three", True):
            response = auth_client.post(
                "/api/v1/gacha/draw-multiple", json={"count": count}
            )
            assert response.status_code == 400

    def test_single_draws_until_exhausted(self, auth_client):
        for _ in range(7):
            assert auth_client.post("/api/v1/gacha/draw").status_code == 201
        response = auth_client.post("/api/v1/gacha/draw")
        assert response.status_code == 429

    def test_pity_and_statistics(self, auth_client):
        auth_client.post("/api/v1/gacha/draw-multiple", json={"count": 3})

        pity = auth_client.get("/api/v1/gacha/pity").json["data"]["pity"]
        assert pity["ssr_threshold"] == 100

        stats = auth_client.get("/api/v1/gacha/statistics").json["data"]
        assert stats["total_draws"] == 3

    def test_draw_requires_token(self, client):
        response = client.post("/api/v1/gacha/draw")
        assert response.status_code == 401

    def test_missing_template_is_configuration_error(self, auth_client, services):
        CardTemplate.query.filter_by(rarity=Rarity.SSR.weight).update(
            {"is_active": False}
        )
        db.session.commit()
        services.gacha.enforce_ssr_pity = True
        services.gacha.ssr_pity_threshold = 1

        response = auth_client.post("/api/v1/gacha/draw")
        assert response.status_code == 500
        assert response.json["error"]["code"] == "CONFIGURATION_ERROR"

    def test_measurement_unavailable(self, auth_client, services):
        class BrokenSource:
            def todays_usage_seconds(self, user_id):
                raise MeasurementUnavailable("Usage source timed out")

        services.quota.usage_source = BrokenSource()

        response = auth_client.post("/api/v1/gacha/draw")
        assert response.status_code == 503
        assert response.json["error"]["code"] == "MEASUREMENT_UNAVAILABLE"


class TestMissionsAPI:
    """Tests for mission endpoints."""

    def test_list_missions(self, auth_client):
        response = auth_client.get("/api/v1/missions")
        assert response.status_code == 200
        assert len(response.json["data"]["missions"]) == 8

    def test_complete_mission(self, auth_client):
        response = auth_client.post("/api/v1/missions/early_sleep/complete")
        assert response.status_code == 201
        assert response.json["data"]["current_boost"] == 0.5

        response = auth_client.post("/api/v1/missions/early_sleep/complete")
        assert response.status_code == 409
        assert response.json["error"]["code"] == "MISSION_ON_COOLDOWN"

    def test_unknown_mission(self, auth_client):
        response = auth_client.post("/api/v1/missions/skydiving/complete")
        assert response.status_code == 400


class TestUsageAPI:
    """Tests for usage and quota endpoints."""

    def test_report_usage(self, auth_client):
        response = auth_client.post("/api/v1/usage", json={"duration_seconds": 18000})
        assert response.status_code == 201
        quota = response.json["data"]["quota"]
        assert quota["usage_hours"] == 5.0
        assert quota["remaining"] == 3

    def test_report_invalid_usage(self, auth_client):
        for value in (-10, "an hour", None):
            response = auth_client.post(
                "/api/v1/usage", json={"duration_seconds": value}
            )
            assert response.status_code == 400

    def test_get_quota(self, auth_client):
        response = auth_client.get("/api/v1/quota")
        assert response.status_code == 200
        assert response.json["data"]["quota"]["remaining"] == 7

    def test_storage_failure(self, auth_client, services, monkeypatch):
        def fail(user_id, duration_seconds):
            raise StorageFailure("Could not record usage sample")

        monkeypatch.setattr(services.quota, "record_usage", fail)

        response = auth_client.post("/api/v1/usage", json={"duration_seconds": 60})
        assert response.status_code == 503
        assert response.json["error"]["code"] == "STORAGE_FAILURE"


class TestCardsAPI:
    """Tests for owned card endpoints."""

    def test_list_cards(self, auth_client, make_card, test_user):
        make_card(test_user["id"], Rarity.N)
        make_card(test_user["id"], Rarity.SSR)

        response = auth_client.get("/api/v1/cards?sort=rarity")
        assert response.status_code == 200
        cards = response.json["data"]["cards"]
        assert [c["rarity"] for c in cards] == ["SSR", "N"]

    def test_list_cards_bad_params(self, auth_client):
        assert auth_client.get("/api/v1/cards?sort=shiny").status_code == 400
        assert auth_client.get("/api/v1/cards?rarity=UR").status_code == 400

    def test_card_detail_and_favorite(self, auth_client, make_card, test_user):
        card_id = make_card(test_user["id"], Rarity.R)

        response = auth_client.get(f"/api/v1/cards/{card_id}")
        assert response.status_code == 200
        assert response.json["data"]["card"]["attack"] == 30

        response = auth_client.post(f"/api/v1/cards/{card_id}/favorite")
        assert response.json["data"]["card"]["is_favorite"] is True

    def test_card_not_found(self, auth_client):
        assert auth_client.get("/api/v1/cards/999").status_code == 404
        assert auth_client.post("/api/v1/cards/999/favorite").status_code == 404

    def test_summary(self, auth_client, make_card, test_user):
        make_card(test_user["id"], Rarity.SR, level=3)
        response = auth_client.get("/api/v1/cards/summary")
        assert response.status_code == 200
        assert response.json["data"]["counts"]["SR"] == 1


class TestAdminAPI:
    """Tests for admin endpoints."""

    def test_requires_admin(self, auth_client):
        response = auth_client.get("/api/v1/admin/catalog")
        assert response.status_code == 403

    def test_catalog_statistics(self, app, auth_client, test_user):
        app.config["ADMIN_USER_IDS"] = [test_user["id"]]
        response = auth_client.get("/api/v1/admin/catalog")
        assert response.status_code == 200
        assert response.json["data"]["total"] == 77

    def test_grant_experience(self, app, auth_client, make_card, test_user):
        app.config["ADMIN_USER_IDS"] = [test_user["id"]]
        card_id = make_card(test_user["id"])

        response = auth_client.post(
            f"/api/v1/admin/cards/{card_id}/experience", json={"amount": 300}
        )
        assert response.status_code == 200
        assert response.json["data"]["new_level"] == 3

        response = auth_client.post(
            f"/api/v1/admin/cards/{card_id}/experience", json={"amount": -1}
        )
        assert response.status_code == 400

    def test_toggle_template(self, app, auth_client, test_user):
        app.config["ADMIN_USER_IDS"] = [test_user["id"]]
        template_id = CardTemplate.query.first().id

        response = auth_client.post(
            f"/api/v1/admin/catalog/templates/{template_id}/active",
            json={"active": False},
        )
        assert response.status_code == 200
        assert response.json["data"]["template"]["is_active"] is False
