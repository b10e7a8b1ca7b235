"""Tests for card experience, favorites and collection views."""

import pytest

from unplug import db
from unplug.models import Rarity, UserCard
from unplug.models.card import MAX_CARD_LEVEL


class TestAddExperience:
    """Level-up arithmetic on UserCard."""

    def test_exact_threshold_levels_once(self, app, make_card, test_user):
        card = db.session.get(UserCard, make_card(test_user["id"]))

        assert card.add_experience(card.experience_needed) is True
        assert card.level == 2
        assert card.experience == 0

    def test_below_threshold_keeps_level(self, app, make_card, test_user):
        card = db.session.get(UserCard, make_card(test_user["id"]))

        assert card.add_experience(99) is False
        assert card.level == 1
        assert card.experience_progress == pytest.approx(0.99)

    def test_one_grant_can_level_twice(self, app, make_card, test_user):
        card = db.session.get(UserCard, make_card(test_user["id"]))

        # 100 for level 1 -> 2, then 200 for level 2 -> 3
        assert card.add_experience(300) is True
        assert card.level == 3
        assert card.experience == 0

    def test_overflow_carries(self, app, make_card, test_user):
        card = db.session.get(UserCard, make_card(test_user["id"]))
        card.add_experience(150)
        assert (card.level, card.experience) == (2, 50)

    def test_level_cap(self, app, make_card, test_user):
        card = db.session.get(UserCard, make_card(test_user["id"], level=99))

        card.add_experience(1_000_000)
        assert card.level == MAX_CARD_LEVEL
        assert card.experience == 0

        assert card.add_experience(500) is False
        assert card.level == MAX_CARD_LEVEL

    def test_negative_experience_rejected(self, app, make_card, test_user):
        card = db.session.get(UserCard, make_card(test_user["id"]))
        with pytest.raises(ValueError):
            card.add_experience(-1)


class TestStats:
    """Level-derived stats."""

    def test_level_one_uses_template_bonus(self, app, make_card, test_user):
        card = db.session.get(UserCard, make_card(test_user["id"], Rarity.SR))
        assert card.current_attack == 60
        assert card.current_defense == 30
        assert card.total_stats == 90

    def test_stats_grow_per_level(self, app, make_card, test_user):
        card = db.session.get(
            UserCard, make_card(test_user["id"], Rarity.SSR, level=3)
        )
        assert card.current_attack == 112
        assert card.current_defense == 58
        assert card.total_stats == 170
        assert card.total_stats == card.current_attack + card.current_defense


class TestProgressionService:
    """Owned card operations through the service."""

    def test_grant_experience(self, services, make_card, test_user):
        card_id = make_card(test_user["id"])
        result = services.progression.grant_experience(test_user["id"], card_id, 250)

        assert result["success"] is True
        assert result["leveled_up"] is True
        assert (result["old_level"], result["new_level"]) == (1, 2)
        assert result["card"]["experience"] == 150
        assert db.session.get(UserCard, card_id).level == 2

    def test_grant_experience_to_other_users_card(
        self, services, make_card, test_user
    ):
        card_id = make_card(test_user["id"])
        result = services.progression.grant_experience(test_user["id"] + 1, card_id, 10)
        assert result == {"success": False, "error": "card_not_found"}

    def test_grant_negative_amount(self, services, make_card, test_user):
        card_id = make_card(test_user["id"])
        result = services.progression.grant_experience(test_user["id"], card_id, -5)
        assert result["error"] == "invalid_amount"

    def test_toggle_favorite(self, services, make_card, test_user):
        card_id = make_card(test_user["id"])

        first = services.progression.toggle_favorite(test_user["id"], card_id)
        second = services.progression.toggle_favorite(test_user["id"], card_id)

        assert first["card"]["is_favorite"] is True
        assert second["card"]["is_favorite"] is False

    def test_list_cards_sorts(self, services, make_card, test_user):
        low = make_card(test_user["id"], Rarity.N, level=5)
        high = make_card(test_user["id"], Rarity.SSR, level=2)

        by_level = services.progression.list_cards(test_user["id"], sort="level")
        assert [c.id for c in by_level] == [low, high]

        by_rarity = services.progression.list_cards(test_user["id"], sort="rarity")
        assert [c.id for c in by_rarity] == [high, low]

    def test_list_cards_filters(self, services, make_card, test_user):
        make_card(test_user["id"], Rarity.N)
        ssr = make_card(test_user["id"], Rarity.SSR, is_favorite=True)

        only_ssr = services.progression.list_cards(test_user["id"], rarity=Rarity.SSR)
        assert [c.id for c in only_ssr] == [ssr]

        favorites = services.progression.list_cards(
            test_user["id"], favorites_only=True
        )
        assert [c.id for c in favorites] == [ssr]

    def test_unknown_sort(self, services, test_user):
        with pytest.raises(ValueError):
            services.progression.list_cards(test_user["id"], sort="shiny")

    def test_collection_summary(self, services, make_card, test_user):
        make_card(test_user["id"], Rarity.N, level=1)
        top = make_card(test_user["id"], Rarity.SR, level=4, is_favorite=True)

        summary = services.progression.collection_summary(test_user["id"])
        assert summary["total"] == 2
        assert summary["counts"] == {"SSR": 0, "SR": 1, "R": 0, "N": 1}
        assert summary["average_level"] == 2.5
        assert summary["highest_level_card"]["id"] == top
        assert summary["favorites"] == 1

    def test_empty_collection_summary(self, services, test_user):
        summary = services.progression.collection_summary(test_user["id"])
        assert summary["total"] == 0
        assert summary["highest_level_card"] is None
