"""Owned cards: experience, favorites and collection views."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from unplug import db
from unplug.models.card import CardTemplate, Rarity, UserCard
from unplug.services.user_locks import UserLockRegistry
from unplug.utils.clock import Clock
from unplug.utils.exceptions import StorageFailure

logger = logging.getLogger(__name__)

# Sort name -> ORDER BY clauses
CARD_SORTS = {
    "newest": (UserCard.obtained_at.desc(), UserCard.id.desc()),
    "oldest": (UserCard.obtained_at.asc(), UserCard.id.asc()),
    "level": (UserCard.level.desc(), UserCard.experience.desc(), UserCard.id.asc()),
    "favorites": (UserCard.is_favorite.desc(), UserCard.obtained_at.desc()),
    "rarity": (CardTemplate.rarity.desc(), UserCard.obtained_at.desc()),
}


class ProgressionService:
    """Mutations and queries on a user's owned cards."""

    def __init__(self, clock: Clock, locks: UserLockRegistry):
        self.clock = clock
        self.locks = locks

    def get_card(self, user_id: int, card_id: int) -> UserCard | None:
        return UserCard.query.filter_by(id=card_id, user_id=user_id).first()

    def list_cards(
        self,
        user_id: int,
        sort: str = "newest",
        rarity: Rarity | None = None,
        favorites_only: bool = False,
    ) -> list[UserCard]:
        if sort not in CARD_SORTS:
            raise ValueError(f"Unknown sort: {sort}")

        query = UserCard.query.join(CardTemplate).filter(UserCard.user_id == user_id)
        if rarity is not None:
            query = query.filter(CardTemplate.rarity == rarity.weight)
        if favorites_only:
            query = query.filter(UserCard.is_favorite.is_(True))
        return query.order_by(*CARD_SORTS[sort]).all()

    def grant_experience(self, user_id: int, card_id: int, amount: int) -> dict:
        """Add experience to a card, applying any level-ups."""
        if amount < 0:
            return {"success": False, "error": "invalid_amount"}

        with self.locks.hold(user_id):
            card = self.get_card(user_id, card_id)
            if not card:
                return {"success": False, "error": "card_not_found"}

            old_level = card.level
            leveled_up = card.add_experience(amount)
            try:
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Failed to save experience for card {card_id}: {e}")
                raise StorageFailure("Could not save card experience") from e

            if leveled_up:
                logger.info(
                    f"Card {card_id} of user {user_id} leveled "
                    f"{old_level} -> {card.level}"
                )

            return {
                "success": True,
                "leveled_up": leveled_up,
                "old_level": old_level,
                "new_level": card.level,
                "card": card.to_dict(),
            }

    def toggle_favorite(self, user_id: int, card_id: int) -> dict:
        with self.locks.hold(user_id):
            card = self.get_card(user_id, card_id)
            if not card:
                return {"success": False, "error": "card_not_found"}

            card.is_favorite = not card.is_favorite
            try:
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                raise StorageFailure("Could not update favorite") from e

            return {"success": True, "card": card.to_dict()}

    def collection_summary(self, user_id: int) -> dict:
        cards = self.list_cards(user_id, sort="level")

        counts = {r.value: 0 for r in Rarity.descending()}
        for card in cards:
            counts[card.rarity.value] += 1

        average_level = (
            round(sum(c.level for c in cards) / len(cards), 2) if cards else 0.0
        )

        return {
            "total": len(cards),
            "counts": counts,
            "average_level": average_level,
            "highest_level_card": cards[0].to_dict() if cards else None,
            "favorites": sum(1 for c in cards if c.is_favorite),
            "boosted": sum(1 for c in cards if c.is_boosted),
            "obtained_today": sum(
                1 for c in cards if self.clock.is_today(c.obtained_at)
            ),
        }
