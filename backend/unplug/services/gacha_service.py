"""Gacha draws: rarity rolls, ten-pull floor, mission boost and persistence."""

import logging
import random

from sqlalchemy.exc import SQLAlchemyError

from unplug import db
from unplug.models.card import CardTemplate, Rarity, UserCard
from unplug.models.draw import DrawRecord, DrawType
from unplug.services.card_catalog import CardCatalog
from unplug.services.mission_service import MissionService
from unplug.services.pity_service import PityStatus, PityTracker
from unplug.services.quota_service import QuotaService
from unplug.services.user_locks import UserLockRegistry
from unplug.utils.clock import Clock
from unplug.utils.exceptions import NoTemplateAvailable, StorageFailure

logger = logging.getLogger(__name__)

# (rarity, probability) from highest weight to lowest. The walk below relies on
# this order: rare tiers claim their slice of [0, 1) first.
BASE_RATES = (
    (Rarity.SSR, 0.01),
    (Rarity.SR, 0.09),
    (Rarity.R, 0.30),
    (Rarity.N, 0.60),
)

# Boosted single-tier rates never exceed this
MAX_BOOSTED_RATE = 0.5

# Batches at least this large guarantee one SR-or-better
MULTI_DRAW_GUARANTEE_SIZE = 10
# Chance the guaranteed slot is SSR instead of SR
GUARANTEED_SLOT_SSR_CHANCE = 0.1

DEFAULT_MULTI_DRAW = 10
MAX_MULTI_DRAW = 10


def boosted_rates(boost: float) -> tuple:
    """
    Rates with today's mission boost applied.

    SSR scales with the full boost, SR with half of it, R is unchanged and N
    takes whatever is left.
    """
    if boost <= 0:
        return BASE_RATES

    base = dict(BASE_RATES)
    ssr = min(base[Rarity.SSR] * (1 + boost), MAX_BOOSTED_RATE)
    sr = min(base[Rarity.SR] * (1 + boost * 0.5), MAX_BOOSTED_RATE)
    r = base[Rarity.R]
    n = max(0.0, 1 - (ssr + sr + r))
    return (
        (Rarity.SSR, ssr),
        (Rarity.SR, sr),
        (Rarity.R, r),
        (Rarity.N, n),
    )


def pick_rarity(value: float, rates: tuple) -> Rarity:
    """First tier, highest weight first, whose cumulative rate reaches ``value``."""
    cumulative = 0.0
    for rarity, rate in rates:
        cumulative += rate
        if value <= cumulative:
            return rarity
    return Rarity.N


def roll_rarity(rng: random.Random, boost: float = 0.0) -> Rarity:
    return pick_rarity(rng.random(), boosted_rates(boost))


def roll_batch(
    rng: random.Random,
    count: int,
    boost: float = 0.0,
    pity: PityStatus | None = None,
    ssr_pity_threshold: int | None = None,
    guarantee_size: int = MULTI_DRAW_GUARANTEE_SIZE,
) -> list[Rarity]:
    """
    Roll ``count`` rarities in draw order.

    The last slot of a batch of ``guarantee_size`` or more is forced to SR or
    SSR when nothing before it reached SR. When ``ssr_pity_threshold`` is
    given, a roll made with that many draws (minus one) since the last SSR
    is forced to SSR.
    """
    running = PityStatus(**pity.to_dict()) if pity else PityStatus()
    results: list[Rarity] = []

    for i in range(count):
        is_last = i == count - 1
        if ssr_pity_threshold and running.since_ssr >= ssr_pity_threshold - 1:
            rarity = Rarity.SSR
        elif (
            count >= guarantee_size
            and is_last
            and not any(r.weight >= Rarity.SR.weight for r in results)
        ):
            rarity = (
                Rarity.SSR if rng.random() < GUARANTEED_SLOT_SSR_CHANCE else Rarity.SR
            )
        else:
            rarity = roll_rarity(rng, boost)

        running.advance(rarity)
        results.append(rarity)

    return results


def sort_by_rarity(cards: list[UserCard]) -> list[UserCard]:
    """Highest rarity first."""
    return sorted(cards, key=lambda c: c.template.rarity, reverse=True)


class GachaService:
    """Draws cards for a user within their daily quota."""

    def __init__(
        self,
        catalog: CardCatalog,
        missions: MissionService,
        quota: QuotaService,
        pity: PityTracker,
        locks: UserLockRegistry,
        clock: Clock,
        rng: random.Random,
        guarantee_size: int = MULTI_DRAW_GUARANTEE_SIZE,
        ssr_pity_threshold: int = 100,
        enforce_ssr_pity: bool = False,
    ):
        self.catalog = catalog
        self.missions = missions
        self.quota = quota
        self.pity = pity
        self.locks = locks
        self.clock = clock
        self.rng = rng
        self.guarantee_size = guarantee_size
        self.ssr_pity_threshold = ssr_pity_threshold
        self.enforce_ssr_pity = enforce_ssr_pity

    def draw(self, user_id: int) -> dict:
        """Single draw. On success the result carries ``card``."""
        result = self._draw_batch(user_id, 1, DrawType.SINGLE)
        if result["success"]:
            result["card"] = result["cards"][0]
        return result

    def draw_multiple(self, user_id: int, count: int = DEFAULT_MULTI_DRAW) -> dict:
        """Batch draw, sorted by rarity. All cards persist or none do."""
        if not isinstance(count, int) or count < 1 or count > MAX_MULTI_DRAW:
            return {
                "success": False,
                "error": "invalid_count",
                "max_count": MAX_MULTI_DRAW,
            }
        return self._draw_batch(user_id, count, DrawType.MULTI)

    def _draw_batch(self, user_id: int, count: int, draw_type: DrawType) -> dict:
        with self.locks.hold(user_id) as user:
            if user is None:
                return {"success": False, "error": "user_not_found"}

            # MeasurementUnavailable propagates: no guessing the quota.
            # Any remaining allowance authorizes the whole batch, which then
            # consumes its full size from today's quota.
            remaining = self.quota.remaining_draws_today(user_id)
            if remaining == 0:
                logger.info(
                    f"Draw refused for user {user_id}: "
                    f"requested {count}, no draws left today"
                )
                return {
                    "success": False,
                    "error": "quota_exhausted",
                    "requested": count,
                    "remaining": remaining,
                }

            boost = self.missions.current_boost(user_id)
            rarities = roll_batch(
                self.rng,
                count,
                boost=boost,
                pity=self.pity.status(user_id),
                ssr_pity_threshold=(
                    self.ssr_pity_threshold if self.enforce_ssr_pity else None
                ),
                guarantee_size=self.guarantee_size,
            )

            now = self.clock.now()
            cards = []
            try:
                for rarity in rarities:
                    template = self.catalog.template_for(rarity)
                    card = UserCard(
                        user_id=user_id,
                        template=template,
                        obtained_at=now,
                        is_boosted=boost > 0,
                        level=1,
                        experience=0,
                        is_favorite=False,
                    )
                    db.session.add(card)
                    db.session.add(
                        DrawRecord(
                            timestamp=now,
                            user_card=card,
                            user_id=user_id,
                            draw_type=draw_type.value,
                        )
                    )
                    cards.append(card)
                db.session.commit()
            except NoTemplateAvailable:
                db.session.rollback()
                raise
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Draw batch failed for user {user_id}: {e}")
                raise StorageFailure("Could not save draw results") from e

            pity = self.pity.advance(user_id, rarities)
            ordered = sort_by_rarity(cards)

            logger.info(
                f"User {user_id} drew {count} ({draw_type.value}, boost {boost:.2f}): "
                + ", ".join(r.value for r in rarities)
            )

            return {
                "success": True,
                "cards": [c.to_dict() for c in ordered],
                "draw_type": draw_type.value,
                "boost": boost,
                "pity": pity.to_dict(),
                "remaining": max(0, remaining - count),
            }

    def pity_status(self, user_id: int) -> dict:
        status = self.pity.status(user_id).to_dict()
        status["ssr_threshold"] = self.ssr_pity_threshold
        status["sr_threshold"] = self.guarantee_size
        status["ssr_pity_enforced"] = self.enforce_ssr_pity
        return status

    def draw_statistics(self, user_id: int) -> dict:
        """Totals and per-rarity counts over everything the user has drawn."""
        total = DrawRecord.query.filter_by(user_id=user_id).count()

        rows = (
            db.session.query(CardTemplate.rarity, db.func.count(UserCard.id))
            .join(UserCard, UserCard.template_id == CardTemplate.id)
            .filter(UserCard.user_id == user_id)
            .group_by(CardTemplate.rarity)
            .all()
        )
        by_weight = dict(rows)
        counts = {r.value: by_weight.get(r.weight, 0) for r in Rarity.descending()}

        def rate(n: int) -> float:
            return round(n / total * 100, 2) if total else 0.0

        return {
            "total_draws": total,
            "counts": counts,
            "ssr_rate": rate(counts[Rarity.SSR.value]),
            "sr_rate": rate(counts[Rarity.SR.value]),
        }

    def draw_history(self, user_id: int, limit: int = 50) -> list[dict]:
        """Most recent draws first, each with the card it produced."""
        records = (
            DrawRecord.query.filter_by(user_id=user_id)
            .order_by(DrawRecord.timestamp.desc(), DrawRecord.id.desc())
            .limit(limit)
            .all()
        )
        history = []
        for record in records:
            item = record.to_dict()
            item["card"] = record.user_card.to_dict()
            history.append(item)
        return history

    def rates_info(self, user_id: int) -> dict:
        """Base and currently effective rates, for the draw screen."""
        boost = self.missions.current_boost(user_id)
        return {
            "base_rates": {r.value: rate for r, rate in BASE_RATES},
            "current_rates": {r.value: rate for r, rate in boosted_rates(boost)},
            "boost": boost,
            "guarantee": {
                "multi_draw_size": self.guarantee_size,
                "guaranteed_ssr_chance": GUARANTEED_SLOT_SSR_CHANCE,
                "ssr_threshold": self.ssr_pity_threshold,
                "ssr_pity_enforced": self.enforce_ssr_pity,
            },
        }
