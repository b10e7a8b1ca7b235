"""Mission ledger: completions, cooldowns and today's odds boost."""

import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from unplug import db
from unplug.models.mission import MissionRecord, MissionType
from unplug.services.user_locks import UserLockRegistry
from unplug.utils.clock import Clock
from unplug.utils.exceptions import StorageFailure

logger = logging.getLogger(__name__)

# A mission type can be completed again this long after its last completion
MISSION_COOLDOWN = timedelta(hours=24)

# Today's combined boost never exceeds +100%
MAX_BOOST = 1.0


class MissionService:
    """Records mission completions and derives today's probability boost."""

    def __init__(self, clock: Clock, locks: UserLockRegistry):
        self.clock = clock
        self.locks = locks

    def _last_completion(
        self, user_id: int, mission_type: MissionType
    ) -> MissionRecord | None:
        since = self.clock.now() - MISSION_COOLDOWN
        return (
            MissionRecord.query.filter(
                MissionRecord.user_id == user_id,
                MissionRecord.mission_type == mission_type.value,
                MissionRecord.completed_at >= since,
            )
            .order_by(MissionRecord.completed_at.desc())
            .first()
        )

    def can_complete(self, user_id: int, mission_type: MissionType) -> bool:
        """True unless this mission type was completed within the cooldown."""
        return self._last_completion(user_id, mission_type) is None

    def cooldown_remaining(self, user_id: int, mission_type: MissionType) -> int:
        """Seconds until the mission can be completed again (0 if available)."""
        last = self._last_completion(user_id, mission_type)
        if last is None:
            return 0
        available_at = last.completed_at + MISSION_COOLDOWN
        return max(0, int((available_at - self.clock.now()).total_seconds()))

    def complete(self, user_id: int, mission_type: MissionType) -> dict:
        """
        Record a completion unless the mission is on cooldown.

        Refusals have no side effects.
        """
        with self.locks.hold(user_id) as user:
            if user is None:
                return {"success": False, "error": "user_not_found"}

            last = self._last_completion(user_id, mission_type)
            if last is not None:
                available_at = last.completed_at + MISSION_COOLDOWN
                return {
                    "success": False,
                    "error": "mission_on_cooldown",
                    "available_at": available_at.isoformat(),
                }

            record = MissionRecord(
                user_id=user_id,
                mission_type=mission_type.value,
                completed_at=self.clock.now(),
                probability_boost=mission_type.probability_boost,
            )
            try:
                db.session.add(record)
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Failed to record mission for user {user_id}: {e}")
                raise StorageFailure("Could not record mission completion") from e

        boost = self.current_boost(user_id)
        logger.info(
            f"User {user_id} completed mission {mission_type.value} "
            f"(+{mission_type.probability_boost:.2f}, boost now {boost:.2f})"
        )
        return {"success": True, "mission": record.to_dict(), "current_boost": boost}

    def _today_records(self, user_id: int) -> list[MissionRecord]:
        start, end = self.clock.day_range()
        return MissionRecord.query.filter(
            MissionRecord.user_id == user_id,
            MissionRecord.completed_at >= start,
            MissionRecord.completed_at < end,
        ).all()

    def current_boost(self, user_id: int) -> float:
        """Sum of today's mission boosts, capped at 1.0."""
        total = sum(r.probability_boost for r in self._today_records(user_id))
        return min(MAX_BOOST, total)

    def today_completed(self, user_id: int) -> list[MissionType]:
        completed = []
        for record in self._today_records(user_id):
            mission_type = record.mission_type_enum
            if mission_type is not None:
                completed.append(mission_type)
        return completed

    def available_missions(self, user_id: int) -> list[MissionType]:
        """Mission types not currently on cooldown."""
        return [m for m in MissionType if self.can_complete(user_id, m)]

    def overview(self, user_id: int) -> dict:
        """Catalog with per-user availability, for the missions screen."""
        missions = []
        for mission_type in MissionType:
            remaining = self.cooldown_remaining(user_id, mission_type)
            item = mission_type.to_dict()
            item["available"] = remaining == 0
            item["cooldown_remaining"] = remaining
            missions.append(item)

        return {
            "missions": missions,
            "completed_today": [m.value for m in self.today_completed(user_id)],
            "current_boost": self.current_boost(user_id),
            "max_boost": MAX_BOOST,
        }
