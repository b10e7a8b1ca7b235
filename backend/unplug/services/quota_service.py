"""Daily draw quota derived from measured screen usage."""

import logging
import math

from sqlalchemy.exc import SQLAlchemyError

from unplug import db
from unplug.models.draw import DrawRecord
from unplug.models.usage import UsageRecord, usage_rating
from unplug.utils.clock import Clock
from unplug.utils.exceptions import StorageFailure

logger = logging.getLogger(__name__)

BASE_DRAWS = 5
# Whole hours of usage allowed before each extra hour costs a draw
FREE_HOURS = 3
# Used this little or less, and the user earns extra draws
EARLY_COMPLETION_HOURS = 1.5
EARLY_COMPLETION_BONUS = 2
DAILY_DRAW_CAP = 10
TARGET_HOURS = 3.0


def draw_allowance(usage_hours: float, cap: int = DAILY_DRAW_CAP) -> int:
    """
    Draws earned for a day's usage, before subtracting draws already made.

    Penalty and bonus both look at raw usage hours:
    - every whole hour past 3 removes one of the 5 base draws (floored at 0)
    - 1.5 hours or less adds 2
    - the result is capped at ``cap``
    """
    penalty = max(0, math.floor(usage_hours) - FREE_HOURS)
    allowance = max(0, BASE_DRAWS - penalty)
    if usage_hours <= EARLY_COMPLETION_HOURS:
        allowance += EARLY_COMPLETION_BONUS
    return min(allowance, cap)


class QuotaService:
    """Answers how many draws a user may still make today."""

    def __init__(self, usage_source, clock: Clock, daily_cap: int = DAILY_DRAW_CAP):
        self.usage_source = usage_source
        self.clock = clock
        self.daily_cap = daily_cap

    def usage_hours_today(self, user_id: int) -> float:
        """Raises MeasurementUnavailable if the usage source fails."""
        return self.usage_source.todays_usage_seconds(user_id) / 3600.0

    def draws_today(self, user_id: int) -> int:
        start, end = self.clock.day_range()
        return DrawRecord.query.filter(
            DrawRecord.user_id == user_id,
            DrawRecord.timestamp >= start,
            DrawRecord.timestamp < end,
        ).count()

    def draw_allowance(self, usage_hours: float) -> int:
        return draw_allowance(usage_hours, self.daily_cap)

    def remaining_draws_today(self, user_id: int) -> int:
        allowance = self.draw_allowance(self.usage_hours_today(user_id))
        return max(0, allowance - self.draws_today(user_id))

    def progress(self, user_id: int, usage_hours: float | None = None) -> dict:
        """How today's usage compares to the 3-hour target."""
        if usage_hours is None:
            usage_hours = self.usage_hours_today(user_id)
        return {
            "current_hours": round(usage_hours, 3),
            "target_hours": TARGET_HOURS,
            "percentage": min(1.0, usage_hours / TARGET_HOURS),
        }

    def quota_status(self, user_id: int) -> dict:
        usage_hours = self.usage_hours_today(user_id)
        allowance = self.draw_allowance(usage_hours)
        used = self.draws_today(user_id)
        return {
            "usage_hours": round(usage_hours, 3),
            "rating": usage_rating(usage_hours),
            "allowance": allowance,
            "used": used,
            "remaining": max(0, allowance - used),
            "daily_cap": self.daily_cap,
            "progress": self.progress(user_id, usage_hours),
        }

    def record_usage(self, user_id: int, duration_seconds: float) -> UsageRecord:
        """Append a usage sample for today."""
        if duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")

        record = UsageRecord(
            user_id=user_id,
            date=self.clock.local_date(),
            duration_seconds=float(duration_seconds),
            recorded_at=self.clock.now(),
        )
        try:
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to record usage for user {user_id}: {e}")
            raise StorageFailure("Could not record usage sample") from e

        logger.info(f"Recorded {duration_seconds:.0f}s usage for user {user_id}")
        return record
