"""Screen usage samples."""

from datetime import date, datetime

from unplug import db

# Usage rating bands, in hours (inclusive upper bounds)
EXCELLENT_HOURS = 1.5
GOOD_HOURS = 3.0
FAIR_HOURS = 5.0


def usage_rating(hours: float) -> str:
    """Rate a day's usage: excellent, good, fair or needs_improvement."""
    if hours <= EXCELLENT_HOURS:
        return "excellent"
    if hours <= GOOD_HOURS:
        return "good"
    if hours <= FAIR_HOURS:
        return "fair"
    return "needs_improvement"


class UsageRecord(db.Model):
    """Measured screen time reported for a user on a calendar day."""

    __tablename__ = "usage_records"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = db.Column(db.Date, default=date.today, nullable=False, index=True)
    duration_seconds = db.Column(db.Float, nullable=False)
    recorded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def duration_hours(self) -> float:
        return self.duration_seconds / 3600.0

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60.0

    @property
    def is_over_limit(self) -> bool:
        return self.duration_hours > GOOD_HOURS

    @property
    def rating(self) -> str:
        return usage_rating(self.duration_hours)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat() if self.date else None,
            "duration_seconds": self.duration_seconds,
            "duration_hours": round(self.duration_hours, 3),
            "rating": self.rating,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
        }
