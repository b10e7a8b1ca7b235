"""Draw audit log."""

from datetime import datetime
from enum import Enum

from unplug import db


class DrawType(str, Enum):
    """How a card was drawn."""

    SINGLE = "single"
    MULTI = "multi"


class DrawRecord(db.Model):
    """One row per card drawn. Append-only."""

    __tablename__ = "draw_records"

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(
        db.DateTime, default=datetime.utcnow, nullable=False, index=True
    )
    user_card_id = db.Column(
        db.Integer,
        db.ForeignKey("user_cards.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    draw_type = db.Column(db.String(10), default=DrawType.SINGLE.value, nullable=False)

    user_card = db.relationship("UserCard", lazy="joined")

    @property
    def draw_type_enum(self) -> DrawType:
        try:
            return DrawType(self.draw_type)
        except ValueError:
            return DrawType.SINGLE

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "user_card_id": self.user_card_id,
            "user_id": self.user_id,
            "draw_type": self.draw_type_enum.value,
        }
