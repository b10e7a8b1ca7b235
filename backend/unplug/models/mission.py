"""Mission catalog and completion records."""

from datetime import datetime
from enum import Enum

from unplug import db


class MissionDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Boost added to today's draw odds per completed mission
DIFFICULTY_BOOST = {
    MissionDifficulty.EASY: 0.10,
    MissionDifficulty.MEDIUM: 0.30,
    MissionDifficulty.HARD: 0.50,
}


class MissionType(str, Enum):
    """Side objectives a user can complete once per cooldown window."""

    JOURNAL = "journal"
    GOOD_DEED = "good_deed"
    MORNING_EXERCISE = "morning_exercise"
    READING = "reading"
    MEDITATION = "meditation"
    FOCUSED_STUDY = "focused_study"
    EARLY_SLEEP = "early_sleep"
    HEALTHY_DIET = "healthy_diet"

    @property
    def difficulty(self) -> MissionDifficulty:
        return MISSION_CATALOG[self]["difficulty"]

    @property
    def probability_boost(self) -> float:
        return DIFFICULTY_BOOST[self.difficulty]

    @property
    def display_name(self) -> str:
        return MISSION_CATALOG[self]["name"]

    @property
    def description(self) -> str:
        return MISSION_CATALOG[self]["description"]

    def to_dict(self) -> dict:
        return {
            "type": self.value,
            "name": self.display_name,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "probability_boost": self.probability_boost,
        }


MISSION_CATALOG = {
    MissionType.JOURNAL: {
        "name": "Write a journal entry",
        "description": "Write down today's thoughts and keep a positive mindset",
        "difficulty": MissionDifficulty.EASY,
    },
    MissionType.GOOD_DEED: {
        "name": "Record a good deed",
        "description": "Note one kind thing you did today",
        "difficulty": MissionDifficulty.EASY,
    },
    MissionType.MORNING_EXERCISE: {
        "name": "Morning exercise",
        "description": "Exercise for at least 15 minutes in the morning",
        "difficulty": MissionDifficulty.MEDIUM,
    },
    MissionType.READING: {
        "name": "Reading",
        "description": "Read for at least 30 minutes",
        "difficulty": MissionDifficulty.MEDIUM,
    },
    MissionType.MEDITATION: {
        "name": "Meditation",
        "description": "Meditate for 10 minutes",
        "difficulty": MissionDifficulty.MEDIUM,
    },
    MissionType.FOCUSED_STUDY: {
        "name": "Focused study",
        "description": "Study without distractions for at least an hour",
        "difficulty": MissionDifficulty.HARD,
    },
    MissionType.EARLY_SLEEP: {
        "name": "Early to bed",
        "description": "Fall asleep before 23:00",
        "difficulty": MissionDifficulty.HARD,
    },
    MissionType.HEALTHY_DIET: {
        "name": "Healthy diet",
        "description": "Eat healthily all day and skip junk food",
        "difficulty": MissionDifficulty.HARD,
    },
}


class MissionRecord(db.Model):
    """A successful mission completion."""

    __tablename__ = "mission_records"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    mission_type = db.Column(db.String(50), nullable=False)
    completed_at = db.Column(
        db.DateTime, default=datetime.utcnow, nullable=False, index=True
    )
    # Copied from the catalog at completion time
    probability_boost = db.Column(db.Float, nullable=False)

    @property
    def mission_type_enum(self) -> MissionType | None:
        try:
            return MissionType(self.mission_type)
        except ValueError:
            return None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "mission_type": self.mission_type,
            "completed_at": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
            "probability_boost": self.probability_boost,
        }
