"""Database models."""

from unplug.models.card import CardTemplate, Rarity, UserCard
from unplug.models.draw import DrawRecord, DrawType
from unplug.models.mission import MissionDifficulty, MissionRecord, MissionType
from unplug.models.usage import UsageRecord
from unplug.models.user import User

__all__ = [
    "User",
    # Card system
    "Rarity",
    "CardTemplate",
    "UserCard",
    "DrawRecord",
    "DrawType",
    # Missions
    "MissionType",
    "MissionDifficulty",
    "MissionRecord",
    # Usage
    "UsageRecord",
]
