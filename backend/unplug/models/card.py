"""Card catalog and ownership models."""

from datetime import datetime
from enum import Enum

from unplug import db


class Rarity(str, Enum):
    """Card rarity tiers, lowest to highest."""

    N = "N"
    R = "R"
    SR = "SR"
    SSR = "SSR"

    @property
    def weight(self) -> int:
        """Sort/draw weight: N=1 < R=2 < SR=3 < SSR=4."""
        return RARITY_WEIGHTS[self]

    @property
    def attack_bonus(self) -> int:
        return RARITY_STATS[self]["attack"]

    @property
    def defense_bonus(self) -> int:
        return RARITY_STATS[self]["defense"]

    @property
    def display_name(self) -> str:
        return RARITY_DISPLAY[self]["name"]

    @property
    def color(self) -> str:
        return RARITY_DISPLAY[self]["color"]

    @classmethod
    def from_weight(cls, weight: int) -> "Rarity":
        for rarity, value in RARITY_WEIGHTS.items():
            if value == weight:
                return rarity
        raise ValueError(f"Unknown rarity weight: {weight}")

    @classmethod
    def descending(cls) -> list["Rarity"]:
        """Tiers from highest weight to lowest."""
        return sorted(cls, key=lambda r: r.weight, reverse=True)


RARITY_WEIGHTS = {
    Rarity.N: 1,
    Rarity.R: 2,
    Rarity.SR: 3,
    Rarity.SSR: 4,
}

# Base stats a template gets from its rarity
RARITY_STATS = {
    Rarity.N: {"attack": 10, "defense": 5},
    Rarity.R: {"attack": 30, "defense": 15},
    Rarity.SR: {"attack": 60, "defense": 30},
    Rarity.SSR: {"attack": 100, "defense": 50},
}

# UI hints only
RARITY_DISPLAY = {
    Rarity.N: {"name": "Normal", "color": "#888888"},
    Rarity.R: {"name": "Rare", "color": "#008000"},
    Rarity.SR: {"name": "Super Rare", "color": "#0000FF"},
    Rarity.SSR: {"name": "Superior Super Rare", "color": "#FF00FF"},
}

# Seed catalog: series -> ordered character list. Position in the list decides
# which rarities a character is available in (earlier = more rarities).
SERIES_CHARACTERS = {
    "One Piece": [
        "Luffy",
        "Zoro",
        "Nami",
        "Sanji",
        "Usopp",
        "Chopper",
        "Robin",
        "Franky",
        "Brook",
    ],
    "Naruto": [
        "Naruto",
        "Sasuke",
        "Sakura",
        "Kakashi",
        "Gaara",
        "Tsunade",
        "Jiraiya",
        "Orochimaru",
    ],
    "Demon Slayer": [
        "Tanjiro",
        "Nezuko",
        "Zenitsu",
        "Inosuke",
        "Giyu",
        "Shinobu",
        "Rengoku",
    ],
    "Frieren": [
        "Frieren",
        "Fern",
        "Eisen",
        "Heiter",
        "Stark",
        "Ubel",
        "Lernen",
    ],
}

MAX_CARD_LEVEL = 100

# Per-level stat growth. The total is tracked separately from attack + defense.
ATTACK_PER_LEVEL = 6
DEFENSE_PER_LEVEL = 4
TOTAL_STATS_PER_LEVEL = 10


def template_key(series: str, character_name: str, rarity: Rarity) -> str:
    """Stable identifier of a (series, character, rarity) template."""
    return f"{series}:{character_name}:{rarity.value}"


class CardTemplate(db.Model):
    """
    Obtainable card definition: one identity (series x character) at one rarity.
    Created when the catalog is seeded; only ``is_active`` changes afterwards.
    """

    __tablename__ = "card_templates"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(200), unique=True, nullable=False)
    series = db.Column(db.String(100), nullable=False, index=True)
    character_name = db.Column(db.String(100), nullable=False)
    rarity = db.Column(db.Integer, nullable=False, index=True)  # Rarity.weight

    attack_bonus = db.Column(db.Integer, nullable=False)
    defense_bonus = db.Column(db.Integer, nullable=False)

    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(512), nullable=True)

    # Inactive templates are never drawn
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint(
            "series", "character_name", "rarity", name="unique_template_identity"
        ),
    )

    @classmethod
    def build(cls, series: str, character_name: str, rarity: Rarity) -> "CardTemplate":
        """Create a template with rarity-derived stats and description."""
        return cls(
            key=template_key(series, character_name, rarity),
            series=series,
            character_name=character_name,
            rarity=rarity.weight,
            attack_bonus=rarity.attack_bonus,
            defense_bonus=rarity.defense_bonus,
            description=(
                f"{character_name} - {series} ({rarity.display_name}) "
                f"ATK +{rarity.attack_bonus} DEF +{rarity.defense_bonus}"
            ),
            image_url="",
            is_active=True,
        )

    @property
    def rarity_enum(self) -> Rarity:
        return Rarity.from_weight(self.rarity)

    @property
    def total_stats(self) -> int:
        return self.attack_bonus + self.defense_bonus

    @property
    def is_high_rarity(self) -> bool:
        """SR or better."""
        return self.rarity >= Rarity.SR.weight

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        rarity = self.rarity_enum
        return {
            "id": self.id,
            "key": self.key,
            "series": self.series,
            "character_name": self.character_name,
            "rarity": rarity.value,
            "rarity_name": rarity.display_name,
            "rarity_color": rarity.color,
            "attack_bonus": self.attack_bonus,
            "defense_bonus": self.defense_bonus,
            "total_stats": self.total_stats,
            "description": self.description,
            "image_url": self.image_url,
            "is_active": self.is_active,
        }


class UserCard(db.Model):
    """
    A user's owned copy of a template. Created by a draw; afterwards only
    experience/level and the favorite flag change.
    """

    __tablename__ = "user_cards"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    template_id = db.Column(
        db.Integer,
        db.ForeignKey("card_templates.id"),
        nullable=False,
    )

    obtained_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    is_boosted = db.Column(db.Boolean, default=False, nullable=False)

    # Progression
    level = db.Column(db.Integer, default=1, nullable=False)
    experience = db.Column(db.Integer, default=0, nullable=False)

    is_favorite = db.Column(db.Boolean, default=False, nullable=False)

    # Relationships
    user = db.relationship("User", backref=db.backref("cards", lazy="dynamic"))
    template = db.relationship("CardTemplate", lazy="joined")

    @property
    def rarity(self) -> Rarity:
        return self.template.rarity_enum

    @property
    def experience_needed(self) -> int:
        """Experience required to reach the next level."""
        return self.level * 100

    @property
    def experience_progress(self) -> float:
        """Fraction of the way to the next level, in [0, 1)."""
        needed = self.experience_needed
        if needed <= 0:
            return 1.0
        return self.experience / needed

    def add_experience(self, amount: int) -> bool:
        """
        Add experience, converting overflow into level-ups.

        Several levels can be gained from one grant. At the level cap the
        remaining experience is discarded. Returns True if the level changed.
        """
        if amount < 0:
            raise ValueError("Experience amount must be non-negative")

        self.experience = (self.experience or 0) + amount
        self.level = self.level or 1
        leveled_up = False

        while self.experience >= self.experience_needed and self.level < MAX_CARD_LEVEL:
            self.experience -= self.experience_needed
            self.level += 1
            leveled_up = True

        if self.level >= MAX_CARD_LEVEL:
            self.experience = 0

        return leveled_up

    @property
    def current_attack(self) -> int:
        return self.template.attack_bonus + (self.level - 1) * ATTACK_PER_LEVEL

    @property
    def current_defense(self) -> int:
        return self.template.defense_bonus + (self.level - 1) * DEFENSE_PER_LEVEL

    @property
    def total_stats(self) -> int:
        base = self.template.attack_bonus + self.template.defense_bonus
        return base + (self.level - 1) * TOTAL_STATS_PER_LEVEL

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        template = self.template
        rarity = self.rarity
        return {
            "id": self.id,
            "user_id": self.user_id,
            "template_id": self.template_id,
            "template_key": template.key,
            "series": template.series,
            "character_name": template.character_name,
            "rarity": rarity.value,
            "rarity_name": rarity.display_name,
            "rarity_color": rarity.color,
            "level": self.level,
            "experience": self.experience,
            "experience_needed": self.experience_needed,
            "experience_progress": round(self.experience_progress, 4),
            "attack": self.current_attack,
            "defense": self.current_defense,
            "total_stats": self.total_stats,
            "is_boosted": self.is_boosted,
            "is_favorite": self.is_favorite,
            "obtained_at": self.obtained_at.isoformat() if self.obtained_at else None,
        }
