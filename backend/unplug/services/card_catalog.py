"""Card template catalog: seeding, lookup and statistics."""

import logging
import random

from unplug import db
from unplug.models.card import SERIES_CHARACTERS, CardTemplate, Rarity
from unplug.utils.exceptions import NoTemplateAvailable

logger = logging.getLogger(__name__)


def assign_rarities(index: int, total: int) -> list[Rarity]:
    """
    Rarities a character gets, by its position in the series list.

    Everyone has N; the first 80% also get R, the first half SR, the first
    third SSR. So low-tier pools are always the largest.
    """
    rarities = [Rarity.N]
    if index < total * 4 // 5:
        rarities.append(Rarity.R)
    if index < total // 2:
        rarities.append(Rarity.SR)
    if index < total // 3:
        rarities.append(Rarity.SSR)
    return rarities


class CardCatalog:
    """Read access to the template pool, plus the one-time seeding."""

    def __init__(self, rng: random.Random, series_characters: dict | None = None):
        self.rng = rng
        self.series_characters = series_characters or SERIES_CHARACTERS

    def seed(self) -> int:
        """
        Create templates for every series character. Idempotent: does nothing
        if any template already exists. Returns the number created.
        """
        if db.session.query(CardTemplate.id).first() is not None:
            logger.info("Card templates already present, skipping seed")
            return 0

        created = 0
        for series, characters in self.series_characters.items():
            for index, character in enumerate(characters):
                for rarity in assign_rarities(index, len(characters)):
                    db.session.add(CardTemplate.build(series, character, rarity))
                    created += 1

        db.session.commit()
        logger.info(f"Seeded card catalog with {created} templates")
        return created

    def active_templates(self, rarity: Rarity) -> list[CardTemplate]:
        return (
            CardTemplate.query.filter_by(rarity=rarity.weight, is_active=True)
            .order_by(CardTemplate.id)
            .all()
        )

    def template_for(self, rarity: Rarity) -> CardTemplate:
        """Uniformly random active template of the given rarity."""
        templates = self.active_templates(rarity)
        if not templates:
            logger.error(f"No active template for rarity {rarity.value}")
            raise NoTemplateAvailable(rarity)
        return self.rng.choice(templates)

    def verify(self) -> dict:
        """Raise NoTemplateAvailable unless every rarity has an active template."""
        counts = self.active_counts()
        for rarity in Rarity.descending():
            if counts[rarity.value] == 0:
                raise NoTemplateAvailable(rarity)
        return counts

    def active_counts(self) -> dict:
        rows = (
            db.session.query(CardTemplate.rarity, db.func.count(CardTemplate.id))
            .filter(CardTemplate.is_active.is_(True))
            .group_by(CardTemplate.rarity)
            .all()
        )
        by_weight = dict(rows)
        return {r.value: by_weight.get(r.weight, 0) for r in Rarity.descending()}

    def add_custom_template(
        self, series: str, character_name: str, rarity: Rarity
    ) -> CardTemplate | None:
        """Add a single template. Returns None if that identity already exists."""
        existing = CardTemplate.query.filter_by(
            series=series, character_name=character_name, rarity=rarity.weight
        ).first()
        if existing:
            logger.warning(
                f"Template already exists: {series} - {character_name} [{rarity.value}]"
            )
            return None

        template = CardTemplate.build(series, character_name, rarity)
        db.session.add(template)
        db.session.commit()
        logger.info(f"Added template {template.key}")
        return template

    def set_active(self, template_id: int, active: bool) -> CardTemplate | None:
        template = db.session.get(CardTemplate, template_id)
        if not template:
            return None
        template.is_active = active
        db.session.commit()
        logger.info(f"Template {template.key} active={active}")
        return template

    def statistics(self) -> dict:
        """Template counts by rarity and by series."""
        by_rarity_rows = (
            db.session.query(CardTemplate.rarity, db.func.count(CardTemplate.id))
            .group_by(CardTemplate.rarity)
            .all()
        )
        by_weight = dict(by_rarity_rows)

        by_series_rows = (
            db.session.query(CardTemplate.series, db.func.count(CardTemplate.id))
            .group_by(CardTemplate.series)
            .all()
        )

        return {
            "by_rarity": {
                r.value: by_weight.get(r.weight, 0) for r in Rarity.descending()
            },
            "by_series": dict(by_series_rows),
            "active": self.active_counts(),
            "total": sum(by_weight.values()),
        }
