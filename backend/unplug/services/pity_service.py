"""Pity counters: draws since the last SSR and since the last SR-or-better."""

import threading
from dataclasses import asdict, dataclass

from unplug import db
from unplug.models.card import CardTemplate, Rarity, UserCard
from unplug.models.draw import DrawRecord


@dataclass
class PityStatus:
    since_ssr: int = 0
    since_sr_or_better: int = 0

    def advance(self, rarity: Rarity) -> None:
        """Account for one more draw of ``rarity``."""
        if rarity == Rarity.SSR:
            self.since_ssr = 0
        else:
            self.since_ssr += 1

        if rarity.weight >= Rarity.SR.weight:
            self.since_sr_or_better = 0
        else:
            self.since_sr_or_better += 1

    def to_dict(self) -> dict:
        return asdict(self)


class PityTracker:
    """
    Per-process cache of pity counters, rebuilt from draw history on demand.

    Each entry remembers the id of the newest draw it accounts for. A lookup
    compares that with the user's newest stored draw and rebuilds on mismatch,
    so draws made by other processes are never missed. The cache is advanced
    only after a draw batch has committed, so a rolled back batch never moves
    the counters.
    """

    def __init__(self):
        self._cache: dict[int, tuple[int | None, PityStatus]] = {}
        self._guard = threading.Lock()

    def _latest_draw_id(self, user_id: int) -> int | None:
        return (
            db.session.query(db.func.max(DrawRecord.id))
            .filter(DrawRecord.user_id == user_id)
            .scalar()
        )

    def reconstruct(self, user_id: int) -> PityStatus:
        """Replay the user's draws oldest-first."""
        rows = (
            db.session.query(CardTemplate.rarity)
            .select_from(DrawRecord)
            .join(UserCard, UserCard.id == DrawRecord.user_card_id)
            .join(CardTemplate, CardTemplate.id == UserCard.template_id)
            .filter(DrawRecord.user_id == user_id)
            .order_by(DrawRecord.timestamp.asc(), DrawRecord.id.asc())
            .all()
        )
        status = PityStatus()
        for (weight,) in rows:
            status.advance(Rarity.from_weight(weight))
        return status

    def status(self, user_id: int) -> PityStatus:
        latest = self._latest_draw_id(user_id)
        with self._guard:
            entry = self._cache.get(user_id)

        if entry is not None and entry[0] == latest:
            cached = entry[1]
        else:
            cached = self.reconstruct(user_id)
            with self._guard:
                self._cache[user_id] = (latest, cached)
        return PityStatus(cached.since_ssr, cached.since_sr_or_better)

    def advance(self, user_id: int, rarities: list[Rarity]) -> PityStatus:
        """
        Move the cached counters past a just-committed batch, in draw order.

        Call under the user's lock, after a ``status`` lookup for the same
        user. Without a cached entry the counters are rebuilt from history,
        which already includes the batch.
        """
        with self._guard:
            entry = self._cache.get(user_id)
        if entry is None:
            return self.status(user_id)

        status = PityStatus(entry[1].since_ssr, entry[1].since_sr_or_better)
        for rarity in rarities:
            status.advance(rarity)
        with self._guard:
            self._cache[user_id] = (self._latest_draw_id(user_id), status)
        return PityStatus(status.since_ssr, status.since_sr_or_better)

    def invalidate(self, user_id: int | None = None) -> None:
        with self._guard:
            if user_id is None:
                self._cache.clear()
            else:
                self._cache.pop(user_id, None)
