"""Business logic services."""

import random
from dataclasses import dataclass

from unplug.services.card_catalog import CardCatalog
from unplug.services.gacha_service import GachaService
from unplug.services.mission_service import MissionService
from unplug.services.pity_service import PityTracker
from unplug.services.progression_service import ProgressionService
from unplug.services.quota_service import QuotaService
from unplug.services.usage_source import HttpUsageSource, RecordedUsageSource
from unplug.services.user_locks import UserLockRegistry
from unplug.utils.clock import Clock


@dataclass
class GachaServices:
    """Service objects shared by one Flask app. Built once by the factory."""

    clock: Clock
    rng: random.Random
    locks: UserLockRegistry
    catalog: CardCatalog
    missions: MissionService
    quota: QuotaService
    pity: PityTracker
    gacha: GachaService
    progression: ProgressionService


def build_services(
    settings,
    clock: Clock | None = None,
    rng: random.Random | None = None,
    usage_source=None,
) -> GachaServices:
    """Wire the services from app config (a Flask config or plain mapping)."""
    clock = clock or Clock(settings.get("GACHA_TIMEZONE") or None)
    rng = rng or random.Random(settings.get("GACHA_RANDOM_SEED"))
    locks = UserLockRegistry()

    if usage_source is None:
        if settings.get("USAGE_SOURCE_URL"):
            usage_source = HttpUsageSource(
                settings["USAGE_SOURCE_URL"],
                timeout=settings.get("USAGE_SOURCE_TIMEOUT", 5.0),
            )
        else:
            usage_source = RecordedUsageSource(clock)

    catalog = CardCatalog(rng)
    missions = MissionService(clock, locks)
    quota = QuotaService(
        usage_source, clock, daily_cap=settings.get("GACHA_DAILY_DRAW_CAP", 10)
    )
    pity = PityTracker()
    gacha = GachaService(
        catalog,
        missions,
        quota,
        pity,
        locks,
        clock,
        rng,
        guarantee_size=settings.get("GACHA_SR_PITY_THRESHOLD", 10),
        ssr_pity_threshold=settings.get("GACHA_SSR_PITY_THRESHOLD", 100),
        enforce_ssr_pity=settings.get("GACHA_ENFORCE_SSR_PITY", False),
    )
    progression = ProgressionService(clock, locks)

    return GachaServices(
        clock=clock,
        rng=rng,
        locks=locks,
        catalog=catalog,
        missions=missions,
        quota=quota,
        pity=pity,
        gacha=gacha,
        progression=progression,
    )


__all__ = [
    "GachaServices",
    "build_services",
    "CardCatalog",
    "GachaService",
    "MissionService",
    "PityTracker",
    "ProgressionService",
    "QuotaService",
    "RecordedUsageSource",
    "HttpUsageSource",
    "UserLockRegistry",
]
