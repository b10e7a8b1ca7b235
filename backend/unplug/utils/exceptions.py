"""Failure types raised by the gacha services.

Expected refusals (no quota left, mission on cooldown, unknown card) are not
exceptions; services report them as ``{"success": False, "error": <code>}``.
The classes below are for conditions the caller cannot simply retry past.
"""


class GachaError(RuntimeError):
    """Base class for gacha service failures."""

    code = "GACHA_ERROR"


class ConfigurationError(GachaError):
    """The catalog or settings are broken; draws must halt."""

    code = "CONFIGURATION_ERROR"


class NoTemplateAvailable(ConfigurationError):
    """No active card template exists for a requested rarity."""

    def __init__(self, rarity):
        self.rarity = rarity
        super().__init__(f"No active card template for rarity {rarity.value}")


class StorageFailure(GachaError):
    """The record store failed; the operation was rolled back and may be retried."""

    code = "STORAGE_FAILURE"


class MeasurementUnavailable(GachaError):
    """The usage-time source could not report today's usage."""

    code = "MEASUREMENT_UNAVAILABLE"
