"""Where today's screen usage comes from."""

import logging

import requests

from unplug import db
from unplug.models.usage import UsageRecord
from unplug.utils.clock import Clock
from unplug.utils.exceptions import MeasurementUnavailable

logger = logging.getLogger(__name__)


class RecordedUsageSource:
    """Sums the usage samples the user's device reported for today."""

    def __init__(self, clock: Clock):
        self.clock = clock

    def todays_usage_seconds(self, user_id: int) -> float:
        total = (
            db.session.query(
                db.func.coalesce(db.func.sum(UsageRecord.duration_seconds), 0.0)
            )
            .filter(
                UsageRecord.user_id == user_id,
                UsageRecord.date == self.clock.local_date(),
            )
            .scalar()
        )
        return float(total or 0.0)


class HttpUsageSource:
    """
    Asks an external usage service for today's total.

    Expects ``GET {base_url}/users/{user_id}/today`` to answer
    ``{"usage_seconds": <number>}``. Any failure, including the timeout,
    raises MeasurementUnavailable; there is no zero fallback.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def todays_usage_seconds(self, user_id: int) -> float:
        url = f"{self.base_url}/users/{user_id}/today"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout as e:
            logger.warning(f"Usage source timed out after {self.timeout}s: {url}")
            raise MeasurementUnavailable("Usage source timed out") from e
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Usage source request failed: {url}: {e}")
            raise MeasurementUnavailable("Usage source unavailable") from e

        try:
            seconds = float(payload["usage_seconds"])
        except (KeyError, TypeError, ValueError) as e:
            raise MeasurementUnavailable("Malformed usage source response") from e

        if seconds < 0:
            raise MeasurementUnavailable("Usage source reported negative usage")
        return seconds
