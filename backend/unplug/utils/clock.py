"""Time source and calendar-day helpers.

Timestamps are stored as naive UTC. "Today" means the calendar day in the
configured zone, so day boundaries are computed there and converted back to
naive UTC for queries.
"""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo


class Clock:
    """Wall clock bound to the zone that defines a user's calendar day."""

    def __init__(self, timezone: str | None = None):
        self.zone = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        """Current time as naive UTC."""
        return datetime.now(UTC).replace(tzinfo=None)

    def _to_local(self, moment: datetime) -> datetime:
        aware = moment.replace(tzinfo=UTC)
        return aware.astimezone(self.zone) if self.zone else aware.astimezone()

    def _to_utc(self, local_naive: datetime) -> datetime:
        if self.zone:
            aware = local_naive.replace(tzinfo=self.zone)
        else:
            aware = local_naive.astimezone()
        return aware.astimezone(UTC).replace(tzinfo=None)

    def local_date(self, moment: datetime | None = None) -> date:
        """Calendar date of ``moment`` (default: now) in the configured zone."""
        return self._to_local(moment or self.now()).date()

    def day_range(self, day: date | None = None) -> tuple[datetime, datetime]:
        """Half-open naive-UTC range [start, end) covering a local calendar day."""
        day = day or self.local_date()
        start_local = datetime(day.year, day.month, day.day)
        end_local = start_local + timedelta(days=1)
        return self._to_utc(start_local), self._to_utc(end_local)

    def is_today(self, moment: datetime | None) -> bool:
        if moment is None:
            return False
        return self.local_date(moment) == self.local_date()


class FrozenClock(Clock):
    """Clock pinned to a settable instant. Used by tests and replay scripts."""

    def __init__(self, moment: datetime, timezone: str | None = "UTC"):
        super().__init__(timezone)
        self.moment = moment

    def now(self) -> datetime:
        return self.moment

    def advance(self, **kwargs) -> datetime:
        self.moment = self.moment + timedelta(**kwargs)
        return self.moment
