"""Clock adapters."""

from datetime import datetime, timedelta, timezone

from adaptsrs.domain.ports import Clock


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Settable clock for tests and simulated time.

    Naive datetimes are taken to be UTC.
    """

    def __init__(self, start: datetime):
        self._now = _as_utc(start)

    def now(self) -> datetime:
        return self._now

    def set(self, instant: datetime) -> None:
        self._now = _as_utc(instant)

    def advance(self, **delta: float) -> datetime:
        """Move forward by timedelta keyword arguments, e.g. advance(days=3)."""
        self._now = self._now + timedelta(**delta)
        return self._now


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant
