"""Clock adapters."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


class SystemClock:
    """Wall clock in UTC (implements Clock)."""

    def now(self) -> datetime:
        return datetime.now(UTC)


@dataclass
class FixedClock:
    """Manually advanced clock for deterministic tests and simulations.

    Example:
        >>> clock = FixedClock(datetime(2025, 1, 15, 9, 0, tzinfo=UTC))
        >>> clock.advance(minutes=31)
    """

    current: datetime

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> datetime:
        """Move forward by ``timedelta(**delta)`` and return the new instant."""
        self.current = self.current + timedelta(**delta)
        return self.current
