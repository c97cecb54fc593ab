"""Clock protocol: injected source of the current time."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of "now" (timezone-aware UTC).

    Injected everywhere time matters so lockout, token expiry and session
    predicates are deterministic in tests.
    """

    def now(self) -> datetime:
        """Return the current instant in UTC."""
        ...
