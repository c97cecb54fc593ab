"""LoginRateLimiter protocol for per-address login throttling."""

from datetime import timedelta
from typing import Protocol


class LoginRateLimiter(Protocol):
    """Sliding-window login attempt counter keyed by source address (port).

    Only failed or anonymous attempts are recorded. Lookups are bounded by a
    timeout in the workflow and a failure is treated as "not limited".
    """

    async def too_many_attempts(self, source_address: str, window: timedelta) -> bool:
        """Whether the address exceeded the attempt threshold within ``window``."""
        ...

    async def is_suspicious_address(self, source_address: str) -> bool:
        """Advisory flag for addresses with unusually many attempts.

        Never used to block a request.
        """
        ...

    async def record_attempt(self, source_address: str) -> None:
        """Count one failed login attempt from ``source_address``."""
        ...

    async def reset(self, source_address: str) -> None:
        """Forget all attempts from ``source_address``."""
        ...
