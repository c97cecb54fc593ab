"""BreachListChecker protocol for compromised-password lookups."""

from typing import Protocol


class BreachListChecker(Protocol):
    """Compromised-password lookup (port).

    Implementations should not raise. Callers still guard the call with a
    timeout and treat any failure as "not found".
    """

    async def is_compromised(self, plaintext: str) -> bool:
        """Check whether the password appears in a known breach corpus.

        Args:
            plaintext: Candidate password.

        Returns:
            True if the password is known to be compromised.
        """
        ...
