"""Bcrypt credential hasher (adapter).

Implements the CredentialHasher protocol with bcrypt.

Architecture:
    - Implements CredentialHasher (no inheritance required)
    - Structural typing via Protocol
    - Injected via the container

Security:
    - Adaptive cost factor (default 12, ~250ms per hash)
    - Random salt per hash
    - Constant-time comparison in checkpw
"""

import bcrypt


# bcrypt only uses the first 72 bytes of the input
_BCRYPT_MAX_BYTES = 72


class BcryptCredentialHasher:
    """Bcrypt password hashing.

    Usage:
        hasher = BcryptCredentialHasher(rounds=12)
        hashed = hasher.hash("SecurePass123!")
        hasher.verify("SecurePass123!", hashed)  # True
    """

    def __init__(self, rounds: int = 12) -> None:
        """Initialize bcrypt hasher.

        Args:
            rounds: Bcrypt cost factor. Each +1 doubles computation time.

        Raises:
            ValueError: If rounds is outside 4..20.
        """
        if rounds < 4:
            msg = "Bcrypt rounds must be at least 4"
            raise ValueError(msg)
        if rounds > 20:
            msg = "Bcrypt rounds above 20 are impractically slow"
            raise ValueError(msg)

        self._rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password.

        Returns:
            Bcrypt hash string ($2b$<cost>$...), 60 characters.
        """
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(self._encode(plaintext), salt).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Verify a plaintext password against a bcrypt hash.

        Returns:
            True on match. False on mismatch or malformed hash (no exceptions).
        """
        try:
            return bcrypt.checkpw(self._encode(plaintext), hashed.encode("utf-8"))
        except (ValueError, AttributeError):
            return False

    @staticmethod
    def _encode(plaintext: str) -> bytes:
        return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]
