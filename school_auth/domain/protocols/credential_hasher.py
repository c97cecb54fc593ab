"""CredentialHasher protocol for password hashing.

Port (interface) for hexagonal architecture. The algorithm is an adapter
concern; the domain only needs hash and verify.
"""

from typing import Protocol


class CredentialHasher(Protocol):
    """Password hashing protocol (port).

    Implementations must use a slow, salted algorithm and compare in
    constant time.

    Example:
        >>> hashed = hasher.hash("SecurePass123!")
        >>> hasher.verify("SecurePass123!", hashed)
        True
    """

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password.

        Args:
            plaintext: Password to hash.

        Returns:
            Opaque hash string (includes salt).
        """
        ...

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Verify a password against a stored hash.

        Args:
            plaintext: Password to check.
            hashed: Value previously returned by ``hash``.

        Returns:
            True if the password matches. False on mismatch or malformed hash.
        """
        ...
