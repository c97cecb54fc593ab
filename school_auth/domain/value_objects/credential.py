"""Stored credential value object (password hash + change timestamp)."""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True, slots=True, kw_only=True)
class Credential:
    """Hashed password and the instant it was last changed.

    The hash is opaque to the domain; only a CredentialHasher can produce or
    verify it. Plaintext passwords are never stored on this object.

    Attributes:
        password_hash: Opaque hash produced by a CredentialHasher.
        changed_at: When the password was set (timezone-aware UTC).
    """

    password_hash: str
    changed_at: datetime

    def __post_init__(self) -> None:
        if not self.password_hash:
            raise ValueError("Credential hash cannot be empty")

    def is_expired(self, now: datetime, max_age_days: int) -> bool:
        """Check whether the password is older than the allowed age.

        Args:
            now: Current instant.
            max_age_days: Password expiry policy in days.

        Returns:
            True if the password must be changed.
        """
        return now - self.changed_at > timedelta(days=max_age_days)

    def __repr__(self) -> str:
        return f"Credential(changed_at={self.changed_at.isoformat()})"
