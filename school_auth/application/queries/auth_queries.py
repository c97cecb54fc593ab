"""Authentication queries (CQRS read operations)."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class GetCurrentUser:
    """Fetch the user-info projection for an authenticated user."""

    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class CheckEmailAvailable:
    """Whether an email address can be used for a new account."""

    email: str


@dataclass(frozen=True, kw_only=True)
class ValidatePasswordStrength:
    """Score, classify and validate a candidate password."""

    password: str = field(repr=False)


@dataclass(frozen=True, kw_only=True)
class ListSessions:
    """List a user's sessions.

    Attributes:
        user_id: Owner of the sessions.
        active_only: Omit ended sessions.
    """

    user_id: UUID
    active_only: bool = True
