"""UserRepository protocol for user persistence.

Port (interface) for hexagonal architecture.
Infrastructure layer implements this protocol.
"""

from typing import Protocol
from uuid import UUID

from school_auth.core.errors import ConflictError
from school_auth.core.result import Result
from school_auth.domain.entities.user import User


class UserRepository(Protocol):
    """User repository protocol (port).

    The User aggregate is persisted as one unit together with its sessions.
    There is no separate session repository.

    This is a Protocol (not ABC) for structural typing.
    Implementations don't need to inherit from this.

    Concurrency:
        ``save`` compares ``user.version`` with the stored version. A stale
        write returns ``Failure(ConflictError(retryable=True,
        code=CONCURRENT_MODIFICATION))`` so callers can tell it apart from
        "not found" (``None`` from the finders) and from duplicate emails
        (``retryable=False``). On success the repository bumps
        ``user.version``.

    Infrastructure failures (connection lost) are raised as exceptions and
    mapped to TransientInfrastructureError by the handlers.
    """

    async def find_by_id(self, user_id: UUID) -> User | None:
        """Find user by ID.

        Args:
            user_id: User's unique identifier.

        Returns:
            User (with sessions loaded) if found, None otherwise.
        """
        ...

    async def find_by_email(self, email: str) -> User | None:
        """Find user by email address (case-insensitive).

        Args:
            email: User's email address.

        Returns:
            User if found, None otherwise.
        """
        ...

    async def find_by_refresh_token(self, refresh_token: str) -> User | None:
        """Find the user currently holding ``refresh_token``.

        Returns:
            User if some user's stored token equals ``refresh_token``
            (regardless of expiry), None otherwise.
        """
        ...

    async def exists_by_email(self, email: str) -> bool:
        """Check whether an email address is already registered."""
        ...

    async def save(self, user: User) -> Result[None, ConflictError]:
        """Insert or update the user and its sessions.

        Args:
            user: Aggregate to persist.

        Returns:
            Success(None) when written.
            Failure(ConflictError) on a stale version (retryable) or on an
            email already used by another user (not retryable).
        """
        ...
