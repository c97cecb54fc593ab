"""In-memory UserRepository for single-process deployments and tests.

Stores deep copies so every load returns a fresh aggregate, exactly as a
database-backed repository would. Honors the same version check as the
SQLAlchemy adapter.
"""

import copy
from uuid import UUID

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import ConflictError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User


class InMemoryUserRepository:
    """Dictionary-backed UserRepository (structural typing, no inheritance)."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}

    async def find_by_id(self, user_id: UUID) -> User | None:
        return self._load(self._users.get(user_id))

    async def find_by_email(self, email: str) -> User | None:
        key = email.strip().lower()
        return self._load(
            next((u for u in self._users.values() if str(u.email) == key), None)
        )

    async def find_by_refresh_token(self, refresh_token: str) -> User | None:
        if not refresh_token:
            return None
        return self._load(
            next(
                (u for u in self._users.values() if u.refresh_token == refresh_token),
                None,
            )
        )

    async def exists_by_email(self, email: str) -> bool:
        key = email.strip().lower()
        return any(str(u.email) == key for u in self._users.values())

    async def save(self, user: User) -> Result[None, ConflictError]:
        stored = self._users.get(user.id)
        stored_version = stored.version if stored is not None else 0
        if user.version != stored_version:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.CONCURRENT_MODIFICATION,
                    message="User was modified by another request",
                    resource_type="User",
                    conflicting_field="version",
                    retryable=True,
                    details={"user_id": str(user.id)},
                )
            )

        email = str(user.email)
        if any(u.id != user.id and str(u.email) == email for u in self._users.values()):
            return Failure(
                error=ConflictError(
                    code=ErrorCode.EMAIL_ALREADY_EXISTS,
                    message="Email address is already registered",
                    resource_type="User",
                    conflicting_field="email",
                )
            )

        user.version += 1
        snapshot = copy.deepcopy(user)
        snapshot.pull_events()
        self._users[user.id] = snapshot
        return Success(value=None)

    @staticmethod
    def _load(user: User | None) -> User | None:
        return copy.deepcopy(user) if user is not None else None
