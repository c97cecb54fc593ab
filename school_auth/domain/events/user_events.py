"""User aggregate domain events.

Recorded by the User aggregate on every state change and pulled by the
application layer with ``User.pull_events()``.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from school_auth.domain.events.base_event import DomainEvent


# ═══════════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class UserRegistered(DomainEvent):
    """New user created.

    Attributes:
        user_id: ID of newly registered user.
        email: User's email address.
        role: Role code assigned at registration.
    """

    user_id: UUID
    email: str
    role: str


@dataclass(frozen=True, kw_only=True)
class UserActivated(DomainEvent):
    """Inactive user re-enabled."""

    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class UserDeactivated(DomainEvent):
    """User soft-deactivated (sessions ended, refresh token cleared)."""

    user_id: UUID


@dataclass(frozen=True, kw_only=True)
class EmailConfirmed(DomainEvent):
    """User confirmed ownership of their email address."""

    user_id: UUID
    email: str


@dataclass(frozen=True, kw_only=True)
class UserInfoUpdated(DomainEvent):
    """First or last name changed."""

    user_id: UUID


# ═══════════════════════════════════════════════════════════════
# Login / lockout
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class UserLoggedIn(DomainEvent):
    """Credential verified and login recorded."""

    user_id: UUID
    email: str


@dataclass(frozen=True, kw_only=True)
class LoginFailed(DomainEvent):
    """Wrong credential presented.

    Attributes:
        failed_login_count: Counter value after this failure.
    """

    user_id: UUID
    email: str
    failed_login_count: int


@dataclass(frozen=True, kw_only=True)
class AccountLocked(DomainEvent):
    """Failure threshold reached.

    Attributes:
        locked_until: Instant the lock expires.
    """

    user_id: UUID
    email: str
    locked_until: datetime


@dataclass(frozen=True, kw_only=True)
class AccountUnlocked(DomainEvent):
    """Lock and failure counter cleared explicitly."""

    user_id: UUID


# ═══════════════════════════════════════════════════════════════
# Credential / role / sessions
# ═══════════════════════════════════════════════════════════════


@dataclass(frozen=True, kw_only=True)
class PasswordChanged(DomainEvent):
    """Stored credential replaced."""

    user_id: UUID
    email: str


@dataclass(frozen=True, kw_only=True)
class RoleChanged(DomainEvent):
    """Role replaced (all sessions ended).

    Attributes:
        previous_role: Role code before the change.
        new_role: Role code after the change.
    """

    user_id: UUID
    previous_role: str
    new_role: str


@dataclass(frozen=True, kw_only=True)
class AllSessionsInvalidated(DomainEvent):
    """Every active session ended at once.

    Attributes:
        session_count: Number of sessions that were active.
    """

    user_id: UUID
    session_count: int
