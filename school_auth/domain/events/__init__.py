"""Domain events.

Usage:
    >>> from school_auth.domain.events import UserLoggedIn, DomainEvent
    >>> for event in user.pull_events():
    ...     await event_bus.publish(event)
"""

from school_auth.domain.events.base_event import DomainEvent
from school_auth.domain.events.user_events import (
    AccountLocked,
    AccountUnlocked,
    AllSessionsInvalidated,
    EmailConfirmed,
    LoginFailed,
    PasswordChanged,
    RoleChanged,
    UserActivated,
    UserDeactivated,
    UserInfoUpdated,
    UserLoggedIn,
    UserRegistered,
)

__all__ = [
    "DomainEvent",
    "AccountLocked",
    "AccountUnlocked",
    "AllSessionsInvalidated",
    "EmailConfirmed",
    "LoginFailed",
    "PasswordChanged",
    "RoleChanged",
    "UserActivated",
    "UserDeactivated",
    "UserInfoUpdated",
    "UserLoggedIn",
    "UserRegistered",
]
