"""Administrative user commands (role, activation, unlock)."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class ChangeUserRole:
    """Assign a new role to a user.

    Attributes:
        actor_id: Administrator performing the change.
        user_id: Target user.
        role_code: New role code.
    """

    actor_id: UUID
    user_id: UUID
    role_code: str


@dataclass(frozen=True, kw_only=True)
class SetUserActive:
    """Activate or soft-deactivate a user."""

    actor_id: UUID
    user_id: UUID
    active: bool


@dataclass(frozen=True, kw_only=True)
class UnlockUser:
    """Clear a user's lockout and failure counter."""

    actor_id: UUID
    user_id: UUID
