"""Queries (CQRS read side)."""

from school_auth.application.queries.auth_queries import (
    CheckEmailAvailable,
    GetCurrentUser,
    ListSessions,
    ValidatePasswordStrength,
)

__all__ = [
    "CheckEmailAvailable",
    "GetCurrentUser",
    "ListSessions",
    "ValidatePasswordStrength",
]
