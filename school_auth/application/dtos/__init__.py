"""Application DTOs."""

from school_auth.application.dtos.auth_dtos import (
    AuthTokens,
    LoginAttemptState,
    LoginResult,
    PasswordStrengthReport,
    SessionInfo,
    UserInfo,
)

__all__ = [
    "AuthTokens",
    "LoginAttemptState",
    "LoginResult",
    "PasswordStrengthReport",
    "SessionInfo",
    "UserInfo",
]
