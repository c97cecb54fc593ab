"""Failures shared by several handlers.

Authentication failures share one generic message so callers cannot tell an
unknown email from a wrong password or an inactive account. Lockout and rate
limiting are the only failures that say what happened.
"""

import math
from datetime import timedelta

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    PolicyViolation,
    ValidationError,
)

GENERIC_AUTH_MESSAGE = "Invalid email or password"


def invalid_credentials() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.INVALID_CREDENTIALS, message=GENERIC_AUTH_MESSAGE
    )


def invalid_token() -> AuthenticationError:
    return AuthenticationError(
        code=ErrorCode.TOKEN_INVALID, message="Invalid or expired token"
    )


def account_locked(remaining: timedelta) -> PolicyViolation:
    return PolicyViolation(
        code=ErrorCode.ACCOUNT_LOCKED,
        message="Account is temporarily locked after too many failed logins",
        retry_after_seconds=max(1, math.ceil(remaining.total_seconds())),
    )


def rate_limited(window: timedelta) -> PolicyViolation:
    return PolicyViolation(
        code=ErrorCode.RATE_LIMITED,
        message="Too many login attempts from this address",
        retry_after_seconds=int(window.total_seconds()),
    )


def user_not_found(user_id: object) -> NotFoundError:
    return NotFoundError(
        code=ErrorCode.USER_NOT_FOUND,
        message="User not found",
        resource_type="User",
        resource_id=str(user_id),
    )


def permission_denied(permission: str) -> AuthorizationError:
    return AuthorizationError(
        code=ErrorCode.PERMISSION_DENIED,
        message="Not allowed to perform this action",
        required_permission=permission,
    )


def password_mismatch() -> ValidationError:
    return ValidationError(
        code=ErrorCode.PASSWORD_MISMATCH,
        message="Password confirmation does not match",
        field="confirm_password",
    )


def password_reused() -> ValidationError:
    return ValidationError(
        code=ErrorCode.PASSWORD_REUSED,
        message="New password must differ from the current password",
        field="new_password",
    )
