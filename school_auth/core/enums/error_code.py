"""Machine-readable error codes.

Error codes follow ENTITY_ACTION_REASON naming convention and travel inside
DomainError instances returned through Result types.

Categories:
- Validation errors (INVALID_*, PASSWORD_*)
- Resource errors (*_NOT_FOUND)
- Conflict errors (*_ALREADY_EXISTS, CONCURRENT_MODIFICATION)
- Authentication errors (INVALID_CREDENTIALS, TOKEN_*)
- Policy violations (ACCOUNT_LOCKED, RATE_LIMITED, PASSWORD_COMPROMISED)
- Infrastructure errors (SERVICE_UNAVAILABLE)
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # Validation errors
    INVALID_EMAIL = "invalid_email"
    INVALID_PASSWORD = "invalid_password"
    INVALID_NAME = "invalid_name"
    INVALID_ROLE = "invalid_role"
    INVALID_TOKEN_EXPIRY = "invalid_token_expiry"
    PASSWORD_MISMATCH = "password_mismatch"
    PASSWORD_REUSED = "password_reused"
    VALIDATION_FAILED = "validation_failed"

    # Resource errors
    USER_NOT_FOUND = "user_not_found"
    SESSION_NOT_FOUND = "session_not_found"

    # Conflict errors
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    CONCURRENT_MODIFICATION = "concurrent_modification"
    SESSION_INACTIVE = "session_inactive"

    # Authentication errors
    INVALID_CREDENTIALS = "invalid_credentials"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_INVALID = "token_invalid"
    ACCOUNT_INACTIVE = "account_inactive"

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"

    # Policy violations
    ACCOUNT_LOCKED = "account_locked"
    RATE_LIMITED = "rate_limited"
    PASSWORD_TOO_WEAK = "password_too_weak"
    PASSWORD_COMPROMISED = "password_compromised"
    EMAIL_DOMAIN_BLOCKED = "email_domain_blocked"

    # Infrastructure errors
    SERVICE_UNAVAILABLE = "service_unavailable"
