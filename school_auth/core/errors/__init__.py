"""Core errors package.

Usage:
    from school_auth.core.errors import DomainError, ValidationError
"""

from school_auth.core.errors.common_errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PolicyViolation,
    TransientInfrastructureError,
    ValidationError,
)
from school_auth.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "PolicyViolation",
    "TransientInfrastructureError",
]
