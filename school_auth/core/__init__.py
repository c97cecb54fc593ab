"""Core shared kernel.

Foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Error taxonomy carried inside Failure results
- Settings loaded from the environment

The core module has NO dependencies on other application layers.
"""

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    PolicyViolation,
    TransientInfrastructureError,
    ValidationError,
)
from school_auth.core.result import Failure, Result, Success

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DomainError",
    "ErrorCode",
    "Failure",
    "NotFoundError",
    "PolicyViolation",
    "Result",
    "Success",
    "TransientInfrastructureError",
    "ValidationError",
]
