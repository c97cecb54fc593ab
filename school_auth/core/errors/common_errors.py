"""Common error classes used across all layers.

Error Types:
- ValidationError: Malformed input (caller's fault, fix input and retry)
- NotFoundError: Entity missing
- ConflictError: Duplicate resource or stale concurrent write
- AuthenticationError: Credential or token rejected
- AuthorizationError: Actor lacks the authority for an operation
- PolicyViolation: Weak/compromised password, locked account, rate limited
- TransientInfrastructureError: Collaborator unavailable, caller may back off
  and retry

Usage:
    from school_auth.core.errors import ValidationError
    from school_auth.core.enums import ErrorCode
    from school_auth.core.result import Failure

    return Failure(error=ValidationError(
        code=ErrorCode.INVALID_EMAIL,
        message="Invalid email format",
        field="email",
    ))
"""

from dataclasses import dataclass

from school_auth.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        field: Field name that failed validation.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Resource not found.

    Attributes:
        resource_type: Type of resource (User, Session).
        resource_id: ID of the resource that was not found.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Resource conflict (duplicate, state conflict, stale write).

    Attributes:
        resource_type: Type of resource in conflict.
        conflicting_field: Field that has conflict (email, version).
        retryable: True for optimistic-concurrency conflicts, which succeed
            after reloading. False for duplicates.
    """

    resource_type: str
    conflicting_field: str | None = None
    retryable: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthenticationError(DomainError):
    """Authentication failure (invalid credentials, token expired)."""

    pass


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthorizationError(DomainError):
    """Authorization failure (no permission).

    Attributes:
        required_permission: Permission that was required.
    """

    required_permission: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PolicyViolation(DomainError):
    """Security policy rejected the request.

    Attributes:
        violations: Individual rule failures (password rules), if any.
        retry_after_seconds: Seconds until the condition clears (lockout,
            rate limit), if known.
    """

    violations: tuple[str, ...] = ()
    retry_after_seconds: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class TransientInfrastructureError(DomainError):
    """A collaborator (repository, hasher, token issuer) was unavailable.

    Never treated as success. Callers retry with backoff.

    Attributes:
        component: Name of the failing collaborator.
    """

    component: str | None = None
