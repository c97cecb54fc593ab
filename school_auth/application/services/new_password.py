"""Acceptance check for a password about to be stored."""

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import PolicyViolation
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.policies.credential_policy import CredentialPolicy


async def check_new_password(
    credential_policy: CredentialPolicy, plaintext: str
) -> Result[None, PolicyViolation]:
    """Hard rules first, then the breach list.

    Returns:
        Failure(PolicyViolation) with PASSWORD_TOO_WEAK and the violated rules,
        or PASSWORD_COMPROMISED when the password appears in a breach list.
    """
    validation = credential_policy.validate(plaintext)
    if not validation.is_valid:
        return Failure(
            error=PolicyViolation(
                code=ErrorCode.PASSWORD_TOO_WEAK,
                message="Password does not meet the requirements",
                violations=validation.violations,
            )
        )
    if await credential_policy.is_compromised(plaintext):
        return Failure(
            error=PolicyViolation(
                code=ErrorCode.PASSWORD_COMPROMISED,
                message="Password appears in a known data breach",
            )
        )
    return Success(value=None)
