"""Validate password strength query handler.

Never fails: an empty password yields score 0, VERY_WEAK and the
"Password is required" violation. A slow or broken breach lookup reports
``is_compromised=False``.
"""

from school_auth.application.dtos.auth_dtos import PasswordStrengthReport
from school_auth.application.queries.auth_queries import ValidatePasswordStrength
from school_auth.core.errors import DomainError
from school_auth.core.result import Result, Success
from school_auth.domain.policies.credential_policy import CredentialPolicy


class ValidatePasswordStrengthHandler:
    def __init__(self, credential_policy: CredentialPolicy) -> None:
        self._credential_policy = credential_policy

    async def handle(
        self, query: ValidatePasswordStrength
    ) -> Result[PasswordStrengthReport, DomainError]:
        assessment = await self._credential_policy.assess(query.password)
        return Success(
            value=PasswordStrengthReport(
                score=assessment.score,
                strength=assessment.strength,
                is_valid=assessment.is_valid,
                violations=assessment.violations,
                suggestions=assessment.suggestions,
                is_compromised=assessment.is_compromised,
            )
        )
