"""Check email available query handler.

An address is available when it is well-formed, not on a disposable domain
and not registered yet.
"""

from school_auth.application.queries.auth_queries import CheckEmailAvailable
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import DomainError, TransientInfrastructureError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.policies.auth_policy import AuthPolicy
from school_auth.domain.protocols import LoggerProtocol, UserRepository
from school_auth.domain.value_objects.email import EmailAddress


class CheckEmailAvailableHandler:
    def __init__(
        self,
        user_repo: UserRepository,
        logger: LoggerProtocol,
        policy: AuthPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._logger = logger
        self._policy = policy or AuthPolicy()

    async def handle(self, query: CheckEmailAvailable) -> Result[bool, DomainError]:
        try:
            email = EmailAddress(query.email)
        except ValueError:
            return Success(value=False)

        if email.domain in self._policy.blocked_email_domains:
            return Success(value=False)

        try:
            exists = await self._user_repo.exists_by_email(str(email))
        except Exception as e:
            self._logger.error("check_email_available_failed", error=e)
            return Failure(
                error=TransientInfrastructureError(
                    code=ErrorCode.SERVICE_UNAVAILABLE,
                    message="Authentication service temporarily unavailable",
                    component="user_repository",
                )
            )
        return Success(value=not exists)
