"""Get current user query handler."""

from school_auth.application.dtos.auth_dtos import UserInfo
from school_auth.application.errors import user_not_found
from school_auth.application.queries.auth_queries import GetCurrentUser
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import DomainError, TransientInfrastructureError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.protocols import LoggerProtocol, UserRepository


class GetCurrentUserHandler:
    """Returns the UserInfo projection for an authenticated user.

    Read-only: no events, no persistence.
    """

    def __init__(self, user_repo: UserRepository, logger: LoggerProtocol) -> None:
        self._user_repo = user_repo
        self._logger = logger

    async def handle(self, query: GetCurrentUser) -> Result[UserInfo, DomainError]:
        try:
            user = await self._user_repo.find_by_id(query.user_id)
        except Exception as e:
            self._logger.error("get_current_user_failed", error=e)
            return Failure(
                error=TransientInfrastructureError(
                    code=ErrorCode.SERVICE_UNAVAILABLE,
                    message="Authentication service temporarily unavailable",
                    component="user_repository",
                )
            )
        if user is None:
            return Failure(error=user_not_found(query.user_id))
        return Success(value=UserInfo.from_user(user))
