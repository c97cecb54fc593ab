"""List sessions query handler.

Sessions are returned most recent activity first, each with its device
summary and the expired, suspicious and long-running predicates evaluated
at "now".
"""

from school_auth.application.dtos.auth_dtos import SessionInfo
from school_auth.application.errors import user_not_found
from school_auth.application.queries.auth_queries import ListSessions
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import DomainError, TransientInfrastructureError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.policies.auth_policy import AuthPolicy
from school_auth.domain.protocols import Clock, LoggerProtocol, UserRepository


class ListSessionsHandler:
    def __init__(
        self,
        user_repo: UserRepository,
        clock: Clock,
        logger: LoggerProtocol,
        policy: AuthPolicy | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._clock = clock
        self._logger = logger
        self._policy = policy or AuthPolicy()

    async def handle(self, query: ListSessions) -> Result[list[SessionInfo], DomainError]:
        try:
            user = await self._user_repo.find_by_id(query.user_id)
        except Exception as e:
            self._logger.error("list_sessions_failed", error=e)
            return Failure(
                error=TransientInfrastructureError(
                    code=ErrorCode.SERVICE_UNAVAILABLE,
                    message="Authentication service temporarily unavailable",
                    component="user_repository",
                )
            )
        if user is None:
            return Failure(error=user_not_found(query.user_id))

        now = self._clock.now()
        sessions = user.active_sessions if query.active_only else tuple(user.sessions)
        ordered = sorted(sessions, key=lambda s: s.last_activity_at, reverse=True)
        return Success(
            value=[
                SessionInfo.from_session(
                    session,
                    now=now,
                    max_idle_minutes=self._policy.session_max_idle_minutes,
                    max_hours=self._policy.session_long_running_hours,
                )
                for session in ordered
            ]
        )
