"""Logout handler.

Flow:
1. Load user by refresh token when one is given, else by user_id
   (unknown user or token -> nothing to do)
2. everywhere=True -> end every session, clear refresh token
3. refresh_token given -> clear it and end the calling device's session
   (session_id when given, otherwise matched by address and user agent)
4. session_id given -> end that session; clear the refresh token once no
   active session remains
5. Neither -> clear the refresh token only
6. Save and publish events

Logout always succeeds. Ending an already-ended session is a no-op and
leaves its ended_at untouched; a token that was already cleared or rotated
simply matches no user.
"""

from school_auth.application.commands.auth_commands import Logout
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)
from school_auth.core.errors import DomainError
from school_auth.core.result import Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.protocols import (
    Clock,
    EventBusProtocol,
    LoggerProtocol,
    UserRepository,
)


class LogoutHandler:
    """Handler for the Logout command."""

    def __init__(
        self,
        user_repo: UserRepository,
        clock: Clock,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._user_repo = user_repo
        self._clock = clock
        self._logger = logger
        self._unit_of_work = UserUnitOfWork(user_repo, event_bus, logger)

    async def handle(self, cmd: Logout) -> Result[None, DomainError]:
        """Handle logout.

        Returns:
            Success(None) in every expected case. Failure only when the
            repository is unavailable.
        """
        by_token = bool(cmd.refresh_token and cmd.refresh_token.strip())

        async def mutate(user: User | None) -> Mutation[None]:
            if user is None:
                return Mutation(result=Success(value=None), persist=False)
            now = self._clock.now()

            if cmd.everywhere:
                ended = user.invalidate_all_sessions(now)
                user.clear_refresh_token()
                self._logger.info(
                    "logout_everywhere", user_id=str(user.id), session_count=ended
                )
                return Mutation(result=Success(value=None))

            if by_token:
                session = (
                    user.find_session(cmd.session_id)
                    if cmd.session_id is not None
                    else user.find_device_session(cmd.source_address, cmd.user_agent)
                )
                ended = session is not None and user.end_session(session.id, now)
                user.clear_refresh_token()
                self._logger.info(
                    "logout_refresh_token",
                    user_id=str(user.id),
                    session_ended=ended,
                )
                return Mutation(result=Success(value=None))

            if cmd.session_id is not None:
                ended = user.end_session(cmd.session_id, now)
                if not ended:
                    return Mutation(result=Success(value=None), persist=False)
                if not user.active_sessions:
                    user.clear_refresh_token()
                self._logger.info(
                    "logout_session",
                    user_id=str(user.id),
                    session_id=str(cmd.session_id),
                )
                return Mutation(result=Success(value=None))

            if user.refresh_token is None:
                return Mutation(result=Success(value=None), persist=False)
            user.clear_refresh_token()
            self._logger.info("logout_refresh_token_cleared", user_id=str(user.id))
            return Mutation(result=Success(value=None))

        async def load() -> User | None:
            if by_token:
                return await self._user_repo.find_by_refresh_token(cmd.refresh_token)
            if cmd.user_id is None:
                return None
            return await self._user_repo.find_by_id(cmd.user_id)

        return await self._unit_of_work.run(
            load,
            mutate,
            operation="logout",
        )
