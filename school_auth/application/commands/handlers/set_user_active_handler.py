"""Set user active handler.

Activates or soft-deactivates a user on behalf of an administrator.
Deactivation ends every session and clears the refresh token. Both
directions are idempotent.
"""

from school_auth.application.commands.user_admin_commands import SetUserActive
from school_auth.application.errors import user_not_found
from school_auth.application.services.admin_authority import check_authority
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)
from school_auth.core.errors import DomainError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.protocols import (
    Clock,
    EventBusProtocol,
    LoggerProtocol,
    UserRepository,
)


class SetUserActiveHandler:
    """Handler for the SetUserActive command."""

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

    async def handle(self, cmd: SetUserActive) -> Result[None, DomainError]:
        async def mutate(user: User | None) -> Mutation[None]:
            if user is None:
                return Mutation(
                    result=Failure(error=user_not_found(cmd.user_id)), persist=False
                )
            actor = await self._user_repo.find_by_id(cmd.actor_id)
            denied = check_authority(actor, user)
            if denied is not None:
                return Mutation(result=Failure(error=denied), persist=False)
            if user.is_active == cmd.active:
                return Mutation(result=Success(value=None), persist=False)

            now = self._clock.now()
            if cmd.active:
                user.activate(now)
            else:
                user.deactivate(now)
            self._logger.info(
                "user_activation_changed",
                actor_id=str(cmd.actor_id),
                user_id=str(user.id),
                active=cmd.active,
            )
            return Mutation(result=Success(value=None))

        return await self._unit_of_work.run(
            lambda: self._user_repo.find_by_id(cmd.user_id),
            mutate,
            operation="set_user_active",
        )
