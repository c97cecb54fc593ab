"""Unlock user handler: clears a lockout before it expires on its own."""

from school_auth.application.commands.user_admin_commands import UnlockUser
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


class UnlockUserHandler:
    """Handler for the UnlockUser command."""

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

    async def handle(self, cmd: UnlockUser) -> Result[None, DomainError]:
        async def mutate(user: User | None) -> Mutation[None]:
            if user is None:
                return Mutation(
                    result=Failure(error=user_not_found(cmd.user_id)), persist=False
                )
            actor = await self._user_repo.find_by_id(cmd.actor_id)
            denied = check_authority(actor, user)
            if denied is not None:
                return Mutation(result=Failure(error=denied), persist=False)
            if user.failed_login_count == 0 and user.locked_until is None:
                return Mutation(result=Success(value=None), persist=False)

            user.unlock(self._clock.now())
            self._logger.info(
                "user_unlocked", actor_id=str(cmd.actor_id), user_id=str(user.id)
            )
            return Mutation(result=Success(value=None))

        return await self._unit_of_work.run(
            lambda: self._user_repo.find_by_id(cmd.user_id),
            mutate,
            operation="unlock_user",
        )
