"""Change user role handler.

Flow:
1. Parse role code (unknown -> INVALID_ROLE)
2. Load target (missing -> USER_NOT_FOUND) and actor
3. Actor must manage both the target's current role and the new role
4. change_role: no-op for the same role, otherwise clears the refresh token
   and ends every session
5. Save and publish RoleChanged
"""

from school_auth.application.commands.user_admin_commands import ChangeUserRole
from school_auth.application.errors import user_not_found
from school_auth.application.services.admin_authority import check_authority
from school_auth.application.services.user_unit_of_work import (
    Mutation,
    UserUnitOfWork,
)
from school_auth.core.enums import ErrorCode
from school_auth.core.errors import DomainError, ValidationError
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.enums.user_role import UserRole
from school_auth.domain.protocols import (
    Clock,
    EventBusProtocol,
    LoggerProtocol,
    UserRepository,
)


class ChangeUserRoleHandler:
    """Handler for the ChangeUserRole command."""

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

    async def handle(self, cmd: ChangeUserRole) -> Result[bool, DomainError]:
        """Assign the role.

        Returns:
            Success(True) if the role changed, Success(False) if it was
            already assigned.
        """
        try:
            new_role = UserRole.from_code(cmd.role_code)
        except ValueError:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_ROLE,
                    message=f"Unknown role: {cmd.role_code}",
                    field="role_code",
                )
            )

        async def mutate(user: User | None) -> Mutation[bool]:
            if user is None:
                return Mutation(
                    result=Failure(error=user_not_found(cmd.user_id)), persist=False
                )
            actor = await self._user_repo.find_by_id(cmd.actor_id)
            denied = check_authority(actor, user, new_role)
            if denied is not None:
                self._logger.warning(
                    "role_change_denied",
                    actor_id=str(cmd.actor_id),
                    user_id=str(user.id),
                    new_role=new_role.value,
                )
                return Mutation(result=Failure(error=denied), persist=False)

            changed = user.change_role(new_role, self._clock.now())
            if changed:
                self._logger.info(
                    "role_changed",
                    actor_id=str(cmd.actor_id),
                    user_id=str(user.id),
                    new_role=new_role.value,
                )
            return Mutation(result=Success(value=changed), persist=changed)

        return await self._unit_of_work.run(
            lambda: self._user_repo.find_by_id(cmd.user_id),
            mutate,
            operation="change_user_role",
        )
