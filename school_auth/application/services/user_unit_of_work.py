"""Load, mutate and save one User aggregate with a single conflict retry.

Every write use case follows the same shape: load a fresh aggregate, apply
a mutation, save once, then publish the recorded events. A stale write
(``ConflictError(retryable=True)``) reloads and re-applies the mutation one
more time before giving up with ``TransientInfrastructureError``.

Mutations are async callables receiving the loaded user (or None when the
loader found nothing) and returning a ``Mutation``. They must not perform
external side effects (notifications, rate-limiter writes) because they can
run twice; handlers do those after ``run`` returns.

Usage:
    async def mutate(user: User | None) -> Mutation[None]:
        if user is None:
            return Mutation(result=Failure(error=not_found), persist=False)
        user.unlock(now)
        return Mutation(result=Success(value=None))

    result = await unit_of_work.run(
        lambda: repository.find_by_id(user_id), mutate, operation="unlock_user"
    )
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from school_auth.core.enums import ErrorCode
from school_auth.core.errors import (
    ConflictError,
    DomainError,
    TransientInfrastructureError,
)
from school_auth.core.result import Failure, Result, Success
from school_auth.domain.entities.user import User
from school_auth.domain.protocols.event_bus_protocol import EventBusProtocol
from school_auth.domain.protocols.logger_protocol import LoggerProtocol
from school_auth.domain.protocols.user_repository import UserRepository

T = TypeVar("T")

MAX_ATTEMPTS = 2


@dataclass(frozen=True, slots=True, kw_only=True)
class Mutation(Generic[T]):
    """Outcome of one mutation pass.

    Attributes:
        result: What the handler returns to its caller.
        persist: Save the aggregate even when ``result`` is a Failure
            (failed logins must still count).
    """

    result: Result[T, DomainError]
    persist: bool = True


Loader = Callable[[], Awaitable[User | None]]
Mutator = Callable[[User | None], Awaitable[Mutation[T]]]


class UserUnitOfWork:
    """Runs load -> mutate -> save -> publish for one User aggregate.

    Args:
        repository: User persistence port.
        event_bus: Receives the aggregate's events after a successful save.
        logger: Structured logger.
    """

    def __init__(
        self,
        repository: UserRepository,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._repository = repository
        self._event_bus = event_bus
        self._logger = logger

    async def run(
        self, load: Loader, mutate: Mutator[T], *, operation: str
    ) -> Result[T, DomainError]:
        """Apply ``mutate`` to a freshly loaded user and persist it.

        Returns:
            The mutation's result once saved, a non-retryable save conflict,
            or TransientInfrastructureError when a collaborator raised or the
            retry also hit a stale write.
        """
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                user = await load()
                mutation = await mutate(user)
            except Exception as e:
                self._logger.error(
                    "user_unit_of_work_failed", error=e, operation=operation
                )
                return Failure(error=_unavailable("user_repository", operation))

            if user is None or not mutation.persist:
                return mutation.result

            try:
                saved = await self._repository.save(user)
            except Exception as e:
                self._logger.error(
                    "user_save_failed", error=e, operation=operation, user_id=str(user.id)
                )
                return Failure(error=_unavailable("user_repository", operation))

            match saved:
                case Success():
                    await self._publish(user)
                    return mutation.result
                case Failure(error=ConflictError(retryable=True) as conflict):
                    self._logger.warning(
                        "user_save_conflict",
                        operation=operation,
                        user_id=str(user.id),
                        attempt=attempt,
                        code=conflict.code.value,
                    )
                case Failure(error=error):
                    return Failure(error=error)

        return Failure(
            error=TransientInfrastructureError(
                code=ErrorCode.CONCURRENT_MODIFICATION,
                message="User was modified concurrently, try again",
                component="user_repository",
                details={"operation": operation},
            )
        )

    async def save_new(self, user: User, *, operation: str) -> Result[None, DomainError]:
        """Persist a freshly created aggregate (no reload, no retry)."""
        try:
            saved = await self._repository.save(user)
        except Exception as e:
            self._logger.error("user_save_failed", error=e, operation=operation)
            return Failure(error=_unavailable("user_repository", operation))

        match saved:
            case Success():
                await self._publish(user)
                return Success(value=None)
            case Failure(error=error):
                return Failure(error=error)

    async def _publish(self, user: User) -> None:
        for event in user.pull_events():
            await self._event_bus.publish(event)


def _unavailable(component: str, operation: str) -> TransientInfrastructureError:
    return TransientInfrastructureError(
        code=ErrorCode.SERVICE_UNAVAILABLE,
        message="Authentication service temporarily unavailable",
        component=component,
        details={"operation": operation},
    )
