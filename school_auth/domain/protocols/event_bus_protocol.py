"""Event bus protocol (port) for domain events.

The domain never publishes directly: the User aggregate records events, and
application handlers publish the pulled events after the aggregate was saved.

Usage:
    >>> event_bus.subscribe(AccountLocked, notify_security_team)
    >>> for event in user.pull_events():
    ...     await event_bus.publish(event)
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from school_auth.domain.events.base_event import DomainEvent


EventHandler = Callable[[DomainEvent], Awaitable[None]]
"""Async callable receiving one event and returning None."""


class EventBusProtocol(Protocol):
    """Protocol for domain event publishing and subscription."""

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        """Register ``handler`` for events of exactly ``event_type``."""
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Deliver ``event`` to every subscribed handler.

        Must never raise: handler failures are logged by the implementation.
        """
        ...
