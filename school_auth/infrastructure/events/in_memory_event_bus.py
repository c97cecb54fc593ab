"""Process-local event bus for user aggregate events.

UserUnitOfWork publishes the events a User recorded only after the save
succeeded. Subscribers (audit trail, security alerts on AccountLocked,
welcome mail on UserRegistered) run concurrently, and a failing subscriber
never turns a committed login or password change into an error.

Example:
    >>> bus = InMemoryEventBus(logger=get_logger())
    >>> bus.subscribe(AccountLocked, alert_security_team)
    >>> await bus.publish(AccountLocked(...))
"""

import asyncio
from collections import defaultdict

from school_auth.domain.events.base_event import DomainEvent
from school_auth.domain.protocols.event_bus_protocol import EventHandler
from school_auth.domain.protocols.logger_protocol import LoggerProtocol


class InMemoryEventBus:
    """Dispatches by exact event class. Single event loop only."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._subscribers: defaultdict[type[DomainEvent], list[EventHandler]] = (
            defaultdict(list)
        )
        self._logger = logger

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        self._subscribers[event_type].append(handler)

    async def publish(self, event: DomainEvent) -> None:
        """Run every subscriber of ``type(event)``; failures are logged, not raised."""
        subscribers = tuple(self._subscribers.get(type(event), ()))
        if not subscribers:
            return

        event_name = type(event).__name__
        outcomes = await asyncio.gather(
            *(subscriber(event) for subscriber in subscribers),
            return_exceptions=True,
        )

        failures = [
            (subscriber, outcome)
            for subscriber, outcome in zip(subscribers, outcomes)
            if isinstance(outcome, Exception)
        ]
        for subscriber, exc in failures:
            self._logger.warning(
                "event_handler_failed",
                event_type=event_name,
                event_id=str(event.event_id),
                handler_name=getattr(subscriber, "__name__", repr(subscriber)),
                error_type=type(exc).__name__,
                error_message=str(exc),
            )

        self._logger.debug(
            "event_published",
            event_type=event_name,
            event_id=str(event.event_id),
            subscriber_count=len(subscribers),
            failed_count=len(failures),
        )
