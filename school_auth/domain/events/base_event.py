"""Base class for events recorded by the User aggregate.

Events are past-tense facts (UserLoggedIn, AccountLocked). User appends
them while it mutates; UserUnitOfWork pulls them with ``pull_events()``
after the save succeeds and hands them to the event bus, so a rejected
write never announces anything.

Example:
    >>> @dataclass(frozen=True, kw_only=True, slots=True)
    ... class AccountUnlocked(DomainEvent):
    ...     user_id: UUID
    >>> AccountUnlocked(user_id=user.id, occurred_at=clock.now())
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Common event envelope.

    Attributes:
        event_id: Time-ordered (uuid7) identifier of this occurrence.
        occurred_at: UTC instant. The aggregate always passes its clock's
            ``now``; the wall-clock default only serves ad hoc construction.
    """

    event_id: UUID = field(default_factory=uuid7)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
