"""Domain events raised by the User aggregate.

Events are immutable records of something that already happened. They are
collected on the aggregate and published by the command handlers once the
aggregate has been persisted.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, ClassVar

from .value_objects import Email, UserId


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DomainEvent:
    """Base type for all domain events.

    Subclasses are frozen dataclasses that set ``event_name`` and declare an
    ``occurred_at`` field.
    """

    event_name: ClassVar[str] = "domain.event"
    occurred_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Serialize the event into a JSON-friendly dictionary."""
        return {"event_name": self.event_name, "occurred_at": self.occurred_at.isoformat()}


@dataclass(frozen=True)
class UserRegisteredEvent(DomainEvent):
    """A new user account was registered."""

    event_name: ClassVar[str] = "user.registered"

    user_id: UserId
    email: Email
    registered_at: datetime
    occurred_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            {
                "user_id": str(self.user_id),
                "email": str(self.email),
                "registered_at": self.registered_at.isoformat(),
            }
        )
        return payload


@dataclass(frozen=True)
class UserUpdatedEvent(DomainEvent):
    """A user's email or password changed.

    Email fields are only set for email changes. Password changes carry no
    credential material at all.
    """

    event_name: ClassVar[str] = "user.updated"

    user_id: UserId
    updated_at: datetime
    old_email: Email | None = None
    new_email: Email | None = None
    occurred_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            {
                "user_id": str(self.user_id),
                "updated_at": self.updated_at.isoformat(),
                "old_email": str(self.old_email) if self.old_email else None,
                "new_email": str(self.new_email) if self.new_email else None,
            }
        )
        return payload


__all__ = ["DomainEvent", "UserRegisteredEvent", "UserUpdatedEvent"]
