"""Aggregate models for the Accounts user-management context.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from .events import DomainEvent, UserRegisteredEvent, UserUpdatedEvent
from .value_objects import Email, Password, UniqueEntityId, UserId

if TYPE_CHECKING:
    from .ports import PasswordHasherPort


class AggregateRoot:
    """Entity that owns a consistency boundary and collects domain events.

    Events are accumulated while the aggregate changes and are drained by
    the application layer after the aggregate has been saved.
    """

    def __init__(self, entity_id: UniqueEntityId | None = None):
        self._id = entity_id if entity_id is not None else UniqueEntityId.create()
        self._domain_events: list[DomainEvent] = []

    @property
    def id(self) -> UniqueEntityId:
        return self._id

    @property
    def domain_events(self) -> tuple[DomainEvent, ...]:
        """Pending events, as an immutable snapshot."""
        return tuple(self._domain_events)

    def _add_domain_event(self, event: DomainEvent) -> None:
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        self._domain_events.clear()

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, AggregateRoot):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)


class User(AggregateRoot):
    """The User aggregate root.

    State Transitions:
        - register: creates the user and raises UserRegisteredEvent
        - update_email: raises UserUpdatedEvent (with old/new email) only
          when the normalized address actually changes
        - update_password: always re-hashes and raises UserUpdatedEvent
          without any email fields

    Use ``register`` for new accounts and ``from_existing`` when loading
    from persistence. Reconstitution never raises events.
    """

    def __init__(
        self,
        user_id: UserId,
        email: Email,
        password: Password,
        created_at: datetime,
        updated_at: datetime,
    ):
        super().__init__(user_id.value)
        self._email = email
        self._password = password
        self._created_at = created_at
        self._updated_at = updated_at

    @classmethod
    async def register(
        cls, email: str, plain_password: str, hasher: "PasswordHasherPort"
    ) -> "User":
        """Register a brand new user.

        Args:
            email: Raw email address.
            plain_password: Plain text password, hashed before storage.
            hasher: Hasher for the password.

        Returns:
            New User with a pending UserRegisteredEvent.

        Raises:
            InvalidEmailError: If the email is empty or malformed.
            InvalidPasswordError: If the password violates the policy.
        """
        user_id = UserId.create()
        user_email = Email.create(email)
        user_password = await Password.create(plain_password, hasher)
        now = datetime.now(UTC)

        user = cls(user_id, user_email, user_password, now, now)
        user._add_domain_event(
            UserRegisteredEvent(
                user_id=user_id,
                email=user_email,
                registered_at=now,
                occurred_at=now,
            )
        )
        return user

    @classmethod
    def from_existing(
        cls,
        user_id: str,
        email: str,
        hashed_password: str,
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        """Rebuild a User from persisted primitives without raising events."""
        return cls(
            UserId.from_string(user_id),
            Email.create(email),
            Password.from_hashed(hashed_password),
            created_at,
            updated_at,
        )

    def update_email(self, new_email: str) -> None:
        """Change the email address.

        A no-op when the new address equals the current one after
        normalization.

        Raises:
            InvalidEmailError: If new_email is empty or malformed.
        """
        old_email = self._email
        updated_email = Email.create(new_email)
        if old_email == updated_email:
            return

        self._email = updated_email
        self._updated_at = datetime.now(UTC)
        self._add_domain_event(
            UserUpdatedEvent(
                user_id=self.user_id,
                updated_at=self._updated_at,
                old_email=old_email,
                new_email=updated_email,
                occurred_at=self._updated_at,
            )
        )

    async def update_password(
        self, new_plain_password: str, hasher: "PasswordHasherPort"
    ) -> None:
        """Replace the password with a freshly hashed one.

        Raises:
            InvalidPasswordError: If the password violates the policy.
        """
        self._password = await Password.create(new_plain_password, hasher)
        self._updated_at = datetime.now(UTC)
        self._add_domain_event(
            UserUpdatedEvent(
                user_id=self.user_id,
                updated_at=self._updated_at,
                occurred_at=self._updated_at,
            )
        )

    async def authenticate(
        self, plain_password: str | None, hasher: "PasswordHasherPort"
    ) -> bool:
        """Return True if plain_password matches the stored hash."""
        return await self._password.compare(plain_password, hasher)

    @property
    def user_id(self) -> UserId:
        return UserId(self._id)

    @property
    def email(self) -> Email:
        return self._email

    @property
    def password(self) -> Password:
        return self._password

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email})"


@dataclass(frozen=True)
class UserDetails:
    """Read-only projection of a user for presentation.

    Deliberately excludes the password hash.
    """

    user_id: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserDetails":
        return cls(
            user_id=str(user.user_id),
            email=str(user.email),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


__all__ = ["AggregateRoot", "User", "UserDetails"]
