"""Port interfaces for the Accounts user-management context.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - UserRepositoryPort: Persist and query User aggregates
   - PasswordHasherPort: Hash and verify passwords
   - EventPublisherPort: Deliver domain events to interested parties

2. **Driving Ports** (adapters/external systems call into core)
   - UserManagementPort: Register, update and authenticate users
"""

from abc import ABC, abstractmethod

from .events import DomainEvent
from .models import User, UserDetails
from .value_objects import Email, UserId


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class UserRepositoryPort(ABC):
    """Port for persisting and querying User aggregates.

    Implementations must treat email lookups as exact matches on the
    normalized (lower-cased) address held by the Email value object.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by ID.

        Args:
            user_id: Identifier of the user.

        Returns:
            User if found, None otherwise.

        Raises:
            Exception: If the backing store is unavailable.
        """

    @abstractmethod
    async def find_by_email(self, email: Email) -> User | None:
        """Retrieve a user by email address.

        Args:
            email: Normalized email address.

        Returns:
            User if found, None otherwise.

        Raises:
            Exception: If the backing store is unavailable.
        """

    @abstractmethod
    async def exists(self, email: Email) -> bool:
        """Check whether any user is registered with this email.

        Raises:
            Exception: If the backing store is unavailable.
        """

    @abstractmethod
    async def save(self, user: User) -> None:
        """Insert or replace a user.

        Pending domain events are not persisted; publishing them is the
        caller's job. Saving never removes another user: if a different
        user already holds the email, the save fails.

        Raises:
            EmailAlreadyInUseError: If another user already has this email.
            Exception: If the backing store is unavailable.
        """


class PasswordHasherPort(ABC):
    """Port for one-way password hashing.

    Implementations must produce salted hashes so that hashing the same
    password twice yields different values that both verify.
    """

    @abstractmethod
    async def hash(self, plain_password: str) -> str:
        """Hash a plain text password.

        Returns:
            Encoded hash suitable for storage.
        """

    @abstractmethod
    async def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Check a plain text password against a stored hash.

        Returns:
            True if they match. False on mismatch or malformed hash.
        """


class EventPublisherPort(ABC):
    """Port for delivering domain events after a successful save."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Deliver one domain event.

        Args:
            event: Event to deliver. Routing uses ``event.event_name``.

        Raises:
            Exception: If a subscriber or transport fails.
        """


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class UserManagementPort(ABC):
    """Port for user-initiated account operations.

    Driving port: the CLI invokes these methods. The implementation lives
    in the core (user_service.py).
    """

    @abstractmethod
    async def register_user(self, email: str, password: str) -> UserId:
        """Register a new user and return the new ID.

        Raises:
            EmailAlreadyInUseError: If the email is already registered.
            InvalidEmailError, InvalidPasswordError: On invalid input.
        """

    @abstractmethod
    async def update_email(self, user_id: str, new_email: str) -> None:
        """Change a user's email address.

        Raises:
            UserNotFoundError: If the user doesn't exist.
            EmailAlreadyInUseError: If another user owns the email.
        """

    @abstractmethod
    async def update_password(self, user_id: str, new_password: str) -> None:
        """Change a user's password.

        Raises:
            UserNotFoundError: If the user doesn't exist.
            InvalidPasswordError: If the password violates the policy.
        """

    @abstractmethod
    async def authenticate(self, email: str, password: str) -> UserId:
        """Verify credentials and return the matching user's ID.

        Raises:
            InvalidCredentialsError: If the credentials don't match.
        """

    @abstractmethod
    async def get_user(self, user_id: str) -> UserDetails:
        """Retrieve a read-only view of a user.

        Raises:
            UserNotFoundError: If the user doesn't exist.
        """


__all__ = [
    "EventPublisherPort",
    "PasswordHasherPort",
    "UserManagementPort",
    "UserRepositoryPort",
]
