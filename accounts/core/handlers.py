"""Command handlers for the user-management context.

Each handler loads or creates a User aggregate, invokes one mutating
method, persists the aggregate through the repository port and then
publishes the events the aggregate raised. Events are published strictly
after a successful save, in the order they were raised, and cleared only
once every event has been delivered.
"""

import logging

from .commands import (
    AuthenticateUserCommand,
    RegisterUserCommand,
    UpdateUserEmailCommand,
    UpdateUserPasswordCommand,
)
from .errors import (
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InvalidEmailError,
    UserNotFoundError,
)
from .models import User
from .ports import EventPublisherPort, PasswordHasherPort, UserRepositoryPort
from .value_objects import Email, UserId

logger = logging.getLogger(__name__)


class UserCommandHandler:
    """Shared wiring for handlers that operate on the User aggregate."""

    def __init__(
        self,
        repository: UserRepositoryPort,
        publisher: EventPublisherPort,
        hasher: PasswordHasherPort,
    ):
        """Initialize the handler.

        Args:
            repository: UserRepositoryPort implementation for persistence.
            publisher: EventPublisherPort used after a successful save.
            hasher: PasswordHasherPort for hashing and verifying passwords.
        """
        self.repository = repository
        self.publisher = publisher
        self.hasher = hasher

    async def _load(self, user_id: UserId) -> User:
        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User not found.")
        return user

    async def _save_and_publish(self, user: User) -> None:
        """Persist the user, then drain and publish its pending events."""
        await self.repository.save(user)

        for event in user.domain_events:
            await self.publisher.publish(event)
            logger.debug(
                f"Published {event.event_name}",
                extra={"user_id": str(user.user_id), "event_name": event.event_name},
            )

        user.clear_domain_events()


class RegisterUserHandler(UserCommandHandler):
    """Registers a new user with a unique email address."""

    async def execute(self, command: RegisterUserCommand) -> UserId:
        """Register a user.

        Returns:
            ID of the newly registered user.

        Raises:
            EmailAlreadyInUseError: If the email is already registered.
            InvalidEmailError: If the email is empty or malformed.
            InvalidPasswordError: If the password violates the policy.
        """
        email = Email.create(command.email)

        if await self.repository.exists(email):
            raise EmailAlreadyInUseError("User with this email already exists.")

        user = await User.register(command.email, command.password, self.hasher)
        await self._save_and_publish(user)
        return user.user_id


class UpdateUserEmailHandler(UserCommandHandler):
    """Changes a user's email address."""

    async def execute(self, command: UpdateUserEmailCommand) -> None:
        """Update the email of an existing user.

        Nothing is saved or published when the new email equals the
        current one.

        Raises:
            InvalidIdentifierError: If user_id is not a UUID.
            InvalidEmailError: If the new email is malformed.
            UserNotFoundError: If the user doesn't exist.
            EmailAlreadyInUseError: If another user owns the email.
        """
        user_id = UserId.from_string(command.user_id)
        new_email = Email.create(command.new_email)

        user = await self._load(user_id)

        email_taken = await self.repository.exists(new_email)
        if email_taken and user.email != new_email:
            raise EmailAlreadyInUseError("Email already in use by another user.")

        events_before = len(user.domain_events)
        user.update_email(command.new_email)

        if len(user.domain_events) > events_before:
            await self._save_and_publish(user)


class UpdateUserPasswordHandler(UserCommandHandler):
    """Changes a user's password."""

    async def execute(self, command: UpdateUserPasswordCommand) -> None:
        """Replace the password of an existing user.

        Raises:
            InvalidIdentifierError: If user_id is not a UUID.
            UserNotFoundError: If the user doesn't exist.
            InvalidPasswordError: If the password violates the policy.
        """
        user_id = UserId.from_string(command.user_id)
        user = await self._load(user_id)

        events_before = len(user.domain_events)
        await user.update_password(command.new_password, self.hasher)

        if len(user.domain_events) > events_before:
            await self._save_and_publish(user)


class AuthenticateUserHandler(UserCommandHandler):
    """Verifies a user's credentials."""

    _DUMMY_PASSWORD = "unknown-account-placeholder"

    def __init__(
        self,
        repository: UserRepositoryPort,
        publisher: EventPublisherPort,
        hasher: PasswordHasherPort,
    ):
        super().__init__(repository, publisher, hasher)
        self._dummy_hash: str | None = None

    async def _verify_against_dummy(self, plain_password: str) -> None:
        """Spend one verification on a throwaway hash.

        Unknown emails then take as long as known ones, so response time
        does not reveal which accounts exist.
        """
        if self._dummy_hash is None:
            self._dummy_hash = await self.hasher.hash(self._DUMMY_PASSWORD)
        if plain_password and isinstance(plain_password, str):
            await self.hasher.verify(plain_password, self._dummy_hash)

    async def execute(self, command: AuthenticateUserCommand) -> UserId:
        """Authenticate by email and password.

        Unknown emails, malformed emails and wrong passwords all fail with
        the same error. An unknown email still costs one hash verification.

        Returns:
            ID of the authenticated user.

        Raises:
            InvalidCredentialsError: If the credentials don't match.
        """
        try:
            email = Email.create(command.email)
        except InvalidEmailError as e:
            raise InvalidCredentialsError("Invalid email or password.") from e

        user = await self.repository.find_by_email(email)
        if user is None:
            await self._verify_against_dummy(command.password)
            raise InvalidCredentialsError("Invalid email or password.")

        if not await user.authenticate(command.password, self.hasher):
            raise InvalidCredentialsError("Invalid email or password.")

        return user.user_id


__all__ = [
    "AuthenticateUserHandler",
    "RegisterUserHandler",
    "UpdateUserEmailHandler",
    "UpdateUserPasswordHandler",
    "UserCommandHandler",
]
