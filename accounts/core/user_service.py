"""User service: implements UserManagementPort for account operations.

This is a core service that routes each operation (register, update email,
update password, authenticate, get details) to its command handler. All
state changes are logged for audit trails. Credentials never appear in
log records.
"""

import logging

from .commands import (
    AuthenticateUserCommand,
    RegisterUserCommand,
    UpdateUserEmailCommand,
    UpdateUserPasswordCommand,
)
from .errors import UserNotFoundError
from .handlers import (
    AuthenticateUserHandler,
    RegisterUserHandler,
    UpdateUserEmailHandler,
    UpdateUserPasswordHandler,
)
from .models import UserDetails
from .ports import (
    EventPublisherPort,
    PasswordHasherPort,
    UserManagementPort,
    UserRepositoryPort,
)
from .value_objects import UserId

logger = logging.getLogger(__name__)


class UserService(UserManagementPort):
    """Core implementation of UserManagementPort.

    Builds one handler per command around the same repository, publisher
    and hasher.
    """

    def __init__(
        self,
        repository: UserRepositoryPort,
        publisher: EventPublisherPort,
        hasher: PasswordHasherPort,
    ):
        """Initialize the user service.

        Args:
            repository: UserRepositoryPort implementation for persistence.
            publisher: EventPublisherPort implementation for domain events.
            hasher: PasswordHasherPort implementation for credentials.
        """
        self.repository = repository
        self.register_handler = RegisterUserHandler(repository, publisher, hasher)
        self.update_email_handler = UpdateUserEmailHandler(repository, publisher, hasher)
        self.update_password_handler = UpdateUserPasswordHandler(
            repository, publisher, hasher
        )
        self.authenticate_handler = AuthenticateUserHandler(repository, publisher, hasher)

    async def register_user(self, email: str, password: str) -> UserId:
        """Register a new user.

        Args:
            email: Raw email address.
            password: Plain text password.

        Returns:
            ID of the new user.

        Raises:
            EmailAlreadyInUseError: If the email is already registered.
            InvalidEmailError, InvalidPasswordError: On invalid input.
        """
        user_id = await self.register_handler.execute(
            RegisterUserCommand(email=email, password=password)
        )

        logger.info(
            f"User {user_id} registered",
            extra={"user_id": str(user_id)},
        )
        return user_id

    async def update_email(self, user_id: str, new_email: str) -> None:
        """Change a user's email address.

        Raises:
            UserNotFoundError: If the user doesn't exist.
            EmailAlreadyInUseError: If another user owns the email.
        """
        await self.update_email_handler.execute(
            UpdateUserEmailCommand(user_id=user_id, new_email=new_email)
        )

        logger.info(
            f"Email updated for user {user_id}",
            extra={"user_id": user_id},
        )

    async def update_password(self, user_id: str, new_password: str) -> None:
        """Change a user's password.

        Raises:
            UserNotFoundError: If the user doesn't exist.
            InvalidPasswordError: If the password violates the policy.
        """
        await self.update_password_handler.execute(
            UpdateUserPasswordCommand(user_id=user_id, new_password=new_password)
        )

        logger.info(
            f"Password updated for user {user_id}",
            extra={"user_id": user_id},
        )

    async def authenticate(self, email: str, password: str) -> UserId:
        """Verify credentials.

        Failed attempts are logged at WARNING without the email address.

        Raises:
            InvalidCredentialsError: If the credentials don't match.
        """
        try:
            user_id = await self.authenticate_handler.execute(
                AuthenticateUserCommand(email=email, password=password)
            )
        except ValueError:
            logger.warning("Authentication failed")
            raise

        logger.info(
            f"User {user_id} authenticated",
            extra={"user_id": str(user_id)},
        )
        return user_id

    async def get_user(self, user_id: str) -> UserDetails:
        """Retrieve a read-only view of a user.

        Raises:
            InvalidIdentifierError: If user_id is not a UUID.
            UserNotFoundError: If the user doesn't exist.
        """
        user = await self.repository.find_by_id(UserId.from_string(user_id))
        if user is None:
            raise UserNotFoundError("User not found.")

        logger.debug(
            f"Retrieved details for user {user_id}",
            extra={"user_id": user_id},
        )
        return UserDetails.from_user(user)


__all__ = ["UserService"]
