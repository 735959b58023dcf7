"""Unit tests for the command handlers.

Tests verify that each handler enforces its preconditions, persists the
aggregate and publishes events only after a successful save.
"""

from datetime import UTC, datetime

import pytest

from accounts.core.commands import (
    AuthenticateUserCommand,
    RegisterUserCommand,
    UpdateUserEmailCommand,
    UpdateUserPasswordCommand,
)
from accounts.core.errors import (
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidIdentifierError,
    InvalidPasswordError,
    UserNotFoundError,
)
from accounts.core.events import UserRegisteredEvent, UserUpdatedEvent
from accounts.core.handlers import (
    AuthenticateUserHandler,
    RegisterUserHandler,
    UpdateUserEmailHandler,
    UpdateUserPasswordHandler,
)
from accounts.core.models import User
from accounts.core.value_objects import UserId
from accounts.tests.fakes import (
    FakeEventPublisherPort,
    FakePasswordHasherPort,
    FakeUserRepositoryPort,
)

USER_UUID = "123e4567-e89b-12d3-a456-426655440000"
OTHER_UUID = "223e4567-e89b-12d3-a456-426655440000"
MISSING_UUID = "323e4567-e89b-12d3-a456-426655440000"
CREATED_AT = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def repository() -> FakeUserRepositoryPort:
    return FakeUserRepositoryPort()


@pytest.fixture
def publisher() -> FakeEventPublisherPort:
    return FakeEventPublisherPort()


@pytest.fixture
def hasher() -> FakePasswordHasherPort:
    return FakePasswordHasherPort()


@pytest.fixture
def existing_user(repository: FakeUserRepositoryPort) -> User:
    """Seed a user with email initial@example.com and password InitialPass123."""
    user = User.from_existing(
        user_id=USER_UUID,
        email="initial@example.com",
        hashed_password="hashed_InitialPass123",
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )
    repository.add(user)
    return user


@pytest.fixture
def other_user(repository: FakeUserRepositoryPort) -> User:
    user = User.from_existing(
        user_id=OTHER_UUID,
        email="taken@example.com",
        hashed_password="hashed_OtherPass123",
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )
    repository.add(user)
    return user


# ============================================================================
# RegisterUserHandler Tests
# ============================================================================


class TestRegisterUserHandler:
    """Tests for RegisterUserHandler."""

    @pytest.fixture
    def handler(
        self,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
        hasher: FakePasswordHasherPort,
    ) -> RegisterUserHandler:
        return RegisterUserHandler(repository, publisher, hasher)

    async def test_registers_new_user(
        self,
        handler: RegisterUserHandler,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
    ) -> None:
        user_id = await handler.execute(
            RegisterUserCommand(email="New@Example.com", password="Password123!")
        )

        assert isinstance(user_id, UserId)
        saved = repository.users[str(user_id)]
        assert saved.email.value == "new@example.com"
        assert saved.password.value == "hashed_Password123!"
        assert repository.saved_users == [saved]

        assert publisher.event_names == ["user.registered"]
        event = publisher.get_last_event()
        assert isinstance(event, UserRegisteredEvent)
        assert event.user_id == user_id
        assert saved.domain_events == ()

    async def test_duplicate_email_rejected(
        self,
        handler: RegisterUserHandler,
        existing_user: User,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
        hasher: FakePasswordHasherPort,
    ) -> None:
        with pytest.raises(
            EmailAlreadyInUseError, match="User with this email already exists."
        ):
            await handler.execute(
                RegisterUserCommand(email="INITIAL@example.com", password="Password123!")
            )

        assert repository.saved_users == []
        assert publisher.published_events == []
        assert hasher.hash_calls == []

    async def test_invalid_email_rejected_before_lookup(
        self, handler: RegisterUserHandler, repository: FakeUserRepositoryPort
    ) -> None:
        with pytest.raises(InvalidEmailError):
            await handler.execute(RegisterUserCommand(email="nope", password="Password123!"))
        assert repository.exists_calls == []

    async def test_invalid_password_rejected(
        self, handler: RegisterUserHandler, repository: FakeUserRepositoryPort
    ) -> None:
        with pytest.raises(InvalidPasswordError):
            await handler.execute(RegisterUserCommand(email="a@example.com", password="short"))
        assert repository.saved_users == []

    async def test_save_failure_publishes_nothing(
        self,
        handler: RegisterUserHandler,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
    ) -> None:
        repository.save_error = ConnectionError("Database unavailable")

        with pytest.raises(ConnectionError, match="Database unavailable"):
            await handler.execute(
                RegisterUserCommand(email="a@example.com", password="Password123!")
            )

        assert publisher.publish_call_count == 0

    async def test_publish_failure_propagates_after_save(
        self,
        handler: RegisterUserHandler,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
    ) -> None:
        publisher.should_fail = True

        with pytest.raises(RuntimeError, match="Publishing failed"):
            await handler.execute(
                RegisterUserCommand(email="a@example.com", password="Password123!")
            )

        assert len(repository.saved_users) == 1
        assert len(repository.saved_users[0].domain_events) == 1


# ============================================================================
# UpdateUserEmailHandler Tests
# ============================================================================


class TestUpdateUserEmailHandler:
    """Tests for UpdateUserEmailHandler."""

    @pytest.fixture
    def handler(
        self,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
        hasher: FakePasswordHasherPort,
    ) -> UpdateUserEmailHandler:
        return UpdateUserEmailHandler(repository, publisher, hasher)

    async def test_updates_email_and_publishes(
        self,
        handler: UpdateUserEmailHandler,
        existing_user: User,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
    ) -> None:
        await handler.execute(UpdateUserEmailCommand(user_id=USER_UUID, new_email="New@Example.com"))

        assert existing_user.email.value == "new@example.com"
        assert repository.saved_users == [existing_user]

        assert publisher.event_names == ["user.updated"]
        event = publisher.get_last_event()
        assert isinstance(event, UserUpdatedEvent)
        assert str(event.old_email) == "initial@example.com"
        assert str(event.new_email) == "new@example.com"
        assert existing_user.domain_events == ()

    async def test_user_not_found(
        self, handler: UpdateUserEmailHandler, publisher: FakeEventPublisherPort
    ) -> None:
        with pytest.raises(UserNotFoundError, match="User not found."):
            await handler.execute(
                UpdateUserEmailCommand(user_id=MISSING_UUID, new_email="new@example.com")
            )
        assert publisher.published_events == []

    async def test_email_owned_by_another_user(
        self,
        handler: UpdateUserEmailHandler,
        existing_user: User,
        other_user: User,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
    ) -> None:
        with pytest.raises(
            EmailAlreadyInUseError, match="Email already in use by another user."
        ):
            await handler.execute(
                UpdateUserEmailCommand(user_id=USER_UUID, new_email="taken@example.com")
            )

        assert existing_user.email.value == "initial@example.com"
        assert repository.saved_users == []
        assert publisher.published_events == []

    async def test_same_email_is_not_saved_or_published(
        self,
        handler: UpdateUserEmailHandler,
        existing_user: User,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
    ) -> None:
        await handler.execute(
            UpdateUserEmailCommand(user_id=USER_UUID, new_email="Initial@Example.com")
        )

        assert repository.saved_users == []
        assert publisher.published_events == []
        assert existing_user.updated_at == CREATED_AT

    async def test_invalid_user_id(self, handler: UpdateUserEmailHandler) -> None:
        with pytest.raises(InvalidIdentifierError):
            await handler.execute(
                UpdateUserEmailCommand(user_id="not-a-uuid", new_email="a@example.com")
            )

    async def test_invalid_new_email(
        self, handler: UpdateUserEmailHandler, existing_user: User
    ) -> None:
        with pytest.raises(InvalidEmailError):
            await handler.execute(UpdateUserEmailCommand(user_id=USER_UUID, new_email="broken"))


# ============================================================================
# UpdateUserPasswordHandler Tests
# ============================================================================


class TestUpdateUserPasswordHandler:
    """Tests for UpdateUserPasswordHandler."""

    @pytest.fixture
    def handler(
        self,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
        hasher: FakePasswordHasherPort,
    ) -> UpdateUserPasswordHandler:
        return UpdateUserPasswordHandler(repository, publisher, hasher)

    async def test_updates_password_and_publishes(
        self,
        handler: UpdateUserPasswordHandler,
        existing_user: User,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
        hasher: FakePasswordHasherPort,
    ) -> None:
        await handler.execute(
            UpdateUserPasswordCommand(user_id=USER_UUID, new_password="NewPassword456")
        )

        updated = repository.users[USER_UUID]
        assert updated.email.value == "initial@example.com"
        assert await updated.authenticate("NewPassword456", hasher) is True
        assert await updated.authenticate("InitialPass123", hasher) is False

        assert publisher.event_names == ["user.updated"]
        event = publisher.get_last_event()
        assert isinstance(event, UserUpdatedEvent)
        assert event.user_id == existing_user.user_id
        assert event.old_email is None and event.new_email is None
        assert updated.domain_events == ()

    async def test_same_password_still_saved_and_published(
        self,
        handler: UpdateUserPasswordHandler,
        existing_user: User,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
    ) -> None:
        await handler.execute(
            UpdateUserPasswordCommand(user_id=USER_UUID, new_password="InitialPass123")
        )

        assert repository.saved_users == [existing_user]
        assert publisher.event_names == ["user.updated"]

    async def test_user_not_found(self, handler: UpdateUserPasswordHandler) -> None:
        with pytest.raises(UserNotFoundError, match="User not found."):
            await handler.execute(
                UpdateUserPasswordCommand(user_id=MISSING_UUID, new_password="NewPassword456")
            )

    async def test_short_password_rejected(
        self,
        handler: UpdateUserPasswordHandler,
        existing_user: User,
        repository: FakeUserRepositoryPort,
    ) -> None:
        with pytest.raises(InvalidPasswordError):
            await handler.execute(UpdateUserPasswordCommand(user_id=USER_UUID, new_password="short"))
        assert repository.saved_users == []


# ============================================================================
# AuthenticateUserHandler Tests
# ============================================================================


class TestAuthenticateUserHandler:
    """Tests for AuthenticateUserHandler."""

    @pytest.fixture
    def handler(
        self,
        repository: FakeUserRepositoryPort,
        publisher: FakeEventPublisherPort,
        hasher: FakePasswordHasherPort,
    ) -> AuthenticateUserHandler:
        return AuthenticateUserHandler(repository, publisher, hasher)

    async def test_valid_credentials(
        self,
        handler: AuthenticateUserHandler,
        existing_user: User,
        publisher: FakeEventPublisherPort,
    ) -> None:
        user_id = await handler.execute(
            AuthenticateUserCommand(email="INITIAL@example.com", password="InitialPass123")
        )
        assert user_id == existing_user.user_id
        assert publisher.published_events == []

    @pytest.mark.parametrize(
        ("email", "password"),
        [
            ("initial@example.com", "WrongPassword"),
            ("unknown@example.com", "InitialPass123"),
            ("not-an-email", "InitialPass123"),
            ("initial@example.com", ""),
        ],
    )
    async def test_invalid_credentials(
        self,
        handler: AuthenticateUserHandler,
        existing_user: User,
        email: str,
        password: str,
    ) -> None:
        with pytest.raises(InvalidCredentialsError, match="Invalid email or password."):
            await handler.execute(AuthenticateUserCommand(email=email, password=password))

    async def test_unknown_email_still_verifies_a_hash(
        self,
        handler: AuthenticateUserHandler,
        hasher: FakePasswordHasherPort,
    ) -> None:
        for _ in range(2):
            with pytest.raises(InvalidCredentialsError):
                await handler.execute(
                    AuthenticateUserCommand(
                        email="unknown@example.com", password="InitialPass123"
                    )
                )

        assert len(hasher.verify_calls) == 2
        assert all(plain == "InitialPass123" for plain, _ in hasher.verify_calls)
        # The throwaway hash is computed once and reused
        assert len(hasher.hash_calls) == 1
