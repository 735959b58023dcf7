"""Core domain logic for the Accounts user-management context.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .errors import (
    AccountsError,
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InvalidEmailError,
    InvalidIdentifierError,
    InvalidPasswordError,
    UserNotFoundError,
)
from .events import DomainEvent, UserRegisteredEvent, UserUpdatedEvent
from .models import AggregateRoot, User, UserDetails
from .value_objects import Email, Password, UniqueEntityId, UserId

__all__ = [
    "AccountsError",
    "AggregateRoot",
    "DomainEvent",
    "Email",
    "EmailAlreadyInUseError",
    "InvalidCredentialsError",
    "InvalidEmailError",
    "InvalidIdentifierError",
    "InvalidPasswordError",
    "Password",
    "UniqueEntityId",
    "User",
    "UserDetails",
    "UserId",
    "UserNotFoundError",
    "UserRegisteredEvent",
    "UserUpdatedEvent",
]
