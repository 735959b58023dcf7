"""Domain errors for the Accounts user-management context.

Every error subclasses ValueError so driving adapters (CLI, etc.) can
treat domain failures like any other validation failure.
"""


class AccountsError(ValueError):
    """Base class for all domain errors raised by the core."""


class InvalidIdentifierError(AccountsError):
    """Raised when an identifier is not a valid UUID."""


class InvalidEmailError(AccountsError):
    """Raised when an email address is empty or malformed."""


class InvalidPasswordError(AccountsError):
    """Raised when a password violates the password policy."""


class UserNotFoundError(AccountsError):
    """Raised when no user exists for the given identifier."""


class EmailAlreadyInUseError(AccountsError):
    """Raised when an email is already registered to a user."""


class InvalidCredentialsError(AccountsError):
    """Raised when authentication fails."""


__all__ = [
    "AccountsError",
    "EmailAlreadyInUseError",
    "InvalidCredentialsError",
    "InvalidEmailError",
    "InvalidIdentifierError",
    "InvalidPasswordError",
    "UserNotFoundError",
]
