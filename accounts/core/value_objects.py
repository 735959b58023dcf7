"""Value objects for the Accounts user-management context.

All value objects are frozen dataclasses built only from standard library
types. They validate themselves on construction and compare by value.
"""

import re
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import InvalidEmailError, InvalidIdentifierError, InvalidPasswordError

if TYPE_CHECKING:
    from .ports import PasswordHasherPort

MIN_PASSWORD_LENGTH = 8

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class UniqueEntityId:
    """A UUID string identifying an entity."""

    value: str

    def __post_init__(self) -> None:
        """Validate the UUID format and store it in canonical lower case."""
        if not isinstance(self.value, str) or not _UUID_PATTERN.match(self.value):
            raise InvalidIdentifierError("Invalid UUID format for UniqueEntityID.")
        object.__setattr__(self, "value", self.value.lower())

    @classmethod
    def create(cls, value: str | None = None) -> "UniqueEntityId":
        """Wrap the given UUID string, or generate a random one."""
        if not value:
            return cls(str(uuid.uuid4()))
        return cls(value)

    def to_value(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UserId:
    """Identifier of a User aggregate."""

    value: UniqueEntityId

    @classmethod
    def create(cls) -> "UserId":
        return cls(UniqueEntityId.create())

    @classmethod
    def from_string(cls, raw: str) -> "UserId":
        """Build a UserId from a UUID string.

        Raises:
            InvalidIdentifierError: If raw is not a UUID.
        """
        return cls(UniqueEntityId(raw))

    def __str__(self) -> str:
        return self.value.to_value()


@dataclass(frozen=True)
class Email:
    """A validated, lower-cased email address."""

    value: str

    def __post_init__(self) -> None:
        """Normalize to lower case and validate the address format."""
        if not self.value:
            raise InvalidEmailError("Email cannot be empty.")
        if not isinstance(self.value, str):
            raise InvalidEmailError("Invalid email format.")
        normalized = self.value.lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise InvalidEmailError("Invalid email format.")
        object.__setattr__(self, "value", normalized)

    @classmethod
    def create(cls, value: str) -> "Email":
        """Create an Email from raw user input.

        Raises:
            InvalidEmailError: If value is empty or not a valid address.
        """
        return cls(value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Password:
    """A hashed password.

    The plain text is never held by this object. Hashing and verification
    are delegated to a PasswordHasherPort so the core stays free of the
    hashing library.
    """

    value: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.value:
            raise InvalidPasswordError("Hashed password cannot be empty.")
        if not isinstance(self.value, str):
            raise InvalidPasswordError("Hashed password must be a string.")

    @classmethod
    async def create(
        cls, plain_password: str, hasher: "PasswordHasherPort"
    ) -> "Password":
        """Validate a plain text password against the policy and hash it.

        Args:
            plain_password: The password as typed by the user.
            hasher: Hasher used to produce the stored hash.

        Returns:
            Password wrapping the hash.

        Raises:
            InvalidPasswordError: If the password is empty, not a string or
                too short.
        """
        if not plain_password:
            raise InvalidPasswordError("Password cannot be empty.")
        if not isinstance(plain_password, str):
            raise InvalidPasswordError("Password must be a string.")
        if len(plain_password) < MIN_PASSWORD_LENGTH:
            raise InvalidPasswordError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
            )
        hashed = await hasher.hash(plain_password)
        return cls(hashed)

    @classmethod
    def from_hashed(cls, hashed_password: str) -> "Password":
        """Reconstitute a Password from a stored hash."""
        return cls(hashed_password)

    async def compare(
        self, plain_password: str | None, hasher: "PasswordHasherPort"
    ) -> bool:
        """Check a plain text password against the stored hash.

        Empty or non-string input never matches.
        """
        if not plain_password or not isinstance(plain_password, str):
            return False
        return await hasher.verify(plain_password, self.value)

    def __str__(self) -> str:
        return self.value


__all__ = [
    "MIN_PASSWORD_LENGTH",
    "Email",
    "Password",
    "UniqueEntityId",
    "UserId",
]
