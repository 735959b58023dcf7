"""Commands accepted by the user-management handlers.

Commands carry raw primitive input. Validation into value objects happens
inside the handlers and the aggregate.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegisterUserCommand:
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class UpdateUserEmailCommand:
    user_id: str
    new_email: str


@dataclass(frozen=True)
class UpdateUserPasswordCommand:
    user_id: str
    new_password: str = field(repr=False)


@dataclass(frozen=True)
class AuthenticateUserCommand:
    email: str
    password: str = field(repr=False)


__all__ = [
    "AuthenticateUserCommand",
    "RegisterUserCommand",
    "UpdateUserEmailCommand",
    "UpdateUserPasswordCommand",
]
