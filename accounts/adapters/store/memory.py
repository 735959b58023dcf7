"""In-memory user repository adapter.

Implements UserRepositoryPort with a dict keyed by user ID. Email lookups
scan every stored user, which is fine for demos and tests but not for
real workloads.
"""

from accounts.core.errors import EmailAlreadyInUseError
from accounts.core.models import User
from accounts.core.ports import UserRepositoryPort
from accounts.core.value_objects import Email, UserId


class InMemoryUserRepository(UserRepositoryPort):
    """Dict-backed user repository."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    async def find_by_id(self, user_id: UserId) -> User | None:
        return self._users.get(str(user_id))

    async def find_by_email(self, email: Email) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def exists(self, email: Email) -> bool:
        return await self.find_by_email(email) is not None

    async def save(self, user: User) -> None:
        key = str(user.user_id)
        for other_key, other in self._users.items():
            if other_key != key and other.email == user.email:
                raise EmailAlreadyInUseError("Email already in use by another user.")
        self._users[key] = user

    def __len__(self) -> int:
        return len(self._users)
