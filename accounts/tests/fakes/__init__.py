"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeUserRepositoryPort: In-memory user persistence with call tracking
- FakePasswordHasherPort: Predictable "hashed_<plain>" hashing
- FakeEventPublisherPort: Captured events for assertion
- FakeUserManagementPort: Captured account operations
"""

from .hasher import FakePasswordHasherPort
from .management import FakeUserManagementPort
from .publisher import FakeEventPublisherPort
from .store import FakeUserRepositoryPort

__all__ = [
    "FakeEventPublisherPort",
    "FakePasswordHasherPort",
    "FakeUserManagementPort",
    "FakeUserRepositoryPort",
]
