"""Bcrypt password hasher adapter.

Implements PasswordHasherPort with the bcrypt library. Hashing is CPU
bound, so both operations run in a worker thread to keep the event loop
responsive.
"""

import asyncio
import logging

import bcrypt

from accounts.core.ports import PasswordHasherPort

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72


class BcryptPasswordHasher(PasswordHasherPort):
    """Hashes passwords with bcrypt using a configurable cost factor."""

    def __init__(self, rounds: int = 10):
        """Initialize the hasher.

        Args:
            rounds: bcrypt cost factor (log2 of the iteration count), 4..31.
        """
        if not 4 <= rounds <= 31:
            raise ValueError(f"rounds must be between 4 and 31, got {rounds}")
        self.rounds = rounds

    @staticmethod
    def _encode(plain_password: str) -> bytes:
        return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def _hash_sync(self, plain_password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(plain_password), salt).decode("ascii")

    def _verify_sync(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return bcrypt.checkpw(
                self._encode(plain_password), hashed_password.encode("ascii")
            )
        except (ValueError, UnicodeEncodeError) as e:
            logger.warning(f"Stored password hash is not a valid bcrypt hash: {e}")
            return False

    async def hash(self, plain_password: str) -> str:
        """Hash a password with a fresh salt."""
        return await asyncio.to_thread(self._hash_sync, plain_password)

    async def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Check a password against a bcrypt hash.

        Malformed hashes are logged and treated as a mismatch.
        """
        return await asyncio.to_thread(
            self._verify_sync, plain_password, hashed_password
        )
