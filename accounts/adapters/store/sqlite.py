"""SQLite user repository adapter.

Implements UserRepositoryPort using SQLite with aiosqlite for async access.
Users survive process restarts with zero operational overhead.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from accounts.core.errors import EmailAlreadyInUseError
from accounts.core.models import User
from accounts.core.ports import UserRepositoryPort
from accounts.core.value_objects import Email, UserId

logger = logging.getLogger(__name__)


class SQLiteUserRepository(UserRepositoryPort):
    """SQLite-backed user repository with connection pooling and async access."""

    def __init__(self, db_path: str, pool_size: int = 5):
        """Initialize SQLite repository with connection pooling.

        Args:
            db_path: Path to SQLite database file.
            pool_size: Number of connections to maintain in the pool.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._pool: list[aiosqlite.Connection] = []
        self._pool_lock = asyncio.Lock()
        self._schema_lock = asyncio.Lock()
        self._pool_size = pool_size
        self._schema_initialized = False

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get a connection from the pool or create a new one."""
        async with self._pool_lock:
            if self._pool:
                return self._pool.pop()
        return await aiosqlite.connect(str(self.db_path))

    async def _return_connection(self, conn: aiosqlite.Connection) -> None:
        """Return a connection to the pool."""
        async with self._pool_lock:
            if len(self._pool) < self._pool_size:
                self._pool.append(conn)
                return
        await conn.close()

    async def close_pool(self) -> None:
        """Close all pooled connections."""
        async with self._pool_lock:
            for conn in self._pool:
                await conn.close()
            self._pool.clear()

    async def _init_schema(self) -> None:
        """Initialize database schema on first use.

        Only runs once per instance. Subsequent calls are no-ops.
        """
        if self._schema_initialized:
            return

        async with self._schema_lock:
            if self._schema_initialized:
                return

            conn = await self._get_connection()
            try:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS users (
                        id TEXT PRIMARY KEY,
                        email TEXT UNIQUE NOT NULL,
                        password_hash TEXT NOT NULL,
                        created_at TIMESTAMP NOT NULL,
                        updated_at TIMESTAMP NOT NULL
                    )
                    """
                )
                await conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_users_email ON users(email)"
                )
                await conn.commit()
                self._schema_initialized = True
            finally:
                await self._return_connection(conn)

    async def _fetch_one(self, query: str, params: tuple[Any, ...]) -> User | None:
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_user(row)
        finally:
            await self._return_connection(conn)

    async def find_by_id(self, user_id: UserId) -> User | None:
        """Look up a user by ID."""
        return await self._fetch_one(
            "SELECT id, email, password_hash, created_at, updated_at "
            "FROM users WHERE id = ?",
            (str(user_id),),
        )

    async def find_by_email(self, email: Email) -> User | None:
        """Look up a user by normalized email."""
        return await self._fetch_one(
            "SELECT id, email, password_hash, created_at, updated_at "
            "FROM users WHERE email = ?",
            (str(email),),
        )

    async def exists(self, email: Email) -> bool:
        """Check whether the email is registered."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute(
                "SELECT 1 FROM users WHERE email = ? LIMIT 1", (str(email),)
            )
            return await cursor.fetchone() is not None
        finally:
            await self._return_connection(conn)

    async def save(self, user: User) -> None:
        """Create or update a user.

        Upserts on the primary key only, so an email held by another row
        makes the write fail instead of replacing that row.

        Raises:
            EmailAlreadyInUseError: If another user already has this email.
        """
        await self._init_schema()

        conn = await self._get_connection()
        try:
            await conn.execute(
                """
                INSERT INTO users
                (id, email, password_hash, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email = excluded.email,
                    password_hash = excluded.password_hash,
                    updated_at = excluded.updated_at
                """,
                (
                    str(user.user_id),
                    str(user.email),
                    user.password.value,
                    user.created_at.isoformat(),
                    user.updated_at.isoformat(),
                ),
            )
            await conn.commit()
        except aiosqlite.IntegrityError as e:
            await conn.rollback()
            logger.warning(
                f"Rejected save of user {user.user_id}: email already in use",
                extra={"user_id": str(user.user_id)},
            )
            raise EmailAlreadyInUseError("Email already in use by another user.") from e
        finally:
            await self._return_connection(conn)

    async def count(self) -> int:
        """Total number of stored users."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute("SELECT COUNT(*) FROM users")
            row = await cursor.fetchone()
            return row[0] if row else 0
        finally:
            await self._return_connection(conn)

    def _row_to_user(self, row: tuple[Any, ...]) -> User:
        """Convert a database row to a User aggregate.

        Raises:
            ValueError: If row is malformed or contains invalid data.
        """
        try:
            if not row or len(row) != 5:
                raise ValueError(
                    f"Invalid row length: expected 5, got {len(row) if row else 0}"
                )

            user_id, email, password_hash, created_at, updated_at = row

            try:
                created_at_dt = datetime.fromisoformat(created_at)
                updated_at_dt = datetime.fromisoformat(updated_at)
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid date format: {e}") from e

            return User.from_existing(
                user_id=user_id,
                email=email,
                hashed_password=password_hash,
                created_at=created_at_dt,
                updated_at=updated_at_dt,
            )

        except Exception as e:
            logger.error(f"Failed to parse database row: {e}")
            raise ValueError(f"Row parsing failed: {e}") from e
