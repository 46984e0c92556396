"""
PostgreSQL Storage
==================

Relational storage backend on psycopg2.

The caller owns the connection (and its lifetime, pooling and SSL
settings); each operation runs in its own transaction via ``with conn:``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Final, Optional

import psycopg2.errors
import psycopg2.extras

from fineauth.core.auth.models import Session, User
from fineauth.core.errors import StorageError, UserAlreadyExistsError
from fineauth.db.base import StorageAdapter, ensure_utc
from fineauth.utils.identifiers import generate_user_id


class PostgreSQLStorage(StorageAdapter):
    """
    PostgreSQL-backed storage.

    Usage:
        conn = psycopg2.connect(DATABASE_URL, sslmode="require")
        storage = PostgreSQLStorage(conn)
        storage.prepare()
    """

    _SCHEMA: Final[tuple[str, ...]] = (
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_users_email ON users (LOWER(email))",
        """
        CREATE TABLE IF NOT EXISTS sessions (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            expires_at TIMESTAMP WITH TIME ZONE NOT NULL,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_sessions_user_id ON sessions (user_id)",
        "CREATE INDEX IF NOT EXISTS idx_sessions_expires_at ON sessions (expires_at)",
    )

    def __init__(self, connection: Any) -> None:
        """
        Args:
            connection: An open psycopg2 connection
        """
        self._conn = connection
        self._log = logging.getLogger("fineauth.db")

    def _cursor(self):
        return self._conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor)

    def _fetchone(self, query: str, params: tuple) -> Optional[dict]:
        with self._conn:
            with self._cursor() as cur:
                cur.execute(query, params)
                return cur.fetchone()

    def _execute(self, query: str, params: tuple = ()) -> None:
        with self._conn:
            with self._cursor() as cur:
                cur.execute(query, params)

    def prepare(self) -> None:
        with self._conn:
            with self._cursor() as cur:
                for statement in self._SCHEMA:
                    cur.execute(statement)

        self._log.debug("PostgreSQL schema ready")

    def create_user(self, email: str, password_hash: str) -> User:
        try:
            row = self._fetchone("""
                INSERT INTO users (id, email, password_hash, created_at)
                VALUES (%s, %s, %s, NOW())
                RETURNING id, email, password_hash, created_at
            """, (generate_user_id(), email, password_hash))
        except psycopg2.errors.UniqueViolation as e:
            raise UserAlreadyExistsError() from e

        if not row:
            raise StorageError("Failed to create user")
        return self._row_to_user(row)

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self._fetchone("""
            SELECT id, email, password_hash, created_at
            FROM users
            WHERE email = %s
        """, (email,))
        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        row = self._fetchone("""
            SELECT id, email, password_hash, created_at
            FROM users
            WHERE id = %s
        """, (user_id,))
        return self._row_to_user(row) if row else None

    def create_session(self, session_id: str, user_id: str, expires_at: datetime) -> Session:
        row = self._fetchone("""
            INSERT INTO sessions (id, user_id, expires_at, created_at)
            VALUES (%s, %s, %s, NOW())
            RETURNING id, user_id, expires_at, created_at
        """, (session_id, user_id, expires_at))

        if not row:
            raise StorageError("Failed to create session")
        return self._row_to_session(row)

    def get_session(self, session_id: str) -> Optional[Session]:
        row = self._fetchone("""
            SELECT id, user_id, expires_at, created_at
            FROM sessions
            WHERE id = %s
        """, (session_id,))
        return self._row_to_session(row) if row else None

    def delete_session(self, session_id: str) -> None:
        self._execute("DELETE FROM sessions WHERE id = %s", (session_id,))

    def delete_user_sessions(self, user_id: str) -> None:
        self._execute("DELETE FROM sessions WHERE user_id = %s", (user_id,))

    @staticmethod
    def _row_to_user(row: dict) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=ensure_utc(row["created_at"]),
        )

    @staticmethod
    def _row_to_session(row: dict) -> Session:
        return Session(
            id=row["id"],
            user_id=row["user_id"],
            expires_at=ensure_utc(row["expires_at"]),
            created_at=ensure_utc(row["created_at"]),
        )
