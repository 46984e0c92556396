"""
SQLite Storage
==============

Relational storage backend on the standard library sqlite3 driver.

Security Features:
- Parameterized queries only (SQL injection safe)
- UNIQUE email constraint (case-insensitive collation) backs up the
  core's advisory duplicate check
- Foreign keys enforced; deleting a user cascades to its sessions
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Final, Iterator, Optional

from fineauth.core.auth.models import Session, User
from fineauth.core.errors import UserAlreadyExistsError
from fineauth.db.base import StorageAdapter, ensure_utc
from fineauth.utils.identifiers import generate_user_id


class SQLiteStorage(StorageAdapter):
    """
    SQLite-backed storage.

    Usage:
        storage = SQLiteStorage("/var/lib/myapp/auth.db")
        storage.prepare()

    A fresh connection is opened per operation, so one instance may be
    shared across threads.
    """

    __slots__ = ("_db_path", "_log")

    _SCHEMA: Final[str] = """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT UNIQUE NOT NULL COLLATE NOCASE,
        password_hash TEXT NOT NULL,
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS sessions (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        expires_at TEXT NOT NULL,
        created_at TEXT NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );

    CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id);
    CREATE INDEX IF NOT EXISTS idx_sessions_expires ON sessions(expires_at);
    """

    def __init__(self, db_path: Path | str) -> None:
        """
        Args:
            db_path: Path to the SQLite database file
        """
        self._db_path = Path(db_path)
        self._log = logging.getLogger("fineauth.db")

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success, always close."""
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def prepare(self) -> None:
        """Create tables and indexes if they do not exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.executescript(self._SCHEMA)

        self._log.debug("SQLite schema ready")

    def create_user(self, email: str, password_hash: str) -> User:
        user = User(
            id=generate_user_id(),
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )

        try:
            with self._connect() as conn:
                conn.execute("""
                    INSERT INTO users (id, email, password_hash, created_at)
                    VALUES (?, ?, ?, ?)
                """, (user.id, user.email, user.password_hash, user.created_at.isoformat()))
        except sqlite3.IntegrityError as e:
            raise UserAlreadyExistsError() from e

        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?",
                (email,)
            ).fetchone()

        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ?",
                (user_id,)
            ).fetchone()

        return self._row_to_user(row) if row else None

    def delete_user(self, user_id: str) -> None:
        """Permanently delete a user (sessions cascade)."""
        with self._connect() as conn:
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    def create_session(self, session_id: str, user_id: str, expires_at: datetime) -> Session:
        session = Session(
            id=session_id,
            user_id=user_id,
            expires_at=ensure_utc(expires_at),
            created_at=datetime.now(timezone.utc),
        )

        with self._connect() as conn:
            conn.execute("""
                INSERT INTO sessions (id, user_id, expires_at, created_at)
                VALUES (?, ?, ?, ?)
            """, (
                session.id,
                session.user_id,
                session.expires_at.isoformat(),
                session.created_at.isoformat(),
            ))

        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM sessions WHERE id = ?",
                (session_id,)
            ).fetchone()

        return self._row_to_session(row) if row else None

    def delete_session(self, session_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))

    def delete_user_sessions(self, user_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM sessions WHERE user_id = ?", (user_id,))

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        """Convert a database row to a User object."""
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=ensure_utc(datetime.fromisoformat(row["created_at"])),
        )

    @staticmethod
    def _row_to_session(row: sqlite3.Row) -> Session:
        """Convert a database row to a Session object."""
        return Session(
            id=row["id"],
            user_id=row["user_id"],
            expires_at=ensure_utc(datetime.fromisoformat(row["expires_at"])),
            created_at=ensure_utc(datetime.fromisoformat(row["created_at"])),
        )
