"""
In-memory storage backend for development and testing.

Data lives in dicts and is lost when the process exits.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from fineauth.core.auth.models import Session, User
from fineauth.core.errors import UserAlreadyExistsError
from fineauth.db.base import StorageAdapter, ensure_utc
from fineauth.utils.identifiers import generate_user_id


class MemoryStorage(StorageAdapter):
    """Thread-safe dict-backed storage."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[str, User] = {}
        self._email_index: Dict[str, str] = {}  # email -> user_id
        self._sessions: Dict[str, Session] = {}

    def create_user(self, email: str, password_hash: str) -> User:
        with self._lock:
            if email in self._email_index:
                raise UserAlreadyExistsError()

            user = User(
                id=generate_user_id(),
                email=email,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
            self._users[user.id] = user
            self._email_index[email] = user.id
            return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._email_index.get(email)
            return self._users.get(user_id) if user_id else None

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def delete_user(self, user_id: str) -> None:
        """Remove a user. Their sessions are left behind, as orphans."""
        with self._lock:
            user = self._users.pop(user_id, None)
            if user is not None:
                self._email_index.pop(user.email, None)

    def create_session(self, session_id: str, user_id: str, expires_at: datetime) -> Session:
        session = Session(
            id=session_id,
            user_id=user_id,
            expires_at=ensure_utc(expires_at),
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def delete_user_sessions(self, user_id: str) -> None:
        with self._lock:
            doomed = [sid for sid, s in self._sessions.items() if s.user_id == user_id]
            for session_id in doomed:
                del self._sessions[session_id]

    def prepare(self) -> None:
        # Nothing to create
        pass
