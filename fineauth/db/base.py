"""
Storage Contract
================

The narrow interface the auth core requires of any persistence backend.

Contract Notes:
- Emails arrive already canonical (trimmed, lower-cased).
- Backends generate user ids locally (generate_user_id()); session ids
  are minted by the core and passed in.
- delete_session / delete_user_sessions are idempotent.
- prepare() is idempotent and must be safe to call repeatedly.
- Backends that enforce email uniqueness raise UserAlreadyExistsError
  when the constraint fires. The core's own pre-check is advisory only.
- Driver faults propagate unchanged; nothing is retried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from fineauth.core.auth.models import Session, User


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes returned by drivers."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StorageAdapter(ABC):
    """Interface every storage backend implements."""

    # User operations

    @abstractmethod
    def create_user(self, email: str, password_hash: str) -> User:
        """
        Insert a user.

        Raises:
            UserAlreadyExistsError: If the backend's uniqueness constraint fires
        """

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Look up a user by canonical email."""

    @abstractmethod
    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Look up a user by id."""

    # Session operations

    @abstractmethod
    def create_session(self, session_id: str, user_id: str, expires_at: datetime) -> Session:
        """Insert a session."""

    @abstractmethod
    def get_session(self, session_id: str) -> Optional[Session]:
        """Look up a session by id."""

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        """Delete a session. Missing ids are not an error."""

    @abstractmethod
    def delete_user_sessions(self, user_id: str) -> None:
        """Delete every session owned by a user. Zero matches is not an error."""

    # Readiness

    @abstractmethod
    def prepare(self) -> None:
        """Create schema/indexes. Idempotent."""
