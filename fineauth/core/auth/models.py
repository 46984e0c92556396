"""
Auth Data Model
===============

Records exchanged between the lifecycle manager and storage backends.

User.password_hash never leaves the core: every public operation returns
PublicUser instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass
class User:
    """
    User account representation.

    Note: password_hash is never exposed in repr or str.
    """
    id: str
    email: str
    password_hash: str
    created_at: datetime

    def __repr__(self) -> str:
        """Safe representation without password hash."""
        return f"User(id={self.id!r}, email={self.email!r})"

    def to_public(self) -> PublicUser:
        """Strip the credential hash."""
        return PublicUser(id=self.id, email=self.email, created_at=self.created_at)


@dataclass(frozen=True)
class PublicUser:
    """User as returned to callers."""
    id: str
    email: str
    created_at: datetime


@dataclass
class Session:
    """
    Authenticated session.

    Possession of a valid signed token for this id grants the identity of
    user_id until expires_at or revocation.
    """
    id: str
    user_id: str
    expires_at: datetime
    created_at: datetime

    def __repr__(self) -> str:
        """Safe representation without the full session id."""
        return (
            f"Session(id={self.id[:8]!r}..., user_id={self.user_id!r}, "
            f"expires_at={self.expires_at.isoformat()})"
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if the session has expired."""
        return (now or datetime.now(timezone.utc)) > self.expires_at


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful sign-up or sign-in."""
    user: PublicUser
    session: Session
    token: str

    def __repr__(self) -> str:
        return f"AuthResult(user={self.user!r}, session={self.session!r})"


@dataclass(frozen=True)
class SessionValidation:
    """Outcome of a successful session validation."""
    user: PublicUser
    session: Session
