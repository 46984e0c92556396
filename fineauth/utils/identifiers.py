"""
Identifier Generation
=====================

Opaque, unguessable identifiers drawn from the OS CSPRNG.
Uniqueness is never checked here; storage primary keys enforce it.
"""

from __future__ import annotations

import secrets
from typing import Final

SESSION_ID_BYTES: Final[int] = 32  # 64 hex chars
USER_ID_BYTES: Final[int] = 16  # 32 hex chars


def generate_session_id() -> str:
    """Generate a session id (256 bits, hex encoded)."""
    return secrets.token_hex(SESSION_ID_BYTES)


def generate_user_id() -> str:
    """Generate a user id (128 bits, hex encoded)."""
    return secrets.token_hex(USER_ID_BYTES)


def short_id(value: str, length: int = 8) -> str:
    """Truncated identifier for log lines."""
    return f"{value[:length]}..." if len(value) > length else value
