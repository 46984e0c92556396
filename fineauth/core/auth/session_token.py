"""
Session Token Codec
===================

Stateless signing of opaque session ids.

Wire format::

    <session id>.<base64url(HMAC-SHA256(secret, session id)), no padding>

The signature binds a session id to the server secret, so clients can
neither forge nor enumerate valid ids. Verification is O(1) and needs no
storage round-trip, which makes it a cheap first reject before the
authoritative session lookup.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Final, Optional

TOKEN_DELIMITER: Final[str] = "."
MIN_SECRET_LENGTH: Final[int] = 32


def _signature(session_id: str, secret: str) -> str:
    digest = hmac.new(
        secret.encode("utf-8"),
        session_id.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def sign_session_id(session_id: str, secret: str) -> str:
    """
    Produce a signed token for a session id.

    Deterministic: the same (session_id, secret) always yields the same token.

    Args:
        session_id: Raw session id (must not contain ".")
        secret: Server signing secret

    Returns:
        ``session_id + "." + signature``
    """
    if not session_id or TOKEN_DELIMITER in session_id:
        raise ValueError("session_id must be non-empty and must not contain '.'")
    if not secret:
        raise ValueError("secret cannot be empty")
    return f"{session_id}{TOKEN_DELIMITER}{_signature(session_id, secret)}"


def verify_session_token(token: str, secret: str) -> Optional[str]:
    """
    Verify a signed token and extract its session id.

    Args:
        token: Token as produced by sign_session_id()
        secret: Server signing secret

    Returns:
        The raw session id, or None for any malformed, tampered or
        foreign-key token
    """
    if not isinstance(token, str) or not isinstance(secret, str) or not secret:
        return None

    # Tokens are ASCII on the wire
    if not token.isascii():
        return None

    parts = token.split(TOKEN_DELIMITER)
    if len(parts) != 2:
        return None

    session_id, provided = parts
    if not session_id or not provided:
        return None

    expected = _signature(session_id, secret)

    # Length is carried by the token itself, so rejecting early leaks nothing
    if len(provided) != len(expected):
        return None

    if not hmac.compare_digest(provided.encode("ascii"), expected.encode("ascii")):
        return None

    return session_id


def check_secret_strength(secret: str) -> bool:
    """Return True if the signing secret meets the minimum length."""
    return len(secret) >= MIN_SECRET_LENGTH
