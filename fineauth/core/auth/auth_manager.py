"""
Session Lifecycle
=================

Email/password sign-up and sign-in, and the session lifecycle built on
the hasher, the token codec and a storage backend.

Session states: nonexistent -> active -> (expired | revoked). Expired and
revoked sessions look identical to callers.

Validation is two-phase:
1. verify_session_token(): stateless signature check, no storage access
2. lookup_session(): authoritative storage lookup with lazy expiry

Concurrency Notes:
- No locks are taken here. The duplicate-email check in sign_up() is a
  fast path only; the storage backend's uniqueness constraint decides
  races between concurrent sign-ups.
- sign_out_all() only removes sessions visible when it runs; a sign-in
  racing it may survive.
- Expiry is enforced only on read. There is no background sweep.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

from fineauth.core.auth.models import AuthResult, SessionValidation, User
from fineauth.core.auth.session_token import sign_session_id, verify_session_token
from fineauth.core.errors import (
    InvalidCredentialsError,
    InvalidSessionError,
    UserAlreadyExistsError,
)
from fineauth.core.logging import configure_logging
from fineauth.utils.identifiers import generate_session_id, short_id
from fineauth.utils.validators import normalize_email, validate_credentials

if TYPE_CHECKING:
    from fineauth.core.config import AuthConfig
    from fineauth.db.base import StorageAdapter


class AuthManager:
    """
    Email/password authentication with signed session tokens.

    Usage:
        auth = AuthManager(AuthConfig(
            secret=SECRET,
            storage=create_storage(StorageType.MEMORY),
            methods=MethodConfig(email=True),
        ))
        auth.prepare()

        result = auth.sign_up("alice@example.com", "correct horse")
        send_to_client(result.token)

        validation = auth.validate_session(token_from_client)
        if validation is None:
            ...  # not authenticated

        auth.sign_out(token_from_client)
    """

    __slots__ = ("_secret", "_storage", "_hasher", "_ttl", "_log")

    def __init__(self, config: AuthConfig) -> None:
        """
        Args:
            config: Validated configuration (see AuthConfig)
        """
        self._secret = config.secret
        self._storage: StorageAdapter = config.storage
        self._hasher = config.hasher.build_hasher()
        self._ttl = config.session.ttl
        self._log = logging.getLogger("fineauth.auth")

        if config.logging is not None:
            configure_logging(config.logging)

    @property
    def storage(self) -> StorageAdapter:
        return self._storage

    @property
    def session_ttl(self) -> timedelta:
        return self._ttl

    def prepare(self) -> None:
        """Make the storage backend ready (idempotent)."""
        self._storage.prepare()

    # Sign-up / sign-in

    def sign_up(self, email: str, password: str) -> AuthResult:
        """
        Register a user and open their first session.

        Raises:
            ValidationError: Empty email or password
            UserAlreadyExistsError: Canonical email already registered
        """
        canonical, password = validate_credentials(email, password)

        if self._storage.get_user_by_email(canonical) is not None:
            raise UserAlreadyExistsError()

        password_hash = self._hasher.hash(password).encoded
        user = self._storage.create_user(canonical, password_hash)
        self._log.info("User %s signed up", short_id(user.id))

        return self._open_session(user)

    def sign_in(self, email: str, password: str) -> AuthResult:
        """
        Authenticate and open a new session. Existing sessions stay valid.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        canonical = normalize_email(email)
        user = self._storage.get_user_by_email(canonical)

        if user is None:
            # Pay the KDF cost anyway so unknown emails are not faster
            self._hasher.verify(password, _DUMMY_HASH)
            self._log.info("Sign-in failed")
            raise InvalidCredentialsError()

        if not self._hasher.verify(password, user.password_hash):
            self._log.info("Sign-in failed for user %s", short_id(user.id))
            raise InvalidCredentialsError()

        self._log.info("User %s signed in", short_id(user.id))
        return self._open_session(user)

    def _open_session(self, user: User) -> AuthResult:
        session_id = generate_session_id()
        expires_at = datetime.now(timezone.utc) + self._ttl
        session = self._storage.create_session(session_id, user.id, expires_at)

        return AuthResult(
            user=user.to_public(),
            session=session,
            token=sign_session_id(session.id, self._secret),
        )

    # Validation

    def validate_session(self, token: str) -> Optional[SessionValidation]:
        """
        Resolve a signed token to its user and session.

        Returns:
            SessionValidation, or None if the token is malformed, tampered,
            unknown, expired or orphaned
        """
        session_id = verify_session_token(token, self._secret)
        if session_id is None:
            return None
        return self.lookup_session(session_id)

    def lookup_session(self, session_id: str) -> Optional[SessionValidation]:
        """
        Authoritative lookup of a raw (already verified) session id.

        Expired and orphaned sessions are deleted as a side effect.
        """
        session = self._storage.get_session(session_id)
        if session is None:
            return None

        if session.is_expired():
            self._storage.delete_session(session.id)
            self._log.debug("Session %s expired and was removed", short_id(session.id))
            return None

        user = self._storage.get_user_by_id(session.user_id)
        if user is None:
            self._storage.delete_session(session.id)
            self._log.warning("Orphaned session %s removed", short_id(session.id))
            return None

        return SessionValidation(user=user.to_public(), session=session)

    def require_session(self, token: str) -> SessionValidation:
        """
        Like validate_session(), but raise instead of returning None.

        Raises:
            InvalidSessionError: If the token does not map to a live session
        """
        validation = self.validate_session(token)
        if validation is None:
            raise InvalidSessionError()
        return validation

    # Revocation

    def sign_out(self, token_or_session_id: str) -> None:
        """
        Revoke one session. Accepts a signed token or a raw session id.

        Unknown sessions are ignored.
        """
        session_id = verify_session_token(token_or_session_id, self._secret)
        if session_id is None:
            session_id = token_or_session_id

        self._storage.delete_session(session_id)
        self._log.info("Session %s signed out", short_id(session_id))

    def sign_out_all(self, user_id: str) -> None:
        """Revoke every session of a user. Zero sessions is not an error."""
        self._storage.delete_user_sessions(user_id)
        self._log.info("All sessions revoked for user %s", short_id(user_id))


# Well-formed hash that no password matches (all-zero key)
_DUMMY_HASH = f"{'00' * 16}:{'00' * 64}"
