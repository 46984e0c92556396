"""
Error Types
===========

Exception hierarchy shared by the hasher, token codec, storage backends
and the session lifecycle manager.

Every error carries a stable machine-readable ``code`` so that transport
layers can map it without string matching.

Notes:
- Sign-in failures always raise InvalidCredentialsError with the same
  message, whether the email is unknown or the password is wrong.
- Bad or expired tokens are not errors for validate_session(); only
  require_session() raises InvalidSessionError.
"""

from __future__ import annotations


class FineAuthError(Exception):
    """Base exception for all fineauth errors."""

    code: str = "FINEAUTH_ERROR"
    default_message: str = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ConfigurationError(FineAuthError):
    """Raised when configuration is invalid. Fatal at construction time."""

    code = "CONFIGURATION_ERROR"
    default_message = "Invalid configuration"


class InvalidCredentialsError(FineAuthError):
    """Raised when email/password credentials do not match a user."""

    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class UserAlreadyExistsError(FineAuthError):
    """Raised when signing up with an email that is already registered."""

    code = "USER_ALREADY_EXISTS"
    default_message = "A user with this email already exists"


class InvalidSessionError(FineAuthError):
    """Raised by require_session() when a token does not map to a live session."""

    code = "INVALID_SESSION"
    default_message = "Invalid or expired session"


class StorageError(FineAuthError):
    """Raised when a storage backend returns an unusable result."""

    code = "STORAGE_ERROR"
    default_message = "Storage operation failed"


class ValidationError(FineAuthError, ValueError):
    """Raised when caller input fails validation."""

    code = "VALIDATION_ERROR"
    default_message = "Invalid input"
