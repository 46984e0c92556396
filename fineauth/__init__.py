"""
fineauth - Email/Password Authentication Core
=============================================

Password hashing, signed session tokens and the session lifecycle,
independent of any web framework or storage engine.

Security Notice:
- No secrets, passwords or tokens are logged
- Configuration is validated at construction
- Bad tokens fail closed (validate_session returns None)
"""

from fineauth.core.auth import (
    AuthManager,
    AuthResult,
    PublicUser,
    Session,
    SessionValidation,
    User,
    sign_session_id,
    verify_session_token,
)
from fineauth.core.config import (
    AuthConfig,
    HasherConfig,
    LoggingConfig,
    MethodConfig,
    SecurityWarning,
    SessionConfig,
)
from fineauth.core.errors import (
    ConfigurationError,
    FineAuthError,
    InvalidCredentialsError,
    InvalidSessionError,
    StorageError,
    UserAlreadyExistsError,
    ValidationError,
)
from fineauth.core.logging import configure_logging, get_secure_logger
from fineauth.db import StorageAdapter, StorageType, create_storage

__version__ = "0.1.0"

__all__ = [
    "AuthManager",
    "AuthResult",
    "PublicUser",
    "Session",
    "SessionValidation",
    "User",
    "sign_session_id",
    "verify_session_token",
    "AuthConfig",
    "HasherConfig",
    "LoggingConfig",
    "MethodConfig",
    "SecurityWarning",
    "SessionConfig",
    "ConfigurationError",
    "FineAuthError",
    "InvalidCredentialsError",
    "InvalidSessionError",
    "StorageError",
    "UserAlreadyExistsError",
    "ValidationError",
    "configure_logging",
    "get_secure_logger",
    "StorageAdapter",
    "StorageType",
    "create_storage",
    "__version__",
]
