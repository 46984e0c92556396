"""
fineauth Authentication Module
==============================

Provides email/password authentication with:
- Argon2id password hashing
- HMAC-SHA256 signed session tokens
- Session lifecycle with lazy expiry and revocation

Security Properties:
- Memory-hard password hashing
- Constant-time verification
- Identical errors for unknown email and wrong password
- Tampered tokens rejected before any storage access
"""

from fineauth.core.auth.argon2_auth import (
    Argon2Hasher,
    HashResult,
    hash_password,
    verify_password,
)
from fineauth.core.auth.auth_manager import AuthManager
from fineauth.core.auth.models import (
    AuthResult,
    PublicUser,
    Session,
    SessionValidation,
    User,
)
from fineauth.core.auth.session_token import (
    MIN_SECRET_LENGTH,
    check_secret_strength,
    sign_session_id,
    verify_session_token,
)

__all__ = [
    "Argon2Hasher",
    "HashResult",
    "hash_password",
    "verify_password",
    "AuthManager",
    "AuthResult",
    "PublicUser",
    "Session",
    "SessionValidation",
    "User",
    "MIN_SECRET_LENGTH",
    "check_secret_strength",
    "sign_session_id",
    "verify_session_token",
]
