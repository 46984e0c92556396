"""
Argon2id Password Hashing
=========================

Implements password hashing and verification using Argon2id.

Security Properties:
- Memory-hard (resistant to GPU/ASIC attacks)
- Time-hard (configurable iterations)
- Fresh 128-bit random salt per password
- Constant-time verification
- verify() never raises: malformed input is just a mismatch

Storage Format:
    <salt hex>:<derived key hex>

    Hex never contains ":", so the split is unambiguous. The derived key
    length is recovered from the stored key, so hashes created with a
    different hash_length still verify.

Parameters (RFC 9106 second recommended option):
- memory_cost: 65536 KiB (64 MB)
- time_cost: 3 iterations
- parallelism: 4 lanes

References:
- RFC 9106: Argon2 Memory-Hard Function
- OWASP Password Storage Cheat Sheet
"""

from __future__ import annotations

import hmac
import secrets
from dataclasses import dataclass
from typing import Final, Optional

from argon2.low_level import Type, hash_secret_raw

# Argon2id parameters
ARGON2_MEMORY_COST: Final[int] = 65536  # 64 MB in KiB
ARGON2_TIME_COST: Final[int] = 3  # iterations
ARGON2_PARALLELISM: Final[int] = 4  # lanes
ARGON2_HASH_LENGTH: Final[int] = 64  # 512 bits
ARGON2_SALT_LENGTH: Final[int] = 16  # 128 bits

# Floors (OWASP minimum configuration: m=19 MiB, t=2, p=1)
MIN_MEMORY_COST: Final[int] = 19456
MIN_TIME_COST: Final[int] = 2

HASH_DELIMITER: Final[str] = ":"


@dataclass(frozen=True, slots=True)
class HashResult:
    """
    Immutable result of password hashing.

    Attributes:
        hash: The derived key bytes
        salt: Random salt used
        encoded: ``salt:key`` hex string for storage
    """
    hash: bytes
    salt: bytes
    encoded: str

    def __repr__(self) -> str:
        """Safe representation without exposing hash."""
        return f"HashResult(encoded_len={len(self.encoded)})"


class Argon2Hasher:
    """
    Argon2id password hasher with secure defaults.

    Usage:
        hasher = Argon2Hasher()

        # Hash a password
        encoded = hasher.hash("user_password").encoded
        store(encoded)

        # Verify a password
        is_valid = hasher.verify("user_password", encoded)
    """

    __slots__ = (
        "_memory_cost", "_time_cost", "_parallelism",
        "_hash_length", "_salt_length",
    )

    def __init__(
        self,
        memory_cost: int = ARGON2_MEMORY_COST,
        time_cost: int = ARGON2_TIME_COST,
        parallelism: int = ARGON2_PARALLELISM,
        hash_length: int = ARGON2_HASH_LENGTH,
        salt_length: int = ARGON2_SALT_LENGTH,
    ) -> None:
        """
        Initialize the Argon2id hasher.

        Args:
            memory_cost: Memory usage in KiB (default: 65536 = 64MB)
            time_cost: Number of iterations (default: 3)
            parallelism: Degree of parallelism (default: 4)
            hash_length: Output key length in bytes (default: 64)
            salt_length: Salt length in bytes (default: 16)

        Raises:
            ValueError: If a parameter is below its security floor
        """
        if memory_cost < MIN_MEMORY_COST:
            raise ValueError(f"memory_cost must be at least {MIN_MEMORY_COST} KiB")
        if time_cost < MIN_TIME_COST:
            raise ValueError(f"time_cost must be at least {MIN_TIME_COST}")
        if parallelism < 1:
            raise ValueError("parallelism must be at least 1")
        if hash_length < 16:
            raise ValueError("hash_length must be at least 16 bytes")
        if salt_length < 8:
            raise ValueError("salt_length must be at least 8 bytes")

        self._memory_cost = memory_cost
        self._time_cost = time_cost
        self._parallelism = parallelism
        self._hash_length = hash_length
        self._salt_length = salt_length

    @property
    def parameters(self) -> dict[str, int]:
        """Get current hashing parameters."""
        return {
            "memory_cost": self._memory_cost,
            "time_cost": self._time_cost,
            "parallelism": self._parallelism,
            "hash_length": self._hash_length,
            "salt_length": self._salt_length,
        }

    def _derive(self, password: str, salt: bytes, length: int) -> bytes:
        return hash_secret_raw(
            secret=password.encode("utf-8"),
            salt=salt,
            time_cost=self._time_cost,
            memory_cost=self._memory_cost,
            parallelism=self._parallelism,
            hash_len=length,
            type=Type.ID,
        )

    def hash(self, password: str, salt: Optional[bytes] = None) -> HashResult:
        """
        Hash a password using Argon2id.

        Args:
            password: The password to hash
            salt: Optional salt (random if not provided)

        Returns:
            HashResult with key, salt, and encoded string

        Raises:
            ValueError: If password is empty
            argon2.exceptions.HashingError: If the KDF fails
        """
        if not password:
            raise ValueError("Password cannot be empty")

        if salt is None:
            salt = secrets.token_bytes(self._salt_length)

        key = self._derive(password, salt, self._hash_length)
        return HashResult(
            hash=key,
            salt=salt,
            encoded=f"{salt.hex()}{HASH_DELIMITER}{key.hex()}",
        )

    def verify(self, password: str, encoded: str) -> bool:
        """
        Verify a password against an encoded hash.

        Args:
            password: The password to verify
            encoded: The encoded hash string from storage

        Returns:
            True if password matches, False otherwise (including any
            malformed input or KDF fault)
        """
        try:
            parts = encoded.split(HASH_DELIMITER)
            if len(parts) != 2 or not parts[0] or not parts[1]:
                return False

            salt = bytes.fromhex(parts[0])
            stored_key = bytes.fromhex(parts[1])
            if not password or len(salt) < 8 or len(stored_key) < 4:
                return False

            derived = self._derive(password, salt, len(stored_key))
            return hmac.compare_digest(derived, stored_key)

        except Exception:
            return False


# Convenience functions
_default_hasher: Optional[Argon2Hasher] = None


def _get_hasher() -> Argon2Hasher:
    """Get or create default hasher instance."""
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = Argon2Hasher()
    return _default_hasher


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id with secure defaults.

    Returns:
        Encoded hash string for storage
    """
    return _get_hasher().hash(password).encoded


def verify_password(password: str, encoded: str) -> bool:
    """
    Verify a password against a stored hash.

    Returns:
        True if password matches, False otherwise
    """
    return _get_hasher().verify(password, encoded)
