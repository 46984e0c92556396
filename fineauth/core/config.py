"""
Auth Configuration Module
=========================

Immutable, explicitly injected configuration for the auth core.

Security Features:
- Immutable configuration after initialization
- Validation at construction time, never at call time
- Environment variable override support for non-sensitive keys only
- Signing secret is never read from the environment and never printed
- Weak signing secrets raise a SecurityWarning (non-fatal)
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, Optional

from fineauth.core.auth.argon2_auth import (
    ARGON2_HASH_LENGTH,
    ARGON2_MEMORY_COST,
    ARGON2_PARALLELISM,
    ARGON2_SALT_LENGTH,
    ARGON2_TIME_COST,
    Argon2Hasher,
)
from fineauth.core.auth.session_token import MIN_SECRET_LENGTH, check_secret_strength
from fineauth.core.errors import ConfigurationError
from fineauth.utils.duration import parse_duration

if TYPE_CHECKING:
    from fineauth.db.base import StorageAdapter


DEFAULT_SESSION_EXPIRES_IN: Final[str] = "7d"

# Security Constants
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "api_key",
    "private", "credential", "salt",
})

_log = logging.getLogger("fineauth.config")


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


class SecurityWarning(UserWarning):
    """Warning for security-related configuration issues."""
    pass


@dataclass(frozen=True, slots=True)
class MethodConfig:
    """Enabled authentication methods."""

    email: bool = False

    @property
    def any_enabled(self) -> bool:
        return self.email


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session lifetime configuration."""

    expires_in: int | str = DEFAULT_SESSION_EXPIRES_IN
    _ttl_ms: int = field(init=False, repr=False, compare=False, default=0)

    def __post_init__(self) -> None:
        """Parse the duration now so bad literals fail at construction."""
        ttl_ms = parse_duration(self.expires_in)

        # Session expiry (now + ttl) must stay a representable datetime
        try:
            datetime.now(timezone.utc) + timedelta(milliseconds=ttl_ms)
        except OverflowError as e:
            raise ConfigurationError(f"Session lifetime too large: {self.expires_in!r}") from e

        object.__setattr__(self, "_ttl_ms", ttl_ms)

    @property
    def ttl_ms(self) -> int:
        """Session lifetime in milliseconds."""
        return self._ttl_ms

    @property
    def ttl(self) -> timedelta:
        """Session lifetime as a timedelta."""
        return timedelta(milliseconds=self._ttl_ms)


@dataclass(frozen=True, slots=True)
class HasherConfig:
    """Argon2id cost parameters."""

    memory_cost: int = ARGON2_MEMORY_COST
    time_cost: int = ARGON2_TIME_COST
    parallelism: int = ARGON2_PARALLELISM
    hash_length: int = ARGON2_HASH_LENGTH
    salt_length: int = ARGON2_SALT_LENGTH

    def __post_init__(self) -> None:
        """Validate hashing parameters against the hasher's floors."""
        self.build_hasher()

    def build_hasher(self) -> Argon2Hasher:
        try:
            return Argon2Hasher(
                memory_cost=self.memory_cost,
                time_cost=self.time_cost,
                parallelism=self.parallelism,
                hash_length=self.hash_length,
                salt_length=self.salt_length,
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "INFO"
    enable_console: bool = True
    enable_json: bool = False
    log_dir: Optional[Path] = None
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate logging settings."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ConfigurationError(f"Invalid log level: {self.level}")


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """
    Complete configuration handed to AuthManager.

    Usage:
        config = AuthConfig(
            secret=os.environ["AUTH_SECRET"],
            storage=create_storage(StorageType.MEMORY),
            methods=MethodConfig(email=True),
            session=SessionConfig(expires_in="7d"),
        )
        auth = AuthManager(config)
    """

    secret: str = field(repr=False)
    storage: Optional[StorageAdapter] = field(default=None, repr=False)
    methods: MethodConfig = field(default_factory=MethodConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    hasher: HasherConfig = field(default_factory=HasherConfig)
    logging: Optional[LoggingConfig] = None

    def __post_init__(self) -> None:
        """Validate and enforce security rules."""
        if not isinstance(self.secret, str) or not self.secret:
            raise ConfigurationError("secret is required")

        if self.storage is None:
            raise ConfigurationError("storage is required")

        if not self.methods.any_enabled:
            raise ConfigurationError("At least one auth method must be enabled")

        if not check_secret_strength(self.secret):
            _log.warning(
                "Signing secret is shorter than %d characters", MIN_SECRET_LENGTH
            )
            warnings.warn(
                f"Signing secret is shorter than {MIN_SECRET_LENGTH} characters. "
                "Use a long random value in production.",
                SecurityWarning,
                stacklevel=3,
            )

    @classmethod
    def load(
        cls,
        secret: str,
        storage: StorageAdapter,
        env_prefix: str = "FINEAUTH",
    ) -> AuthConfig:
        """
        Build configuration with environment variable overrides.

        Environment variables use the prefix and double underscores for
        nested values. Sensitive keys are ignored, so the secret always
        comes from the caller.

        Examples:
            FINEAUTH_METHODS__EMAIL=true
            FINEAUTH_SESSION__EXPIRES_IN=12h
            FINEAUTH_HASHER__TIME_COST=4
            FINEAUTH_LOGGING__LEVEL=DEBUG

        Returns:
            Configured AuthConfig instance

        Raises:
            ConfigurationError: On any invalid value
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        methods_kwargs: dict[str, Any] = {"email": True}
        if "methods.email" in env_overrides:
            methods_kwargs["email"] = _parse_bool(env_overrides["methods.email"])

        session_kwargs: dict[str, Any] = {}
        if "session.expires_in" in env_overrides:
            raw = env_overrides["session.expires_in"].strip()
            session_kwargs["expires_in"] = int(raw) if raw.isascii() and raw.isdigit() else raw

        hasher_kwargs: dict[str, Any] = {}
        for name in ("memory_cost", "time_cost", "parallelism"):
            env_key = f"hasher.{name}"
            if env_key in env_overrides:
                try:
                    hasher_kwargs[name] = int(env_overrides[env_key])
                except ValueError as e:
                    raise ConfigurationError(f"Invalid integer for {env_key}") from e

        logging_config: Optional[LoggingConfig] = None
        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"]
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = _parse_bool(env_overrides["logging.enable_console"])
        if "logging.enable_json" in env_overrides:
            logging_kwargs["enable_json"] = _parse_bool(env_overrides["logging.enable_json"])
        if "logging.log_dir" in env_overrides:
            logging_kwargs["log_dir"] = Path(env_overrides["logging.log_dir"])
        if logging_kwargs:
            logging_config = LoggingConfig(**logging_kwargs)

        return cls(
            secret=secret,
            storage=storage,
            methods=MethodConfig(**methods_kwargs),
            session=SessionConfig(**session_kwargs),
            hasher=HasherConfig(**hasher_kwargs),
            logging=logging_config,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # FINEAUTH_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                # SECURITY: Skip sensitive keys from environment
                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides
