"""
Validation Utilities
====================

Input canonicalization and validation with a security focus.
"""

from __future__ import annotations

from fineauth.core.errors import ValidationError

MAX_EMAIL_LENGTH = 320
MAX_PASSWORD_LENGTH = 1024


def normalize_email(email: str) -> str:
    """
    Canonicalize an email address: trim surrounding whitespace, lower-case.

    Every lookup, uniqueness check and insert goes through this form.

    Raises:
        ValidationError: If email is not a string
    """
    if not isinstance(email, str):
        raise ValidationError("email must be a string")
    return email.strip().lower()


def validate_string_safe(
    value: str,
    min_length: int = 0,
    max_length: int = 1000,
    allow_empty: bool = False,
    field_name: str = "value",
) -> str:
    """
    Validate a string value for safety.

    Args:
        value: The string to validate
        min_length: Minimum allowed length
        max_length: Maximum allowed length
        allow_empty: If False, empty strings are rejected
        field_name: Name of the field for error messages

    Returns:
        Validated string

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    if not allow_empty and not value:
        raise ValidationError(f"{field_name} cannot be empty")

    if len(value) < min_length:
        raise ValidationError(
            f"{field_name} must be at least {min_length} characters"
        )

    if len(value) > max_length:
        raise ValidationError(
            f"{field_name} must be at most {max_length} characters"
        )

    # Null bytes break C-level drivers and KDF bindings
    if "\x00" in value:
        raise ValidationError(f"{field_name} contains invalid characters")

    return value


def validate_credentials(email: str, password: str) -> tuple[str, str]:
    """
    Canonicalize and validate a sign-up email/password pair.

    Returns:
        (canonical_email, password)
    """
    canonical = validate_string_safe(
        normalize_email(email),
        max_length=MAX_EMAIL_LENGTH,
        field_name="email",
    )
    validate_string_safe(password, max_length=MAX_PASSWORD_LENGTH, field_name="password")
    return canonical, password
