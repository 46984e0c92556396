"""
Utils module - Utility functions and helpers.

This module contains utility functions used throughout fineauth.
"""

from fineauth.utils.duration import parse_duration
from fineauth.utils.identifiers import generate_session_id, generate_user_id
from fineauth.utils.validators import (
    ValidationError,
    normalize_email,
    validate_credentials,
    validate_string_safe,
)

__all__ = [
    "parse_duration",
    "generate_session_id",
    "generate_user_id",
    "ValidationError",
    "normalize_email",
    "validate_credentials",
    "validate_string_safe",
]
