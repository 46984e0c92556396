"""
Unit tests for input canonicalization and validation.
"""

import pytest

from fineauth.core.errors import ValidationError
from fineauth.utils.identifiers import generate_session_id, generate_user_id, short_id
from fineauth.utils.validators import normalize_email, validate_credentials, validate_string_safe


class TestNormalizeEmail:

    @pytest.mark.parametrize("raw,expected", [
        (" User@Example.COM ", "user@example.com"),
        ("\tA@B.COM\n", "a@b.com"),
        ("already@lower.com", "already@lower.com"),
    ])
    def test_trim_and_lower(self, raw, expected):
        assert normalize_email(raw) == expected

    def test_non_string(self):
        with pytest.raises(ValidationError):
            normalize_email(None)


class TestValidateStringSafe:

    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            validate_string_safe("", field_name="email")

    def test_null_byte_rejected(self):
        with pytest.raises(ValidationError):
            validate_string_safe("a\x00b")

    def test_length_bounds(self):
        with pytest.raises(ValidationError):
            validate_string_safe("ab", min_length=3)
        with pytest.raises(ValidationError):
            validate_string_safe("abcd", max_length=3)
        assert validate_string_safe("abc", min_length=3, max_length=3) == "abc"

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_string_safe(42)


class TestValidateCredentials:

    def test_returns_canonical_email(self):
        assert validate_credentials("  Bob@X.io ", "pw") == ("bob@x.io", "pw")

    def test_blank_email(self):
        with pytest.raises(ValidationError):
            validate_credentials("   ", "pw")

    def test_empty_password(self):
        with pytest.raises(ValidationError):
            validate_credentials("bob@x.io", "")


class TestIdentifiers:

    def test_widths(self):
        assert len(generate_session_id()) == 64
        assert len(generate_user_id()) == 32
        int(generate_session_id(), 16)

    def test_unique(self):
        assert len({generate_session_id() for _ in range(100)}) == 100

    def test_short_id(self):
        assert short_id("abcdef0123456789") == "abcdef01..."
        assert short_id("abc") == "abc"
