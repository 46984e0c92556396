"""
Unit tests for the session token codec.
"""

import base64
import hashlib
import hmac

import pytest

from fineauth.core.auth.session_token import (
    MIN_SECRET_LENGTH,
    check_secret_strength,
    sign_session_id,
    verify_session_token,
)
from fineauth.utils.identifiers import generate_session_id

SECRET = "test-secret-123"


class TestSign:
    """sign_session_id() format."""

    def test_token_format(self):
        session_id = generate_session_id()
        token = sign_session_id(session_id, SECRET)

        raw_id, signature = token.split(".")
        assert raw_id == session_id
        assert "=" not in signature
        assert "+" not in signature and "/" not in signature

    def test_signature_is_hmac_sha256_base64url(self):
        expected = base64.urlsafe_b64encode(
            hmac.new(SECRET.encode(), b"abc123", hashlib.sha256).digest()
        ).decode().rstrip("=")

        assert sign_session_id("abc123", SECRET) == f"abc123.{expected}"

    def test_deterministic(self):
        session_id = generate_session_id()
        assert sign_session_id(session_id, SECRET) == sign_session_id(session_id, SECRET)

    @pytest.mark.parametrize("session_id", ["", "has.dot"])
    def test_rejects_bad_session_id(self, session_id):
        with pytest.raises(ValueError):
            sign_session_id(session_id, SECRET)

    def test_rejects_empty_secret(self):
        with pytest.raises(ValueError):
            sign_session_id("abc", "")


class TestVerify:
    """verify_session_token() outcomes."""

    def test_round_trip(self):
        session_id = generate_session_id()
        token = sign_session_id(session_id, SECRET)

        assert token != session_id
        assert verify_session_token(token, SECRET) == session_id

    def test_wrong_secret(self):
        token = sign_session_id(generate_session_id(), SECRET)
        assert verify_session_token(token, "wrong-secret") is None

    def test_appended_character(self):
        token = sign_session_id(generate_session_id(), SECRET)
        assert verify_session_token(token + "a", SECRET) is None

    def test_every_single_character_mutation_is_rejected(self):
        token = sign_session_id("0123456789abcdef", SECRET)

        for index, char in enumerate(token):
            if char == ".":
                continue
            replacement = "A" if char != "A" else "B"
            mutated = token[:index] + replacement + token[index + 1:]
            assert verify_session_token(mutated, SECRET) is None, index

    def test_swapped_session_id(self):
        token = sign_session_id(generate_session_id(), SECRET)
        other_id = generate_session_id()
        forged = f"{other_id}.{token.split('.')[1]}"

        assert verify_session_token(forged, SECRET) is None

    @pytest.mark.parametrize("token", [
        "",
        "malformed-token-without-dot",
        ".",
        "abc.",
        ".abc",
        "a.b.c",
        "abc..def",
    ])
    def test_malformed(self, token):
        assert verify_session_token(token, SECRET) is None

    def test_non_ascii_signature(self):
        token = sign_session_id("abc", SECRET)
        raw_id, signature = token.split(".")
        mutated = f"{raw_id}.{'é' + signature[1:]}"

        assert verify_session_token(mutated, SECRET) is None

    @pytest.mark.parametrize("session_id", ["\ud800abc", "sessé", "☃"])
    def test_non_ascii_session_id(self, session_id):
        signature = sign_session_id("abc", SECRET).split(".")[1]
        assert verify_session_token(f"{session_id}.{signature}", SECRET) is None

    @pytest.mark.parametrize("token", [None, 123, b"abc.def"])
    def test_non_string(self, token):
        assert verify_session_token(token, SECRET) is None

    def test_empty_secret(self):
        token = sign_session_id("abc", SECRET)
        assert verify_session_token(token, "") is None


class TestSecretStrength:
    """check_secret_strength() threshold."""

    def test_threshold(self):
        assert MIN_SECRET_LENGTH == 32
        assert check_secret_strength("x" * 32) is True
        assert check_secret_strength("x" * 31) is False
