"""
Synapse API — Security Helper Tests
=====================================

Tests for bcrypt hashing and JWT access/refresh token handling.
"""

from datetime import timedelta

import jwt

from synapse.config import settings
from synapse.security import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    _create_token,
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
    get_token_from_header,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_is_not_plain_text(self):
        hashed = hash_password("Str0ng@Pass")
        assert hashed != "Str0ng@Pass"
        assert hashed.startswith("$2")

    def test_verify_accepts_correct_password(self):
        hashed = hash_password("Str0ng@Pass")
        assert verify_password("Str0ng@Pass", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("Str0ng@Pass")
        assert verify_password("Wr0ng@Pass", hashed) is False

    def test_verify_without_hash(self):
        assert verify_password("Str0ng@Pass", None) is False

    def test_verify_with_malformed_hash(self):
        assert verify_password("Str0ng@Pass", "not-a-bcrypt-hash") is False

    def test_same_password_gets_different_salts(self):
        assert hash_password("Str0ng@Pass") != hash_password("Str0ng@Pass")


class TestTokens:
    def test_access_token_round_trip(self):
        token = create_access_token("user-1", "a@example.com")
        payload = decode_token(token, ACCESS_TOKEN)
        assert payload["sub"] == "user-1"
        assert payload["email"] == "a@example.com"
        assert payload["type"] == ACCESS_TOKEN

    def test_refresh_token_is_not_an_access_token(self):
        token = create_refresh_token("user-1", "a@example.com")
        assert decode_token(token, ACCESS_TOKEN) is None
        assert decode_token(token, REFRESH_TOKEN)["sub"] == "user-1"

    def test_access_token_is_not_a_refresh_token(self):
        token = create_access_token("user-1", "a@example.com")
        assert decode_token(token, REFRESH_TOKEN) is None

    def test_token_pair_keys(self):
        pair = create_token_pair("user-1", "a@example.com")
        assert set(pair) == {"access_token", "refresh_token"}

    def test_expired_token(self):
        token = _create_token("user-1", "a@example.com", ACCESS_TOKEN, timedelta(seconds=-5))
        assert decode_token(token) is None

    def test_wrong_signature(self):
        token = jwt.encode(
            {"sub": "user-1", "type": ACCESS_TOKEN, "exp": 9999999999},
            "another-secret",
            algorithm=settings.jwt_algorithm,
        )
        assert decode_token(token) is None

    def test_missing_subject(self):
        token = jwt.encode(
            {"type": ACCESS_TOKEN, "exp": 9999999999},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_token(token) is None

    def test_garbage(self):
        assert decode_token("not.a.token") is None


class TestBearerHeader:
    def test_extracts_token(self):
        assert get_token_from_header("Bearer abc") == "abc"

    def test_scheme_is_case_insensitive(self):
        assert get_token_from_header("bearer abc") == "abc"

    def test_rejects_other_schemes(self):
        assert get_token_from_header("Basic abc") is None

    def test_rejects_missing_or_malformed(self):
        assert get_token_from_header(None) is None
        assert get_token_from_header("") is None
        assert get_token_from_header("Bearer") is None
        assert get_token_from_header("Bearer a b") is None
