"""Unit tests for auth/tokens.py -- hashing, token generation, and header parsing.

Covers:
- hash_password() is plain SHA-256 hex and stable across calls
- verify_password() accepts the right plaintext and rejects anything else
- generate_token() yields distinct UUID strings
- parse_bearer_token() scheme matching and whitespace handling
- authenticate_user() case-insensitive username and uniform failure
"""

import uuid

import pytest

from auth.store import UserStore, default_users
from auth.tokens import (
    authenticate_user,
    generate_token,
    hash_password,
    parse_bearer_token,
    token_hint,
    verify_password,
)


class TestPasswordHashing:
    def test_known_digest(self) -> None:
        assert hash_password("password123") == "ef92b778bafe771e89245b89ecbc08a44a4e166c06659911881f383d4473e94f"

    def test_empty_password_digest(self) -> None:
        assert hash_password("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

    def test_deterministic(self) -> None:
        assert hash_password("adminpass") == hash_password("adminpass")

    def test_digest_is_lowercase_hex(self) -> None:
        digest = hash_password("anything")
        assert len(digest) == 64
        assert digest == digest.lower()
        int(digest, 16)

    def test_verify_password(self) -> None:
        stored = hash_password("adminpass")
        assert verify_password("adminpass", stored)
        assert not verify_password("AdminPass", stored)
        assert not verify_password("", stored)


class TestGenerateToken:
    def test_token_is_uuid(self) -> None:
        token = generate_token()
        assert str(uuid.UUID(token)) == token

    def test_tokens_are_unique(self) -> None:
        tokens = {generate_token() for _ in range(1000)}
        assert len(tokens) == 1000

    def test_token_hint_truncates(self) -> None:
        token = generate_token()
        hint = token_hint(token)
        assert hint == token[:8] + "..."
        assert token not in hint


class TestParseBearerToken:
    @pytest.mark.parametrize("header", [None, "", "Basic abc", "bearer abc", "BEARER abc", "Bearer", "Token abc"])
    def test_rejects_missing_or_other_schemes(self, header) -> None:
        assert parse_bearer_token(header) is None

    def test_extracts_token(self) -> None:
        assert parse_bearer_token("Bearer abc-123") == "abc-123"

    def test_strips_surrounding_whitespace(self) -> None:
        assert parse_bearer_token("Bearer   abc-123  ") == "abc-123"

    def test_empty_token_is_empty_string(self) -> None:
        assert parse_bearer_token("Bearer ") == ""


class TestAuthenticateUser:
    @pytest.fixture
    def store(self) -> UserStore:
        return UserStore(default_users())

    def test_valid_credentials(self, store: UserStore) -> None:
        user = authenticate_user(store, "ezio", "password123")
        assert user is not None
        assert user.id == 1

    def test_username_is_case_insensitive(self, store: UserStore) -> None:
        user = authenticate_user(store, "ADMIN", "adminpass")
        assert user is not None
        assert user.id == 99

    def test_password_is_case_sensitive(self, store: UserStore) -> None:
        assert authenticate_user(store, "admin", "ADMINPASS") is None

    def test_wrong_password(self, store: UserStore) -> None:
        assert authenticate_user(store, "ezio", "nope") is None

    def test_unknown_user(self, store: UserStore) -> None:
        assert authenticate_user(store, "nobody", "password123") is None
