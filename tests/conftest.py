"""
tests/conftest.py -- Shared test fixtures for UserHub integration tests.

This module provides:
  - client: TestClient running the real app lifespan, so every test starts
    from freshly seeded in-memory stores
  - login: callable (username, password) -> token, via POST /login on client
  - bearer: callable token -> {"Authorization": "Bearer <token>"}
  - admin_token / user_token: tokens for the seeded admin and for "ezio"

SEED_USERS must be set before api.main is imported because the app reads
settings at import time.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator

os.environ.setdefault("SEED_USERS", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app

ADMIN_CREDENTIALS = ("admin", "adminpass")
USER_CREDENTIALS = ("ezio", "password123")


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Yield a TestClient bound to a fresh lifespan (fresh seeded stores).

    Function-scoped: the stores are rebuilt on every lifespan startup, so
    users created or deleted in one test never leak into the next.
    """
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


@pytest.fixture
def bearer() -> Callable[[str], dict[str, str]]:
    """Return a helper that builds the Authorization header for a token."""

    def _bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture
def login(client: TestClient) -> Callable[[str, str], str]:
    """Return a helper that POSTs /login and yields the issued token.

    Fails the test on any non-200 response.
    """

    def _login(username: str, password: str) -> str:
        resp = client.post("/login", json={"username": username, "password": password})
        assert resp.status_code == 200, f"Login for {username!r} failed: {resp.status_code} {resp.text}"
        return resp.json()["token"]

    return _login


@pytest.fixture
def admin_token(login: Callable[[str, str], str]) -> str:
    return login(*ADMIN_CREDENTIALS)


@pytest.fixture
def user_token(login: Callable[[str, str], str]) -> str:
    return login(*USER_CREDENTIALS)
