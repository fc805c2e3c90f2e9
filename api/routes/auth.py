"""
api/routes/auth.py -- Session login and logout endpoints.

Routes:
  POST /login   -- password login; issues an opaque bearer token
  POST /logout  -- revokes the bearer token presented in the Authorization header

Neither route sits behind the authenticate() filter. /logout inspects the
Authorization header itself: a missing header, a non-Bearer header, and an
unknown token all answer 401.

Security:
  Unknown username and wrong password return the same 401 body
  ("bad_credentials") so the response does not leak which part was wrong.
  Cache-Control: no-store on login and logout responses.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from api.models import LoginRequest, LoginResponse, MessageResponse
from auth.store import TokenStore, UserStore
from auth.tokens import authenticate_user, parse_bearer_token, token_hint

logger = logging.getLogger("userhub.auth")

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with username and password; return a new bearer token.

    Every successful login issues a fresh token. Earlier tokens for the same
    user stay valid until they are logged out.
    """
    user_store: UserStore = request.app.state.user_store
    token_store: TokenStore = request.app.state.token_store

    user = authenticate_user(user_store, body.username, body.password)
    if user is None:
        resp = JSONResponse(
            status_code=401,
            content={"error": {"code": "bad_credentials", "message": "Invalid username or password."}},
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp

    token = token_store.issue(user)
    logger.info(
        "Login successful for %s, token %s (%d active)",
        user.username,
        token_hint(token),
        len(token_store),
    )
    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(token=token, message=f"Login successful for {user.username}!").model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request) -> JSONResponse:
    """Revoke the bearer token from the Authorization header."""
    token_store: TokenStore = request.app.state.token_store

    token = parse_bearer_token(request.headers.get("Authorization"))
    if token is None:
        logger.info("Logout: no Bearer token in Authorization header")
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not token_store.revoke(token):
        logger.info("Logout failed: token %s not found", token_hint(token))
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Unknown or already revoked token."},
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("Logout successful for token %s (%d active)", token_hint(token), len(token_store))
    resp = JSONResponse(content=MessageResponse(message="Logged out successfully.").model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp
