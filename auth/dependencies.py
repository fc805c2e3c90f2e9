"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

authenticate() is the bearer-token filter for the protected /users group. It
is attached to the router itself (APIRouter(dependencies=[...])), so it runs
once per request to that group, before any handler:

  1. Read the Authorization header. Missing, or not "Bearer <token>" -> 401.
  2. Resolve <token> in the TokenStore. Unknown or revoked -> 401.
  3. Attach the resolved User to request.state.current_user and let the
     handler run. The handler's response is returned untouched.

get_current_user() reads the attached identity back out, so handlers receive
it as an explicit typed parameter instead of digging in request.state.

require_admin() gates mutating routes. It answers 400 (not 403) for a
non-admin caller. Routes that take a body read it inside the handler, after
this check, so a non-admin gets 400 whatever the body holds.

Layer rule: no imports from api/ or core/.
  auth/dependencies.py may import from fastapi (for Depends/HTTPException/Request)
  because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request

from auth.models import User
from auth.store import TokenStore
from auth.tokens import parse_bearer_token, token_hint

logger = logging.getLogger("userhub.auth")

CURRENT_USER_KEY = "current_user"


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={"code": "unauthorized", "message": "Authentication required."},
        headers={"WWW-Authenticate": "Bearer"},
    )


def authenticate(request: Request) -> User:
    """Require a valid bearer token. Raises HTTP 401 otherwise.

    Use as a router-level dependency:
        router = APIRouter(prefix="/users", dependencies=[Depends(authenticate)])
    """
    path = request.url.path
    token = parse_bearer_token(request.headers.get("Authorization"))
    if token is None:
        logger.info("Auth: no Bearer token in Authorization header for %s", path)
        raise _unauthorized()

    token_store: TokenStore = request.app.state.token_store
    user = token_store.resolve(token)
    if user is None:
        logger.info(
            "Auth: token %s not found for %s (%d active)",
            token_hint(token),
            path,
            len(token_store),
        )
        raise _unauthorized()

    setattr(request.state, CURRENT_USER_KEY, user)
    logger.debug("Auth: token valid, user %r authenticated for %s", user.username, path)
    return user


def get_current_user(request: Request) -> User | None:
    """Return the identity attached by authenticate(), or None if there is none."""
    return getattr(request.state, CURRENT_USER_KEY, None)


def require_admin(current_user: User | None = Depends(get_current_user)) -> User:
    """Require an attached admin identity. Raises HTTP 400 otherwise.

    Use as a route dependency inside the authenticated router:
        @router.post("/")
        async def route(admin: User = Depends(require_admin)): ...
    """
    if current_user is None or not current_user.is_admin:
        raise HTTPException(
            status_code=400,
            detail={"code": "admin_required", "message": "Only administrators can modify users."},
        )
    return current_user
