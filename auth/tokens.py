"""
auth/tokens.py -- Password hashing, session token, and bearer header utilities.

Security design decisions:
  Passwords: SHA-256 over the UTF-8 bytes, hex encoded. The digest must be
       deterministic so a login can recompute it and compare against the
       stored value across restarts. verify_password() compares with
       hmac.compare_digest so the comparison itself does not leak timing.

  Session tokens: str(uuid.uuid4()) -- 122 random bits from os.urandom. The
       token is opaque; all meaning lives in the TokenStore mapping. There is
       no signature and no expiry: a token is valid exactly as long as it is
       present in the store.

  Bearer header: "Authorization: Bearer <token>". The scheme match is
       case-sensitive and requires a single space; the remainder is stripped.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("userhub.auth")

BEARER_PREFIX = "Bearer "


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return the lowercase hex SHA-256 digest of the given plaintext password."""
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password hashes to the stored digest."""
    return hmac.compare_digest(hash_password(plain), hashed)


# ---------------------------------------------------------------------------
# Session tokens
# ---------------------------------------------------------------------------


def generate_token() -> str:
    """Generate a new opaque session token (a random UUID4 string)."""
    return str(uuid.uuid4())


def token_hint(token: str) -> str:
    """Shorten a token for log lines. Full tokens are never written to logs."""
    return f"{token[:8]}..."


def parse_bearer_token(header: str | None) -> str | None:
    """Extract the token from an Authorization header value.

    Returns None when the header is missing or does not use the Bearer scheme.
    An empty token after stripping is returned as "" -- it will simply fail to
    resolve in the TokenStore.
    """
    if not header or not header.startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX) :].strip()


# ---------------------------------------------------------------------------
# User authentication
# ---------------------------------------------------------------------------


def authenticate_user(store: UserStore, username: str, password: str) -> User | None:
    """Authenticate a username/password login.

    Username lookup is case-insensitive. Returns the User on success, None on
    any failure -- unknown username and wrong password are indistinguishable
    to the caller.
    """
    user = store.find_by_username(username)
    if user is None or not verify_password(password, user.password):
        logger.info("Login failed for user %r (invalid credentials)", username)
        return None
    return user
