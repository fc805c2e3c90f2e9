"""
auth/store.py -- In-memory persistence layer for users and session tokens.

Pattern: Repository. UserStore owns every User record; TokenStore owns the
token -> User mapping. Route and dependency code never touches the underlying
list or dict directly.

Storage lives for the lifetime of the process only. Both stores are created
in the api/main.py lifespan and hang off app.state.

Concurrency:
  FastAPI runs sync route handlers in a threadpool, so two requests can touch
  the same store at once. The lifespan creates one RLock and hands it to both
  stores; every public method runs under it. Operations are single-step, so a
  failed operation never leaves a partial mutation behind.

Token lifetime:
  A TokenStore entry holds the User it was issued for. Deleting that user
  from the UserStore does not revoke the token -- it keeps resolving to the
  deleted record until logout.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import dataclasses
import logging
import threading

from auth.models import User
from auth.tokens import generate_token, hash_password

logger = logging.getLogger("userhub.store")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """Base class for store-level failures. The route layer maps these to HTTP statuses."""


class UserConflictError(StoreError):
    """A user with the same id already exists."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User with an ID: {user_id} already existed.")
        self.user_id = user_id


class UserNotFoundError(StoreError):
    """No user with the requested id exists."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} doesn't exist.")
        self.user_id = user_id


class ProtectedUserError(StoreError):
    """The target user is an administrator and may not be removed."""

    def __init__(self, user_id: int) -> None:
        super().__init__("Removing admin is forbidden.")
        self.user_id = user_id


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

# (id, username, plaintext password, fullname, email, address, is_admin)
_SEED = [
    (1, "ezio", "password123", "Ezio Auditore", "ezio@example.com", "Florence", False),
    (2, "fzkn4", "securepass", "Fzkn4 Test", "fzkn4@example.com", "Rome", False),
    (3, "auditore", "anotherpass", "Auditore Da Firenze", "auditore@example.com", "Venice", False),
    (99, "admin", "adminpass", "Super Admin", "admin@example.com", "Headquarters", True),
]

ADMIN_USER_ID = 99


def default_users() -> list[User]:
    """Return the seed users with hashed passwords, in their canonical order.

    The admin (id 99) is the reserved account that delete_user() refuses to remove.
    """
    return [
        User(
            id=uid,
            username=username,
            password=hash_password(plain),
            fullname=fullname,
            email=email,
            address=address,
            added_by="System",
            is_admin=is_admin,
        )
        for uid, username, plain, fullname, email, address, is_admin in _SEED
    ]


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserStore:
    """Ordered, in-memory repository of User records.

    Usage:
        store = UserStore(default_users())
        created = store.create_user(User(id=5, username="new", password="plain"))
        user = store.find_by_username("NEW")
        store.delete_user(5)

    Records passed to the constructor are stored as-is (their passwords must
    already be hashed). Records passed to create_user() carry plaintext.
    """

    def __init__(self, users: list[User] | None = None, lock: threading.RLock | None = None) -> None:
        self._users: list[User] = list(users or [])
        self._lock = lock or threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_username(self, username: str) -> User | None:
        """Case-insensitive username lookup. Returns the first match or None."""
        wanted = username.lower()
        with self._lock:
            return next((u for u in self._users if u.username.lower() == wanted), None)

    def get_by_id(self, user_id: int) -> User | None:
        with self._lock:
            return next((u for u in self._users if u.id == user_id), None)

    def list_users(self) -> list[User]:
        """Return a snapshot of all users in insertion order."""
        with self._lock:
            return list(self._users)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> User:
        """Store a copy of user with its plaintext password replaced by the hash.

        Raises UserConflictError if a user with the same id already exists;
        the store is left unchanged in that case.
        """
        with self._lock:
            if any(u.id == user.id for u in self._users):
                raise UserConflictError(user.id)
            stored = dataclasses.replace(user, password=hash_password(user.password))
            self._users.append(stored)
        logger.info("Created user %d (%s)", stored.id, stored.username)
        return stored

    def delete_user(self, user_id: int) -> None:
        """Remove the user with the given id.

        Raises UserNotFoundError for an unknown id and ProtectedUserError when
        the target is an administrator.
        """
        with self._lock:
            target = next((u for u in self._users if u.id == user_id), None)
            if target is None:
                raise UserNotFoundError(user_id)
            if target.is_admin:
                raise ProtectedUserError(user_id)
            self._users.remove(target)
        logger.info("Deleted user %d (%s)", target.id, target.username)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class TokenStore:
    """In-memory mapping of opaque session token -> authenticated User."""

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._tokens: dict[str, User] = {}
        self._lock = lock or threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def issue(self, user: User) -> str:
        """Create a new token for user and return it.

        A user may hold any number of tokens at once; each login adds one.
        """
        token = generate_token()
        with self._lock:
            self._tokens[token] = user
        return token

    def resolve(self, token: str) -> User | None:
        with self._lock:
            return self._tokens.get(token)

    def revoke(self, token: str) -> bool:
        """Remove token. Returns True if it was present."""
        with self._lock:
            return self._tokens.pop(token, None) is not None
