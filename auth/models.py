"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Dataclasses own domain
shape; stores and routes do the work. The pydantic models in api/models.py
own the JSON contract and map to and from these.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """A registered user.

    Frozen: records are never edited in place. UserStore.create_user() builds
    the stored copy with dataclasses.replace() after hashing the password.

    password holds the SHA-256 hex digest once the record is inside the store.
    Before that (e.g. a freshly parsed create request) it is the plaintext.
    """

    id: int
    username: str
    password: str
    fullname: str = ""
    email: str = ""
    address: str = ""
    added_by: str = ""
    is_admin: bool = False
