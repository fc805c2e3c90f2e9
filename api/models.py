"""
API request and response models for UserHub REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

JSON keys are camelCase on the wire (addedBy, isAdmin). populate_by_name lets
request bodies use the snake_case field names as well.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auth.models import User

# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(max_length=255)


class LoginResponse(BaseModel):
    """Response body for a successful POST /login."""

    model_config = ConfigDict(frozen=True)

    token: str
    message: str


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    username: str = Field(min_length=1, max_length=255)
    password: str
    fullname: str = ""
    email: str = ""
    address: str = ""
    added_by: str = ""
    is_admin: bool = False


class UserCreate(UserBase):
    """Request body for POST /users/. password is the plaintext; the store hashes it."""

    password: str = Field(max_length=255)

    def to_domain(self) -> User:
        return User(**self.model_dump())


class UserResponse(UserBase):
    """A stored user as returned by the API.

    password is the SHA-256 hex digest, never the plaintext that was submitted.
    """

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        """Build a UserResponse from an auth.models.User instance."""
        return cls(
            id=user.id,
            username=user.username,
            password=user.password,
            fullname=user.fullname,
            email=user.email,
            address=user.address,
            added_by=user.added_by,
            is_admin=user.is_admin,
        )
