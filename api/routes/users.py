"""
api/routes/users.py -- User CRUD endpoints behind bearer-token authentication.

Routes:
  GET    /users/       -- list all users (requires auth)
  GET    /users/{id}   -- fetch one user (requires auth)
  POST   /users/       -- create a user (requires admin)
  DELETE /users/{id}   -- delete a user (requires admin)

Every route in this module passes through auth.dependencies.authenticate(),
attached at the router level. Mutating routes additionally depend on
require_admin(), which answers 400 for non-admin callers. The create-user
body is decoded inside the handler, after both gates have run.

Store errors are translated here:
  UserConflictError   -> 409
  UserNotFoundError   -> 404
  ProtectedUserError  -> 400
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from api.models import UserCreate, UserResponse
from auth.dependencies import authenticate, require_admin
from auth.models import User
from auth.store import ProtectedUserError, UserConflictError, UserNotFoundError, UserStore

router = APIRouter(prefix="/users", dependencies=[Depends(authenticate)])


@router.get("/", response_model=list[UserResponse])
async def list_users(request: Request) -> list[UserResponse]:
    """Return every stored user in insertion order."""
    user_store: UserStore = request.app.state.user_store
    return [UserResponse.from_domain(u) for u in user_store.list_users()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(request: Request, user_id: int) -> UserResponse:
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "User doesn't exist."},
        )
    return UserResponse.from_domain(user)


async def _read_user_create(request: Request) -> UserCreate:
    """Parse and validate the create-user body.

    Called from inside the handler, after authenticate() and require_admin()
    have run, so an unauthenticated or non-admin caller is turned away before
    the body is even decoded.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail={"code": "validation_error", "message": "Request body is not valid JSON."},
        ) from exc
    try:
        return UserCreate.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(), body=payload) from exc


@router.post(
    "/",
    response_model=UserResponse,
    status_code=201,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": UserCreate.model_json_schema(by_alias=True)}},
        }
    },
)
async def create_user(
    request: Request,
    response: Response,
    admin: User = Depends(require_admin),
) -> UserResponse:
    """Create a new user. Admin only.

    The body carries the plaintext password; the stored record (and this
    response) carries its hash. The new resource URL is sent in Location.
    """
    user_store: UserStore = request.app.state.user_store
    body = await _read_user_create(request)
    try:
        created = user_store.create_user(body.to_domain())
    except UserConflictError as exc:
        raise HTTPException(
            status_code=409,
            detail={"code": "conflict", "message": str(exc)},
        ) from exc

    response.headers["Location"] = f"/users/{created.id}"
    return UserResponse.from_domain(created)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    request: Request,
    user_id: int,
    admin: User = Depends(require_admin),
) -> Response:
    """Delete a user. Admin only. Administrator accounts cannot be deleted."""
    user_store: UserStore = request.app.state.user_store
    try:
        user_store.delete_user(user_id)
    except UserNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "This user doesn't exist."},
        ) from exc
    except ProtectedUserError as exc:
        raise HTTPException(
            status_code=400,
            detail={"code": "protected_user", "message": str(exc)},
        ) from exc
    return Response(status_code=204)
