"""
api/main.py -- FastAPI application entry point for UserHub.

Run with:  python main.py
           uvicorn api.main:app --reload

Middleware stack (outermost to innermost; Starlette wraps the most recently
registered middleware around the earlier ones):
  1. log_requests    -- one access log line per request with latency
  2. redirect_root   -- "/" answers 301 -> /users before routing
  3. CORSMiddleware  -- adds CORS headers for allowed browser origins

Lifespan builds the in-memory stores on startup and drops them on shutdown.
Nothing survives a restart: users added through the API and every issued
token are gone once the process exits.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.users import router as users_router
from auth.store import TokenStore, UserStore, default_users
from core.config import get_settings

__version__ = "0.1.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("userhub.api")

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the user and token stores for the lifetime of the server.

    Both stores share a single lock so a request never observes one store
    mid-update while the other is being read.
    """
    logger.info("UserHub API starting up")
    lock = threading.RLock()
    users = default_users() if _settings.seed_users else []
    app.state.user_store = UserStore(users, lock=lock)
    app.state.token_store = TokenStore(lock=lock)
    logger.info("User store initialized (%d users)", len(app.state.user_store))

    yield

    logger.info(
        "UserHub API shutdown complete (%d active tokens discarded)",
        len(app.state.token_store),
    )


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="UserHub API",
    description="In-memory user registry with bearer-token sessions.",
    version=__version__,
    debug=_settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Location"],
    max_age=3600,
)

# ---------------------------------------------------------------------------
# Root redirect middleware
#
# "/" has no handler of its own. The redirect runs ahead of routing so it
# applies to any method, the same as a bare path rewrite would.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def redirect_root(request: Request, call_next):
    """Permanently redirect the bare root path to the user listing."""
    if request.url.path == "/":
        return RedirectResponse("/users", status_code=301)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Registered after redirect_root, so it wraps it and also logs the 301s.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, tags=["Auth"])
app.include_router(users_router, tags=["Users"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 422 with structured error when request body or path params fail validation."""
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=ErrorDetail(
                code="validation_error",
                message="Request validation failed.",
                detail=str(exc.errors()),
            )
        ).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return a structured error for all FastAPI/Starlette HTTP exceptions.

    Route handlers raise HTTPException with a {"code", "message"} dict as
    detail. When detail is already a structured dict, use it directly as the
    error field rather than stringifying it. Headers set on the exception
    (WWW-Authenticate on 401s) are carried over to the response.
    """
    if isinstance(exc.detail, dict):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=f"http_{exc.status_code}",
                message=str(exc.detail),
            )
        ).model_dump(),
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorDetail(
                code="internal_error",
                message="An unexpected error occurred.",
            )
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version."""
    return HealthResponse(version=__version__)
