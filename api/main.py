"""
api/main.py -- FastAPI application entry point for TaskReview.

Run with:      python main.py
               uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. log_requests          -- one log line per request with latency
  2. CORSMiddleware        -- adds CORS headers for allowed browser origins

Lifespan reads Settings once, builds the stores, the token service, the two
authorization gates and the assignment workflow, and hangs them on app.state.
Nothing else in the process reads configuration.

Every error response is `{"message": ...}`. Internal causes are logged,
never returned.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import HealthResponse, MessageResponse
from api.routes.assignments import router as assignments_router
from api.routes.principals import admins_router, users_router
from assignments.store import AssignmentStore
from assignments.workflow import AssignmentWorkflow
from auth.gate import AuthorizationGate
from auth.models import PrincipalKind
from auth.store import CredentialStore
from auth.tokens import TokenService
from core.config import Settings, get_settings

API_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("taskreview.api")

# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------


def attach_services(
    app: FastAPI,
    settings: Settings,
    credentials: CredentialStore,
    assignment_store: AssignmentStore,
) -> None:
    """Build every request-time service from explicit config and stores.

    Called by the lifespan in production and by the test fixtures, which
    pass in-memory stores and a throwaway secret.
    """
    tokens = TokenService(settings.secret_key)
    app.state.settings = settings
    app.state.credentials = credentials
    app.state.assignment_store = assignment_store
    app.state.tokens = tokens
    app.state.gates = {
        kind: AuthorizationGate(kind, tokens, credentials, enforce_role=settings.enforce_token_role)
        for kind in PrincipalKind
    }
    app.state.workflow = AssignmentWorkflow(
        assignment_store,
        enforce_transitions=settings.enforce_status_transitions,
        scope_to_admin=settings.scope_assignments_to_admin,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the stores on startup and close them on shutdown."""
    settings = get_settings()
    logger.info("TaskReview API starting up")
    credentials = CredentialStore(settings.database_url)
    assignment_store = AssignmentStore(settings.database_url)
    attach_services(app, settings, credentials, assignment_store)
    logger.info(
        "Auth initialized (enforce_token_role=%s, scope_assignments_to_admin=%s, enforce_status_transitions=%s)",
        settings.enforce_token_role,
        settings.scope_assignments_to_admin,
        settings.enforce_status_transitions,
    )

    yield

    assignment_store.close()
    credentials.close()
    logger.info("TaskReview API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="TaskReview API",
    description="Users submit assignments to an admin; admins accept or reject them.",
    version=API_VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost", "http://localhost:3000", "http://127.0.0.1"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


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

app.include_router(users_router, prefix="/api", tags=["Users"])
app.include_router(admins_router, prefix="/api", tags=["Admins"])
app.include_router(assignments_router, prefix="/api", tags=["Assignments"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same {"message": ...} envelope so clients can
# parse every error identically.
# ---------------------------------------------------------------------------


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=MessageResponse(message=message).model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the request body fails validation. Field errors stay in the log."""
    logger.info("Validation failed on %s %s: %s", request.method, request.url.path, exc.errors())
    return _message(400, "Invalid request body")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render FastAPI and Starlette HTTP errors (including unknown routes) as {"message": detail}."""
    return _message(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _message(500, "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
async def health() -> HealthResponse:
    """Return API liveness and current version. No auth required."""
    return HealthResponse(version=API_VERSION)
