"""
api/routes/principals.py -- Registration and login for users and admins.

Routes:
  POST /api/users/register    -- create a User; 201 {message}
  POST /api/users/login       -- password login; 200 {token}
  POST /api/admins/register   -- create an Admin; 201 {message}
  POST /api/admins/login      -- password login; 200 {token}

The two namespaces are served by two routers built from the same factory, so
the behaviour cannot drift between them.

Failure mapping:
  register: any failure (duplicate username, unhashable password, storage)
            -> 400 "Error registering <kind>". No detail is surfaced.
  login:    unknown username -> 404 "<Kind> not found"
            wrong password   -> 400 "Invalid credentials"
            anything else    -> 400 "Login error"

Handlers are plain `def` so bcrypt runs on the worker thread pool rather
than blocking the event loop.

Security:
  Cache-Control: no-store on login responses so tokens are never cached.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from api.models import CredentialsRequest, MessageResponse, TokenResponse
from auth import accounts
from auth.models import PrincipalKind
from core.errors import InvalidCredentials, NotFoundError, TaskReviewError

logger = logging.getLogger("taskreview.api")


def build_principal_router(kind: PrincipalKind) -> APIRouter:
    """Return the register/login router for one principal namespace."""
    router = APIRouter(prefix=f"/{kind.value}s")

    @router.post("/register", response_model=MessageResponse, status_code=201)
    def register(request: Request, body: CredentialsRequest) -> MessageResponse:
        """Register a new principal in this namespace."""
        try:
            accounts.register(request.app.state.credentials, kind, body.username, body.password)
        except TaskReviewError as exc:
            logger.info("Registration failed (%s): %s", kind.value, exc.code)
            raise HTTPException(status_code=400, detail=f"Error registering {kind.value}") from exc
        return MessageResponse(message=f"{kind.label} registered successfully")

    @router.post("/login", response_model=TokenResponse)
    def login(request: Request, body: CredentialsRequest) -> JSONResponse:
        """Verify credentials and return a one-hour bearer token."""
        try:
            token = accounts.login(
                request.app.state.credentials,
                request.app.state.tokens,
                kind,
                body.username,
                body.password,
            )
        except (NotFoundError, InvalidCredentials) as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
        except TaskReviewError as exc:
            raise HTTPException(status_code=400, detail="Login error") from exc

        resp = JSONResponse(status_code=200, content=TokenResponse(token=token).model_dump())
        resp.headers["Cache-Control"] = "no-store"
        return resp

    return router


users_router = build_principal_router(PrincipalKind.user)
admins_router = build_principal_router(PrincipalKind.admin)
