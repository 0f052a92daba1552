"""
auth/dependencies.py -- FastAPI Depends() adapters around AuthorizationGate.

The gates themselves are built once at startup (api/main.py lifespan) and
kept on app.state.gates, keyed by PrincipalKind. These adapters only pull the
Authorization header, run the gate, and translate a gate failure into an
HTTPException carrying the failure's status code and public message.

On success the AuthContext is returned to the route and also attached to
request.state.principal.

Layer rule: no imports from api/ or assignments/.
  auth/dependencies.py may import from fastapi because this module is part
  of the FastAPI dependency injection system.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import HTTPException, Request

from auth.gate import AuthorizationGate
from auth.models import AuthContext, PrincipalKind
from core.errors import TaskReviewError


def require_principal(kind: PrincipalKind) -> Callable[[Request], AuthContext]:
    """Build a dependency that admits only principals of the given kind.

    Use as a FastAPI dependency:
        @router.get("/admin-only")
        def route(principal: AuthContext = Depends(require_principal(PrincipalKind.admin))): ...
    """

    def dependency(request: Request) -> AuthContext:
        gate: AuthorizationGate = request.app.state.gates[kind]
        try:
            principal = gate.authenticate(request.headers.get("Authorization"))
        except TaskReviewError as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
        request.state.principal = principal
        return principal

    return dependency


require_user = require_principal(PrincipalKind.user)
require_admin = require_principal(PrincipalKind.admin)
