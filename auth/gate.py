"""
auth/gate.py -- Authorization gate, independent of any web framework.

An AuthorizationGate is bound to one required principal kind. authenticate()
takes the raw Authorization header value and either returns an AuthContext or
raises one of three tagged failures:

  MissingToken       header absent or not "Bearer <token>"       (403)
  InvalidToken       signature, expiry or claim shape is wrong   (400)
  PrincipalNotFound  token is valid but names no principal of
                     the required kind                           (401)

The FastAPI adapters in auth/dependencies.py wrap this class; the gate itself
knows nothing about requests or responses.

Role enforcement:
  With enforce_role=True (the default) a token's role claim must equal the
  required kind. With enforce_role=False the gate only looks the id up in the
  required kind's table, so a token whose id happens to exist in that table
  passes regardless of its role claim. The second mode exists for
  deployments that relied on that behaviour.
"""

from __future__ import annotations

import logging

from auth.models import AuthContext, PrincipalKind
from auth.store import CredentialStore
from auth.tokens import TokenService
from core.errors import MissingToken, PrincipalNotFound

logger = logging.getLogger("taskreview.auth")


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        raise MissingToken()
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise MissingToken()
    return parts[1]


class AuthorizationGate:
    """Guard for routes that require one principal kind."""

    def __init__(
        self,
        required_kind: PrincipalKind,
        tokens: TokenService,
        credentials: CredentialStore,
        enforce_role: bool = True,
    ) -> None:
        self.required_kind = PrincipalKind(required_kind)
        self._tokens = tokens
        self._credentials = credentials
        self.enforce_role = enforce_role

    def authenticate(self, authorization: str | None) -> AuthContext:
        token = extract_bearer_token(authorization)
        claims = self._tokens.verify(token)

        not_found = PrincipalNotFound(f"{self.required_kind.label} not found")
        if self.enforce_role and claims.role is not self.required_kind:
            logger.info("Gate %s rejected %s token", self.required_kind.value, claims.role.value)
            raise not_found
        if self._credentials.get_by_id(self.required_kind, claims.id) is None:
            logger.info("Gate %s: no principal %s", self.required_kind.value, claims.id)
            raise not_found
        return AuthContext(id=claims.id, role=claims.role)
