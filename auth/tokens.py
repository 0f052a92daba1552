"""
auth/tokens.py -- JWT issue and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with the configured secret
       and carry the principal id, the principal kind ("role") and an expiry
       exactly one hour after issuance. There is no refresh and no
       revocation list: a token is valid for its full lifetime.

  Verification raises InvalidToken on any failure -- bad structure, bad
       signature, expiry, or a claim set that does not describe a principal.
       Callers cannot tell an expired token from a forged one.

  The secret is injected at construction (see core/config.py). This module
       holds no module-level configuration, so two TokenService instances
       with different secrets can coexist in one process.

Layer rule: no imports from api/ or assignments/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from auth.models import PrincipalKind, TokenClaims
from core.errors import InvalidToken

logger = logging.getLogger("taskreview.auth")

_ALGORITHM = "HS256"

TOKEN_LIFETIME_SECONDS = 3600


class TokenService:
    """Issues and verifies signed bearer tokens.

    Usage:
        tokens = TokenService(settings.secret_key)
        token = tokens.issue(user.id, PrincipalKind.user)
        claims = tokens.verify(token)   # TokenClaims(id=..., role=PrincipalKind.user)
    """

    def __init__(self, secret_key: str, lifetime_seconds: int = TOKEN_LIFETIME_SECONDS) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a non-empty secret key.")
        self._secret_key = secret_key
        self._lifetime = timedelta(seconds=lifetime_seconds)

    def issue(self, principal_id: str, kind: PrincipalKind) -> str:
        """Encode a signed JWT for the given principal."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": principal_id,
            "id": principal_id,
            "role": PrincipalKind(kind).value,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode and verify a JWT. Raises InvalidToken on any failure."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWTError as exc:
            logger.info("Token rejected: %s", type(exc).__name__)
            raise InvalidToken() from exc

        principal_id = payload.get("id")
        if not isinstance(principal_id, str) or not principal_id:
            raise InvalidToken()
        try:
            role = PrincipalKind(payload.get("role"))
        except ValueError as exc:
            raise InvalidToken() from exc
        # python-jose skips the exp check when the claim is absent
        if "exp" not in payload:
            raise InvalidToken()
        return TokenClaims(id=principal_id, role=role)
