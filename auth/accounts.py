"""
auth/accounts.py -- Registration and password login for both namespaces.

Both operations are synchronous and CPU-bound (bcrypt). Call them from plain
`def` route handlers so they run on the worker thread pool.

Login outcomes are deliberately distinguishable, matching the HTTP contract:
an unknown username is NotFoundError (404), a wrong password is
InvalidCredentials (400).
"""

from __future__ import annotations

import logging

from auth.models import PrincipalKind
from auth.passwords import hash_password, verify_password
from auth.store import CredentialStore
from auth.tokens import TokenService
from core.errors import InvalidCredentials, NotFoundError, ValidationError

logger = logging.getLogger("taskreview.auth")


def register(store: CredentialStore, kind: PrincipalKind, username: str, password: str) -> str:
    """Hash the password and create a principal. Returns the new id.

    Raises DuplicateUsername if the username is taken in this namespace,
    ValidationError if the password cannot be hashed.
    """
    try:
        password_hash = hash_password(password)
    except ValueError as exc:
        raise ValidationError() from exc
    principal_id = store.create_principal(kind, username, password_hash)
    logger.info("Registered %s %s", kind.value, principal_id)
    return principal_id


def login(
    store: CredentialStore,
    tokens: TokenService,
    kind: PrincipalKind,
    username: str,
    password: str,
) -> str:
    """Verify credentials and return a freshly issued bearer token."""
    principal = store.get_by_username(kind, username)
    if principal is None:
        raise NotFoundError(f"{kind.label} not found")
    if not verify_password(password, principal.password_hash):
        logger.info("Bad password for %s %s", kind.value, principal.id)
        raise InvalidCredentials()
    return tokens.issue(principal.id, kind)
