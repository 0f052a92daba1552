"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in assignments/models.py -- dataclasses own domain shape; stores, services
and routes do the work.

Layer rule: no imports from api/ or assignments/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PrincipalKind(str, Enum):
    """The two flat principal namespaces. Values double as JWT role claims."""

    user = "user"
    admin = "admin"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass
class Principal:
    """A registered identity in one of the two namespaces.

    A User and an Admin may share a username -- uniqueness is per namespace.
    id is None before the record is written to the database.
    """

    username: str
    password_hash: str
    kind: PrincipalKind
    id: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Identity decoded from a verified bearer token."""

    id: str
    role: PrincipalKind


@dataclass(frozen=True)
class AuthContext:
    """What a passed gate attaches to the request.

    role is the role claimed by the token. In compatibility mode it can differ
    from the kind the gate required.
    """

    id: str
    role: PrincipalKind
