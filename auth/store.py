"""
auth/store.py -- SQLAlchemy Core persistence layer for principals.

Pattern: Repository + Data Mapper (same as assignments/store.py).
CredentialStore is the repository; _row_to_principal is the mapper.
Route and gate code never touches SQL directly.

Two namespaces, two tables: `users` and `admins` share one shape. A username
is unique within its table only, so "alice" may exist as both a User and an
Admin.

Uniqueness:
  create_principal() checks for an existing username and inserts inside one
  transaction, and the UNIQUE constraint backs that check up. Either way a
  duplicate surfaces as DuplicateUsername and the store is left untouched.

Security:
  All queries use bound parameters. No f-strings in SQL. The store only ever
  sees password hashes, never plaintext.

Layer rule: no imports from api/ or assignments/.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import Principal, PrincipalKind
from core.errors import DuplicateUsername, PersistenceError

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()


def _principal_table(name: str) -> Table:
    return Table(
        name,
        _metadata,
        Column("id", String(32), primary_key=True),
        Column("username", String(255), nullable=False, unique=True),
        Column("password_hash", Text, nullable=False),
        Column("created_at", String(32), nullable=False),
    )


_tables: dict[PrincipalKind, Table] = {
    PrincipalKind.user: _principal_table("users"),
    PrincipalKind.admin: _principal_table("admins"),
}


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CredentialStore:
    """Repository for User and Admin principals.

    Usage:
        store = CredentialStore(settings.database_url)
        admin_id = store.create_principal(PrincipalKind.admin, "bob", hash_password("pw2"))
        admin = store.get_by_username(PrincipalKind.admin, "bob")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            # The same connection may be touched from FastAPI's worker threads.
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def create_principal(self, kind: PrincipalKind, username: str, password_hash: str) -> str:
        """Insert a principal if its username is free in that namespace.

        Returns the new opaque id. Raises DuplicateUsername when the username
        is already taken in the same namespace, PersistenceError on any other
        database failure.
        """
        table = _tables[PrincipalKind(kind)]
        principal_id = _new_id()
        try:
            with self.engine.begin() as conn:
                existing = conn.execute(table.select().where(table.c.username == username)).fetchone()
                if existing is not None:
                    raise DuplicateUsername()
                conn.execute(
                    table.insert().values(
                        id=principal_id,
                        username=username,
                        password_hash=password_hash,
                        created_at=_now_iso(),
                    )
                )
        except IntegrityError as exc:
            # A concurrent insert won the race between our check and insert.
            raise DuplicateUsername() from exc
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return principal_id

    def get_by_username(self, kind: PrincipalKind, username: str) -> Principal | None:
        """Look up a principal by exact username (case-sensitive). Returns None if not found."""
        table = _tables[PrincipalKind(kind)]
        try:
            with self.engine.connect() as conn:
                row = conn.execute(table.select().where(table.c.username == username)).fetchone()
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return _row_to_principal(row, kind) if row is not None else None

    def get_by_id(self, kind: PrincipalKind, principal_id: str) -> Principal | None:
        """Look up a principal by id. Returns None if not found."""
        table = _tables[PrincipalKind(kind)]
        try:
            with self.engine.connect() as conn:
                row = conn.execute(table.select().where(table.c.id == principal_id)).fetchone()
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return _row_to_principal(row, kind) if row is not None else None

    def count(self, kind: PrincipalKind) -> int:
        """Return the number of principals in a namespace."""
        table = _tables[PrincipalKind(kind)]
        try:
            with self.engine.connect() as conn:
                result = conn.execute(select(func.count()).select_from(table)).scalar()
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return result or 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_principal(row, kind: PrincipalKind) -> Principal:
    return Principal(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        kind=PrincipalKind(kind),
        created_at=row.created_at,
    )
