"""
assignments/store.py -- SQLAlchemy-backed persistence layer for assignments.

Uses SQLAlchemy Core (not ORM) so the dataclass in assignments/models.py
remains the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change.

Pattern: Repository + Data Mapper. AssignmentStore is the repository;
_row_to_assignment is the mapper.

Concurrency: every method is a single statement in its own transaction.
There is no version column, so two racing status updates on the same row
both succeed and the later one wins.

Every SQLAlchemy failure is re-raised as PersistenceError.

Usage:
    store = AssignmentStore(settings.database_url)
    assignment_id = store.create_assignment(Assignment(user_id=uid, task="T1", admin=aid))
    store.list_by_admin(aid)
    store.update_status(assignment_id, AssignmentStatus.accepted)
    store.close()
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from assignments.models import Assignment, AssignmentStatus
from core.errors import PersistenceError

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_assignments = Table(
    "assignments",
    _metadata,
    Column("id", String(32), primary_key=True),
    Column("user_id", String(32), nullable=False),
    Column("task", Text, nullable=False),
    Column("admin", String(255), nullable=False, index=True),
    Column("status", String(16), nullable=False, server_default=AssignmentStatus.pending.value),
    Column("date_time", String(32), nullable=False),
)


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AssignmentStore:
    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def create_assignment(self, assignment: Assignment) -> str:
        """Insert a new assignment and return its assigned id.

        status and date_time are stamped here: status from the dataclass
        (Pending unless a caller overrides it), date_time from the clock.
        """
        assignment_id = uuid.uuid4().hex
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    _assignments.insert().values(
                        id=assignment_id,
                        user_id=assignment.user_id,
                        task=assignment.task,
                        admin=assignment.admin,
                        status=AssignmentStatus(assignment.status).value,
                        date_time=_now_iso(),
                    )
                )
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return assignment_id

    def get_assignment(self, assignment_id: str) -> Assignment | None:
        """Look up an assignment by id. Returns None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_assignments.select().where(_assignments.c.id == assignment_id)).fetchone()
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return _row_to_assignment(row) if row is not None else None

    def list_by_admin(self, admin_id: str) -> list[Assignment]:
        """Return every assignment addressed to admin_id, in store order, any status."""
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(_assignments.select().where(_assignments.c.admin == admin_id)).fetchall()
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return [_row_to_assignment(r) for r in rows]

    def update_status(self, assignment_id: str, status: AssignmentStatus) -> bool:
        """Overwrite the status of one assignment.

        Returns True if a row was updated, False if assignment_id was not found.
        """
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    _assignments.update()
                    .where(_assignments.c.id == assignment_id)
                    .values(status=AssignmentStatus(status).value)
                )
        except SQLAlchemyError as exc:
            raise PersistenceError() from exc
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_assignment(row) -> Assignment:
    return Assignment(
        id=row.id,
        user_id=row.user_id,
        task=row.task,
        admin=row.admin,
        status=AssignmentStatus(row.status),
        date_time=row.date_time,
    )
