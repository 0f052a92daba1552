"""
assignments/models.py -- Domain dataclasses for assignments.

Pure data containers with zero logic. Status transitions live in
assignments/workflow.py; persistence lives in assignments/store.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AssignmentStatus(str, Enum):
    pending = "Pending"
    accepted = "Accepted"
    rejected = "Rejected"


@dataclass
class Assignment:
    """A unit of work submitted by a User and routed to one Admin for review.

    user_id is always the authenticated submitter, never client input.
    admin is the reviewing Admin's id; it is not checked against the admins
    table, so an orphaned reference is possible.

    id is None before the record is written to the database.
    """

    user_id: str
    task: str
    admin: str
    status: AssignmentStatus = AssignmentStatus.pending
    id: str | None = None
    date_time: str = ""  # ISO 8601, set by store on insert
