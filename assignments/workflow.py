"""
assignments/workflow.py -- Assignment lifecycle and review state machine.

    Pending --accept--> Accepted
    Pending --reject--> Rejected

Accepted and Rejected are terminal. There is no re-submission.

Two policy switches (both on by default, see core/config.py):

  enforce_transitions  accept/reject on a non-Pending assignment raises
                       InvalidTransition. Off: the status is overwritten
                       unconditionally, as the legacy service did.

  scope_to_admin       accept/reject only touch assignments whose `admin`
                       equals the acting admin's id; anything else looks
                       like it does not exist (NotFoundError). Off: any
                       authenticated admin may review any assignment.

The read-then-write in _review() is not isolated. Two concurrent reviews of
the same assignment can both pass the Pending check; the later write wins.
"""

from __future__ import annotations

import logging

from assignments.models import Assignment, AssignmentStatus
from assignments.store import AssignmentStore
from core.errors import InvalidTransition, NotFoundError, PersistenceError

logger = logging.getLogger("taskreview.assignments")

_TERMINAL_STATUSES = {AssignmentStatus.accepted, AssignmentStatus.rejected}


class AssignmentWorkflow:
    def __init__(
        self,
        store: AssignmentStore,
        enforce_transitions: bool = True,
        scope_to_admin: bool = True,
    ) -> None:
        self._store = store
        self.enforce_transitions = enforce_transitions
        self.scope_to_admin = scope_to_admin

    def create(self, owner_user_id: str, task: str, admin_id: str) -> Assignment:
        """Submit a new assignment. It always starts Pending."""
        assignment = Assignment(user_id=owner_user_id, task=task, admin=admin_id)
        assignment_id = self._store.create_assignment(assignment)
        created = self._store.get_assignment(assignment_id)
        if created is None:
            raise PersistenceError()
        logger.info("Assignment %s submitted by %s for %s", assignment_id, owner_user_id, admin_id)
        return created

    def list_for_admin(self, admin_id: str) -> list[Assignment]:
        return self._store.list_by_admin(admin_id)

    def accept(self, assignment_id: str, acting_admin_id: str | None = None) -> Assignment:
        return self._review(assignment_id, AssignmentStatus.accepted, acting_admin_id)

    def reject(self, assignment_id: str, acting_admin_id: str | None = None) -> Assignment:
        return self._review(assignment_id, AssignmentStatus.rejected, acting_admin_id)

    def _review(
        self,
        assignment_id: str,
        target: AssignmentStatus,
        acting_admin_id: str | None,
    ) -> Assignment:
        not_found = NotFoundError("Assignment not found")
        assignment = self._store.get_assignment(assignment_id)
        if assignment is None:
            raise not_found
        if self.scope_to_admin and assignment.admin != acting_admin_id:
            logger.info("Admin %s may not review assignment %s", acting_admin_id, assignment_id)
            raise not_found
        if self.enforce_transitions and assignment.status in _TERMINAL_STATUSES:
            raise InvalidTransition(f"Assignment already {assignment.status.value.lower()}")

        # Deleted between the read and the write.
        if not self._store.update_status(assignment_id, target):
            raise not_found
        assignment.status = target
        logger.info("Assignment %s -> %s", assignment_id, target.value)
        return assignment
