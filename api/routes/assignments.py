"""
api/routes/assignments.py -- Assignment submission and review endpoints.

Routes:
  POST /api/assignments/upload        -- submit (User token)     201 {message}
  GET  /api/assignments               -- list mine (Admin token) 200 [Assignment]
  POST /api/assignments/{id}/accept   -- review (Admin token)    200 {message}
  POST /api/assignments/{id}/reject   -- review (Admin token)    200 {message}

Auth policy:
  Gate failures are raised by the require_user / require_admin dependencies
  before any handler code runs: 403 missing/garbled header, 400 invalid
  token, 401 unknown principal.

Failure mapping inside handlers:
  unknown (or, in strict mode, someone else's) assignment -> 404
  already reviewed (strict mode)                          -> 409
  storage failure                                         -> 400 with a
                                                             per-route message
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import AssignmentResponse, AssignmentUpload, MessageResponse
from assignments.workflow import AssignmentWorkflow
from auth.dependencies import require_admin, require_user
from auth.models import AuthContext
from core.errors import InvalidTransition, NotFoundError, TaskReviewError

router = APIRouter(prefix="/assignments")


def _workflow(request: Request) -> AssignmentWorkflow:
    return request.app.state.workflow


@router.post("/upload", response_model=MessageResponse, status_code=201)
def upload_assignment(
    request: Request,
    body: AssignmentUpload,
    principal: AuthContext = Depends(require_user),
) -> MessageResponse:
    """Submit a task for review by the given admin. The owner is the caller."""
    try:
        _workflow(request).create(principal.id, body.task, body.admin)
    except TaskReviewError as exc:
        raise HTTPException(status_code=400, detail="Error uploading assignment") from exc
    return MessageResponse(message="Assignment uploaded successfully")


@router.get("", response_model=list[AssignmentResponse])
def list_assignments(
    request: Request,
    principal: AuthContext = Depends(require_admin),
) -> list[AssignmentResponse]:
    """List every assignment addressed to the calling admin, any status."""
    try:
        assignments = _workflow(request).list_for_admin(principal.id)
    except TaskReviewError as exc:
        raise HTTPException(status_code=400, detail="Error fetching assignments") from exc
    return [AssignmentResponse.from_domain(a) for a in assignments]


@router.post("/{assignment_id}/accept", response_model=MessageResponse)
def accept_assignment(
    request: Request,
    assignment_id: str,
    principal: AuthContext = Depends(require_admin),
) -> MessageResponse:
    try:
        _workflow(request).accept(assignment_id, acting_admin_id=principal.id)
    except (NotFoundError, InvalidTransition) as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except TaskReviewError as exc:
        raise HTTPException(status_code=400, detail="Error accepting assignment") from exc
    return MessageResponse(message="Assignment accepted")


@router.post("/{assignment_id}/reject", response_model=MessageResponse)
def reject_assignment(
    request: Request,
    assignment_id: str,
    principal: AuthContext = Depends(require_admin),
) -> MessageResponse:
    try:
        _workflow(request).reject(assignment_id, acting_admin_id=principal.id)
    except (NotFoundError, InvalidTransition) as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    except TaskReviewError as exc:
        raise HTTPException(status_code=400, detail="Error rejecting assignment") from exc
    return MessageResponse(message="Assignment rejected")
