"""
API request and response models for TaskReview REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
assignments/models.py, which own the internal domain representation. Route
handlers map between the two.

Wire names follow the public contract (userId, dateTime); Python attributes
stay snake_case and are mapped with field aliases.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from assignments.models import Assignment, AssignmentStatus

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for register and login, both namespaces.

    Password is capped at 72 characters: bcrypt only looks at the first
    72 bytes and recent releases refuse anything longer.
    """

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=72)


class AssignmentUpload(BaseModel):
    """Request body for POST /api/assignments/upload.

    There is no userId field -- the owner is always the caller. task is
    stored exactly as sent, whitespace included; only the admin id is
    trimmed.
    """

    task: str = Field(min_length=1)
    admin: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    """Generic `{message}` body used for successes and every error."""

    model_config = ConfigDict(frozen=True)

    message: str


class TokenResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str


class AssignmentResponse(BaseModel):
    """One assignment as returned by GET /api/assignments."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    task: str
    admin: str
    status: AssignmentStatus
    date_time: str = Field(alias="dateTime")

    @classmethod
    def from_domain(cls, assignment: Assignment) -> "AssignmentResponse":
        """Factory Method -- the mapping lives beside the output model."""
        return cls(
            id=assignment.id,
            user_id=assignment.user_id,
            task=assignment.task,
            admin=assignment.admin,
            status=assignment.status,
            date_time=assignment.date_time,
        )


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
