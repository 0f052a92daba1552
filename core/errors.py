"""
core/errors.py -- Domain error taxonomy for TaskReview.

Every error carries the HTTP status it maps to and a public message that is
safe to show a client. Internal causes are chained with `raise ... from exc`
and logged server-side, never rendered.

Layer rule: core/ is the kernel. Stores and services raise these; api/ routes
translate them into HTTPException.
"""

from __future__ import annotations


class TaskReviewError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    code: str = "error"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


class ValidationError(TaskReviewError):
    code = "validation_error"
    default_message = "Invalid request"


class DuplicateUsername(ValidationError):
    code = "duplicate_username"
    default_message = "Username already taken"


class InvalidCredentials(TaskReviewError):
    code = "invalid_credentials"
    default_message = "Invalid credentials"


# ---------------------------------------------------------------------------
# Authorization gate
# ---------------------------------------------------------------------------


class AuthError(TaskReviewError):
    code = "auth_error"


class MissingToken(AuthError):
    status_code = 403
    code = "missing_token"
    default_message = "Access denied"


class InvalidToken(AuthError):
    status_code = 400
    code = "invalid_token"
    default_message = "Invalid token"


class PrincipalNotFound(AuthError):
    status_code = 401
    code = "principal_not_found"
    default_message = "Principal not found"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class NotFoundError(TaskReviewError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class InvalidTransition(TaskReviewError):
    status_code = 409
    code = "invalid_transition"
    default_message = "Assignment has already been reviewed"


class PersistenceError(TaskReviewError):
    code = "persistence_error"
    default_message = "Storage error"
