"""Application error hierarchy.

Learn: Services and auth dependencies raise these instead of building
HTTP responses themselves. Handlers registered in main.py turn every
one of them into the same JSON envelope:

    {"error": "not_found", "message": "Package not found", "request_id": "..."}

`error` is the machine-readable code, `message` is safe to show a user.
`context` is for logs only and never leaves the server.

    AppError (base)       → 500 internal_error
    ├── BadRequestError   → 400 bad_request
    ├── ConflictError     → 400 conflict
    ├── UnauthorizedError → 401 unauthorized
    ├── ForbiddenError    → 403 forbidden
    ├── NotFoundError     → 404 not_found
    └── InternalError     → 500 internal_error
"""

from typing import Any, Optional

import structlog


class AppError(Exception):
    """Base for all errors that map to an HTTP response."""

    status_code = 500
    code = "internal_error"
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.context = context or {}
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[dict[str, str]]:
        return None


class BadRequestError(AppError):
    """Client input is malformed (bad id, bad JSON field, oversized upload)."""

    status_code = 400
    code = "bad_request"
    default_message = "Bad request"


class ConflictError(AppError):
    """The write would duplicate or contradict existing state.

    Reported as 400 — existing clients treat "already exists" as a
    plain bad request.
    """

    status_code = 400
    code = "conflict"
    default_message = "Resource already exists"


class UnauthorizedError(AppError):
    """Missing, malformed, or expired bearer token."""

    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized access"

    @property
    def headers(self) -> Optional[dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    """Valid identity, but not allowed to touch this resource."""

    status_code = 403
    code = "forbidden"
    default_message = "Forbidden access"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class InternalError(AppError):
    """A store or provider call failed. The cause is logged, not returned."""

    status_code = 500
    code = "internal_error"
    default_message = "Internal server error"


def error_body(code: str, message: str, **extra) -> dict:
    """The JSON envelope every error response uses.

    request_id comes from the structlog contextvars bound by
    RequestIdMiddleware, so it is set for anything running inside it.
    """
    request_id = structlog.contextvars.get_contextvars().get("request_id")
    return {"error": code, "message": message, "request_id": request_id, **extra}
