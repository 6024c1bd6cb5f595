"""Domain errors for the event signup lifecycle.

Each error carries the HTTP status it maps to and the detail that is safe to
show to the caller. ``main.py`` registers a single handler for ``SignupError``
and routes FastAPI request validation failures through ``ValidationError``.
"""

from collections.abc import Iterable
from typing import Any

from fastapi import status

# Leading loc entries FastAPI adds for request validation errors
REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


class SignupError(Exception):
    """Base class for all signup lifecycle errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_detail: str | None = None

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    @property
    def detail(self) -> str:
        """Message returned to the HTTP caller."""
        return self.public_detail or self.message


class ValidationError(SignupError):
    """Submitted fields are missing or invalid (user-correctable)."""

    status_code = 422

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class ConflictError(SignupError):
    """An active signup or account already uses the email."""

    status_code = status.HTTP_409_CONFLICT


class InvalidTransitionError(SignupError):
    """The requested transition is not allowed from the current status."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current_status: str, target_status: str):
        super().__init__(
            f"Cannot move signup from '{current_status}' to '{target_status}'"
        )
        self.current_status = current_status
        self.target_status = target_status


class NotFoundError(SignupError):
    """No signup with the given id."""

    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(SignupError):
    """Caller failed the admin (or cron) check."""

    status_code = status.HTTP_403_FORBIDDEN
    public_detail = "Admin access required"


class RepositoryError(SignupError):
    """The backing store failed; callers may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    public_detail = "Service temporarily unavailable, please try again"


class HashingError(SignupError):
    """The password hashing backend is unavailable or misconfigured."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_detail = "Internal server error"


def field_errors(raw_errors: Iterable[dict[str, Any]]) -> list[dict]:
    """
    Flatten pydantic error dicts into ``{"field", "message"}`` entries.

    Request locations (``body``, ``query``...) are dropped so a bad password
    reads ``password`` whether it came through the API or the service.
    """
    result = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        result.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return result
