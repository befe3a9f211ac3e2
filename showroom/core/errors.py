"""Domain errors and their HTTP status codes.

Raised by services and dependencies; rendered by the exception handler
registered in ``showroom.main``.
"""

from typing import Any


class ShowroomError(Exception):
    """Base class for errors with a client-facing message."""

    status_code: int = 500

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(ShowroomError):
    """Missing or malformed input."""

    status_code = 400

    def __init__(
        self,
        message: str,
        detail: dict[str, Any] | None = None,
        errors: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message, detail)
        self.errors = errors


class AuthorizationError(ShowroomError):
    """Missing/invalid session or wrong credentials."""

    status_code = 401


class NotFoundError(ShowroomError):
    """Unknown id or unresolvable slug."""

    status_code = 404


class ConflictError(ShowroomError):
    """Duplicate name, or deletion blocked by references."""

    status_code = 409
