"""
Domain exceptions raised by the service layer.

Services raise these instead of ``HTTPException`` so that business
logic stays independent of FastAPI.  Each exception carries the HTTP
status it maps to; the handlers in ``core.responses`` turn them into the
``{"success": false, "message": ...}`` error payload.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(ServiceError):
    """Malformed, missing or out‑of‑range input."""

    status_code = 400


class Conflict(ServiceError):
    """Uniqueness violation such as a duplicate e‑mail.  Reported as 400."""

    status_code = 400


class AuthenticationFailed(ServiceError):
    status_code = 401


class PermissionDenied(ServiceError):
    status_code = 403


class NotFound(ServiceError):
    """Entity absent or not owned by the caller."""

    status_code = 404
