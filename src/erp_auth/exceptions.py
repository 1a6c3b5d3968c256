"""Custom exceptions for ERP Auth.

Every request-facing error carries the HTTP status it maps to, a short
``error`` label and a human readable ``message``. The API layer renders
them uniformly; nothing below the API layer imports FastAPI.
"""

from typing import Any


class ERPAuthError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UnauthenticatedError(ERPAuthError):
    """Missing, invalid or expired token, or no usable profile behind it."""

    status_code = 401
    error = "Unauthorized"


class ForbiddenError(ERPAuthError):
    """Valid identity whose role is not in the allowed set."""

    status_code = 403
    error = "Forbidden"

    def __init__(self, message: str, allowed_roles: list[str] | None = None) -> None:
        self.allowed_roles = allowed_roles or []
        details = {"required_roles": self.allowed_roles} if allowed_roles else None
        super().__init__(message, details)


class PendingApprovalError(ERPAuthError):
    """Credentials verified, but the profile is not approved and active."""

    status_code = 403
    error = "Pending Approval"

    def __init__(self, approval_status: str | None, is_active: bool) -> None:
        self.approval_status = approval_status
        self.is_active = is_active
        if approval_status == "rejected":
            message = "Your account request was rejected. Contact an administrator."
        elif approval_status == "approved":
            message = "Your account has been deactivated. Contact an administrator."
        else:
            message = "Your account is pending approval by an administrator."
        super().__init__(
            message,
            {"approval_status": approval_status, "is_active": is_active},
        )


class RequestValidationFailed(ERPAuthError):
    """Malformed request body or parameter."""

    status_code = 400
    error = "Invalid request data"


class NotFoundError(ERPAuthError):
    """Requested profile does not exist."""

    status_code = 404
    error = "Not Found"


class ConflictError(ERPAuthError):
    """Duplicate signup email or an illegal state change."""

    status_code = 409
    error = "Conflict"


class InvalidTransitionError(ConflictError):
    """Raised when an approval decision is not allowed from the current state."""

    def __init__(self, current: str | None, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change approval status from {current or 'unset'} to {target}",
            {"approval_status": current},
        )


class InternalError(ERPAuthError):
    """Authoritative store failure. The message is always generic."""

    status_code = 500
    error = "Internal Server Error"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            f"Missing or invalid configuration: {', '.join(missing)}"
        )
