"""ERP Auth - authentication, approval and role gating for the ERP backend."""

__version__ = "0.1.0"

from erp_auth.exceptions import (
    ConfigurationError,
    ConflictError,
    ERPAuthError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    PendingApprovalError,
    RequestValidationFailed,
    UnauthenticatedError,
)

__all__ = [
    "__version__",
    "ConfigurationError",
    "ConflictError",
    "ERPAuthError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "PendingApprovalError",
    "RequestValidationFailed",
    "UnauthenticatedError",
]
