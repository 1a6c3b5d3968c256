"""Pydantic models for ERP Auth."""

from erp_auth.models.identity import (
    DEFAULT_ROLE,
    ApprovalStatus,
    Identity,
    IdentityContext,
    Profile,
    Role,
)
from erp_auth.models.requests import (
    CreateUserRequest,
    DataResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileUpdateRequest,
    RoleUpdateRequest,
    SignupRequest,
    SignupResponse,
    UserResponse,
    UserSummary,
    UserUpdateRequest,
)

__all__ = [
    "ApprovalStatus",
    "CreateUserRequest",
    "DataResponse",
    "DEFAULT_ROLE",
    "Identity",
    "IdentityContext",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "Profile",
    "ProfileUpdateRequest",
    "Role",
    "RoleUpdateRequest",
    "SignupRequest",
    "SignupResponse",
    "UserResponse",
    "UserSummary",
    "UserUpdateRequest",
]
