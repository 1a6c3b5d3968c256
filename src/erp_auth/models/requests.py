"""Request and response bodies for the auth and user routes."""

from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from erp_auth.models.identity import DEFAULT_ROLE, Role


def _normalize_email(value: str) -> str:
    return value.strip().lower()


class SignupRequest(BaseModel):
    """Self-service signup. The role is always the default."""

    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str | None = None

    normalize_email = field_validator("email")(_normalize_email)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    normalize_email = field_validator("email")(_normalize_email)


class CreateUserRequest(BaseModel):
    """Admin-created user, approved on creation."""

    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str | None = None
    phone: str | None = None
    role: Role = DEFAULT_ROLE

    normalize_email = field_validator("email")(_normalize_email)


class RoleUpdateRequest(BaseModel):
    role: Role


class UserUpdateRequest(BaseModel):
    """Admin partial update. Omitted fields are left alone."""

    full_name: str | None = None
    phone: str | None = None
    is_active: bool | None = None
    role: Role | None = None

    @field_validator("is_active", "role")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        # Omit the field to leave it unchanged; the column is not nullable.
        if value is None:
            raise ValueError("must not be null")
        return value


class ProfileUpdateRequest(BaseModel):
    """Self-service profile edit."""

    full_name: str | None = None
    phone: str | None = None


class UserSummary(BaseModel):
    """User object returned by signup and login."""

    id: str
    email: str
    full_name: str | None = None
    role: Role
    approval_status: str | None = None


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: UserSummary


class SignupResponse(BaseModel):
    success: bool = True
    user: UserSummary
    message: str


class UserResponse(BaseModel):
    success: bool = True
    user: dict[str, Any]


class DataResponse(BaseModel):
    success: bool = True
    data: Any
    message: str | None = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
