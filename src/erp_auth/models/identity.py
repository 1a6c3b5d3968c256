"""Identity, profile and request-context models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Fixed set of business roles."""

    ADMIN = "admin"
    SALES = "sales"
    DEVELOPERS = "developers"
    DESIGNERS = "designers"


DEFAULT_ROLE = Role.SALES


class ApprovalStatus(str, Enum):
    """Signup approval lifecycle."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Identity(BaseModel):
    """User as issued by the credential store. Never mutated here."""

    id: str
    email: str | None = None
    phone: str | None = None


class Profile(BaseModel):
    """Row of the ``user_profiles`` table."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None
    phone: str | None = None
    full_name: str | None = None
    role: Role = DEFAULT_ROLE
    avatar_url: str | None = None
    is_active: bool = False
    approval_status: ApprovalStatus | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login_at: datetime | None = None

    @property
    def effective_status(self) -> ApprovalStatus:
        """Approval status with the legacy ``null`` rows resolved.

        Rows created before approvals existed have no status; an active one
        counts as approved, an inactive one as still pending.
        """
        if self.approval_status is None:
            return ApprovalStatus.APPROVED if self.is_active else ApprovalStatus.PENDING
        return self.approval_status

    @property
    def is_usable(self) -> bool:
        """Whether this profile may back an authenticated request."""
        return self.is_active and self.effective_status == ApprovalStatus.APPROVED

    def projection(self, fallback_email: str | None = None) -> dict[str, Any]:
        """Display projection returned by ``/auth/me`` and cached per user."""
        return {
            "id": self.id,
            "email": self.email or fallback_email,
            "phone": self.phone,
            "full_name": self.full_name,
            "role": self.role.value,
            "avatar_url": self.avatar_url,
            "is_active": self.is_active,
            "approval_status": (
                self.approval_status.value if self.approval_status else None
            ),
        }


class IdentityContext(BaseModel):
    """Verified, request-scoped identity handed to route handlers."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str = ""
    phone: str = ""
    role: Role
    full_name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
