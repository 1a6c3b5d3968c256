"""Authentication, authorization and account lifecycle."""

from erp_auth.manager.approval import ApprovalManager, check_transition, provision_account
from erp_auth.manager.authenticator import Authenticator, extract_bearer_token
from erp_auth.manager.authorizer import (
    ADMIN_ONLY,
    DESIGNER_ROLES,
    DEVELOPER_ROLES,
    SALES_ROLES,
    authorize,
    can_access_user,
)
from erp_auth.manager.user_admin import UserAdmin

__all__ = [
    "ADMIN_ONLY",
    "ApprovalManager",
    "Authenticator",
    "authorize",
    "can_access_user",
    "check_transition",
    "DESIGNER_ROLES",
    "DEVELOPER_ROLES",
    "extract_bearer_token",
    "provision_account",
    "SALES_ROLES",
    "UserAdmin",
]
