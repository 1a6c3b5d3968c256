"""FastAPI routes and dependencies for ERP Auth."""

from erp_auth.api.deps import (
    AdminUser,
    Context,
    CurrentUser,
    require_admin,
    require_designers,
    require_developers,
    require_role,
    require_sales,
)
from erp_auth.api.errors import register_exception_handlers
from erp_auth.api.routes import router

__all__ = [
    "AdminUser",
    "Context",
    "CurrentUser",
    "register_exception_handlers",
    "require_admin",
    "require_designers",
    "require_developers",
    "require_role",
    "require_sales",
    "router",
]
