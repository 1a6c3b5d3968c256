"""FastAPI dependencies for authentication and role gating.

Usage::

    @router.get("/pending-users")
    async def pending(admin: AdminUser, ctx: Context): ...

    @router.get("/leads", dependencies=[Depends(require_sales)])
    async def leads(...): ...
"""

import logging
from typing import Annotated

from fastapi import Depends, Header, Request

from erp_auth.context import AppContext
from erp_auth.manager.authenticator import extract_bearer_token
from erp_auth.manager.authorizer import (
    ADMIN_ONLY,
    DESIGNER_ROLES,
    DEVELOPER_ROLES,
    SALES_ROLES,
    authorize,
)
from erp_auth.models.identity import IdentityContext, Role

logger = logging.getLogger(__name__)


def get_context(request: Request) -> AppContext:
    """The application context built at startup."""
    return request.app.state.context


async def get_identity_context(
    ctx: Annotated[AppContext, Depends(get_context)],
    authorization: Annotated[str | None, Header()] = None,
) -> IdentityContext:
    """Authenticate the request's bearer token."""
    return await ctx.authenticator.authenticate(authorization)


def get_bearer_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    return extract_bearer_token(authorization)


def require_role(*roles: Role):
    """Return a dependency that admits only the given roles."""

    async def _check(
        context: Annotated[IdentityContext, Depends(get_identity_context)],
    ) -> IdentityContext:
        return authorize(context, roles)

    return _check


require_admin = require_role(*ADMIN_ONLY)
require_sales = require_role(*SALES_ROLES)
require_developers = require_role(*DEVELOPER_ROLES)
require_designers = require_role(*DESIGNER_ROLES)

# Type aliases for dependency injection
Context = Annotated[AppContext, Depends(get_context)]
CurrentUser = Annotated[IdentityContext, Depends(get_identity_context)]
AdminUser = Annotated[IdentityContext, Depends(require_admin)]
BearerToken = Annotated[str, Depends(get_bearer_token)]
