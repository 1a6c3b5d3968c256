"""Role gate.

Pure function of role membership: no I/O, no caching.
"""

import logging
from collections.abc import Iterable

from erp_auth.exceptions import ForbiddenError, UnauthenticatedError
from erp_auth.models.identity import IdentityContext, Role

logger = logging.getLogger(__name__)

# Route presets
ADMIN_ONLY = (Role.ADMIN,)
SALES_ROLES = (Role.ADMIN, Role.SALES)
DEVELOPER_ROLES = (Role.ADMIN, Role.DEVELOPERS)
DESIGNER_ROLES = (Role.ADMIN, Role.DESIGNERS)


def authorize(
    context: IdentityContext | None,
    allowed_roles: Iterable[Role],
) -> IdentityContext:
    """Allow or deny a verified identity.

    Args:
        context: The identity produced by the authenticator, if any
        allowed_roles: Roles accepted by the calling route

    Returns:
        The same context, for chaining

    Raises:
        UnauthenticatedError: If no identity is present
        ForbiddenError: If the identity's role is not allowed
    """
    allowed = tuple(allowed_roles)
    if context is None:
        raise UnauthenticatedError("Authentication required")

    if context.role not in allowed:
        names = [role.value for role in allowed]
        logger.warning(
            f"Access denied: user {context.id} (role={context.role.value}) "
            f"needs one of {names}"
        )
        raise ForbiddenError(
            f"Access denied. Required roles: {', '.join(names)}",
            allowed_roles=names,
        )
    return context


def can_access_user(context: IdentityContext, user_id: str) -> bool:
    """Owners may act on their own profile; admins on any."""
    return context.id == user_id or context.is_admin
