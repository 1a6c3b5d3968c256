"""Bearer-token authenticator.

Turns an ``Authorization`` header into an :class:`IdentityContext`:

1. The header must be ``Bearer <token>``.
2. Supabase Auth must accept the token.
3. A profile row must exist for the identity (no auto-provisioning).
4. The profile must be active and approved.

Any failure raises :class:`UnauthenticatedError`; a context is only ever
returned whole.
"""

import logging

from erp_auth.db.client import AUTH_FIELDS, ProfileRepository
from erp_auth.exceptions import UnauthenticatedError
from erp_auth.models.identity import IdentityContext
from erp_auth.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    """Pull the token out of an Authorization header value.

    Raises:
        UnauthenticatedError: If the header is missing or malformed
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthenticatedError("No token provided")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthenticatedError("No token provided")
    return token


class Authenticator:
    """Verifies tokens and loads the matching profile."""

    def __init__(
        self,
        credentials: CredentialStore,
        repository: ProfileRepository,
    ) -> None:
        self.credentials = credentials
        self.repository = repository

    async def authenticate(self, authorization: str | None) -> IdentityContext:
        """Build the identity context for a request.

        Args:
            authorization: Raw ``Authorization`` header value

        Returns:
            The verified identity context

        Raises:
            UnauthenticatedError: On any verification failure
            InternalError: If a backing store is unreachable
        """
        token = extract_bearer_token(authorization)

        identity = await self.credentials.verify_token(token)
        if identity is None:
            logger.warning(f"Invalid or expired token: {token[:8]}...")
            raise UnauthenticatedError("Invalid or expired token")

        profile = await self.repository.get_profile(identity.id, fields=AUTH_FIELDS)
        if profile is None:
            logger.error(f"No profile for authenticated identity {identity.id}")
            raise UnauthenticatedError("User profile not found")

        if not profile.is_usable:
            logger.warning(
                f"Blocked request from unusable profile {identity.id} "
                f"(is_active={profile.is_active}, "
                f"approval_status={profile.effective_status.value})"
            )
            raise UnauthenticatedError("Account is inactive or awaiting approval")

        return IdentityContext(
            id=identity.id,
            email=identity.email or profile.email or "",
            phone=profile.phone or "",
            role=profile.role,
            full_name=profile.full_name,
        )
