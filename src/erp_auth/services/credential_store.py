"""Supabase Auth adapter.

Supabase owns password hashing, token signing and the ``auth.users``
table. Two clients are kept: the anon client signs users in and verifies
bearer tokens the same way a browser would, the service-role client runs
the admin API (user listing, creation, deletion, session revocation).
"""

import logging
from dataclasses import dataclass
from typing import Any

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions
from supabase_auth.errors import AuthApiError, AuthError

from erp_auth.exceptions import ConflictError, InternalError, RequestValidationFailed
from erp_auth.models.identity import Identity

logger = logging.getLogger(__name__)

# Page size when scanning auth.users for duplicate emails
LIST_USERS_PAGE_SIZE = 200

_DUPLICATE_CODES = {"email_exists", "user_already_exists"}


@dataclass(frozen=True)
class IssuedSession:
    """Result of a successful password sign-in."""

    identity: Identity
    access_token: str


def _to_identity(user: Any) -> Identity:
    return Identity(
        id=str(user.id),
        email=getattr(user, "email", None),
        phone=getattr(user, "phone", None) or None,
    )


class CredentialStore:
    """Identity verification and lifecycle against Supabase Auth."""

    def __init__(self, anon: AsyncClient, admin: AsyncClient) -> None:
        self.anon = anon
        self.admin = admin

    @classmethod
    async def create(
        cls,
        url: str,
        anon_key: str,
        service_role_key: str,
    ) -> "CredentialStore":
        """Build both clients.

        Sessions are never persisted on the shared clients: every token is
        passed explicitly, so concurrent requests cannot see each other's
        session state.
        """
        anon = await acreate_client(
            url,
            anon_key,
            options=AsyncClientOptions(persist_session=False, auto_refresh_token=False),
        )
        admin = await acreate_client(
            url,
            service_role_key,
            options=AsyncClientOptions(persist_session=False, auto_refresh_token=False),
        )
        return cls(anon=anon, admin=admin)

    async def verify_token(self, token: str) -> Identity | None:
        """Resolve a bearer token to its identity.

        Returns:
            The identity, or None if the token is invalid or expired

        Raises:
            InternalError: If the auth service could not be reached
        """
        try:
            response = await self.anon.auth.get_user(token)
        except AuthApiError as e:
            if e.status >= 500:
                logger.error(f"Token verification failed: {e}")
                raise InternalError("Authentication failed") from e
            logger.debug(f"Token rejected by auth service: {e}")
            return None
        except AuthError as e:
            logger.error(f"Token verification failed: {e}")
            raise InternalError("Authentication failed") from e

        if response is None or response.user is None:
            return None
        return _to_identity(response.user)

    async def sign_in(self, email: str, password: str) -> IssuedSession | None:
        """Verify an email/password pair.

        Returns:
            The issued session, or None for bad credentials. Callers must not
            tell the two apart in responses.
        """
        try:
            response = await self.anon.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as e:
            if e.status >= 500:
                logger.error(f"Sign-in failed for {email}: {e}")
                raise InternalError("Login failed") from e
            logger.info(f"Sign-in rejected for {email}: {e}")
            return None
        except AuthError as e:
            logger.error(f"Sign-in failed for {email}: {e}")
            raise InternalError("Login failed") from e

        if response.user is None or response.session is None:
            return None
        return IssuedSession(
            identity=_to_identity(response.user),
            access_token=response.session.access_token,
        )

    async def sign_out(self, token: str) -> None:
        """Revoke every session behind the given access token."""
        try:
            await self.admin.auth.admin.sign_out(token)
        except AuthApiError as e:
            if e.status >= 500:
                logger.error(f"Sign-out failed: {e}")
                raise InternalError("Logout failed") from e
            # Token already revoked or expired; nothing left to invalidate.
            logger.info(f"Sign-out ignored by auth service: {e}")
        except AuthError as e:
            logger.error(f"Sign-out failed: {e}")
            raise InternalError("Logout failed") from e

    async def email_exists(self, email: str) -> bool:
        """Scan the auth user list for an email, page by page.

        Costs one admin API call per ``LIST_USERS_PAGE_SIZE`` users. Callers
        check the profile table first, so this only runs for emails with no
        profile row.
        """
        target = email.lower()
        page = 1
        while True:
            try:
                users = await self.admin.auth.admin.list_users(
                    page=page, per_page=LIST_USERS_PAGE_SIZE
                )
            except AuthError as e:
                logger.error(f"Listing auth users failed: {e}")
                raise InternalError("Failed to create account") from e

            if any((user.email or "").lower() == target for user in users):
                return True
            if len(users) < LIST_USERS_PAGE_SIZE:
                return False
            page += 1

    async def create_identity(
        self,
        email: str,
        password: str,
        full_name: str | None = None,
    ) -> Identity:
        """Create a confirmed auth user.

        Email confirmation is skipped: access is gated by admin approval
        instead.

        Raises:
            ConflictError: If the auth service already has this email
            RequestValidationFailed: If the auth service rejects the input
            InternalError: On any other failure
        """
        try:
            response = await self.admin.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"full_name": full_name or ""},
            })
        except AuthApiError as e:
            code = getattr(e, "code", None)
            if code in _DUPLICATE_CODES or "already" in e.message.lower():
                raise ConflictError("User with this email already exists") from e
            if 400 <= e.status < 500:
                raise RequestValidationFailed(e.message) from e
            logger.error(f"Creating auth user failed: {e}")
            raise InternalError("Failed to create account") from e
        except AuthError as e:
            logger.error(f"Creating auth user failed: {e}")
            raise InternalError("Failed to create account") from e

        if response.user is None:
            raise InternalError("Failed to create account")
        return _to_identity(response.user)

    async def delete_identity(self, user_id: str) -> None:
        """Delete an auth user. Errors propagate to the caller."""
        await self.admin.auth.admin.delete_user(user_id)
