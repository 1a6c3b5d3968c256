"""Account approval lifecycle.

Signup creates a ``pending`` profile that cannot log in. An admin moves it
to ``approved`` (login allowed) or ``rejected``. Rows from before approvals
existed carry no status and count as approved while active.

Allowed admin decisions, by effective current status::

    pending  -> approved | rejected
    approved -> approved            (idempotent, reactivates)
    rejected -> rejected | approved (re-approval)
"""

import logging
from datetime import UTC, datetime
from typing import Any

from supabase_auth.errors import AuthError

from erp_auth.db.client import ProfileRepository
from erp_auth.exceptions import (
    ConflictError,
    InternalError,
    InvalidTransitionError,
    NotFoundError,
    PendingApprovalError,
    UnauthenticatedError,
)
from erp_auth.models.identity import (
    DEFAULT_ROLE,
    ApprovalStatus,
    IdentityContext,
    Profile,
)
from erp_auth.models.requests import LoginRequest, SignupRequest
from erp_auth.services.credential_store import CredentialStore, IssuedSession
from erp_auth.services.session_cache import (
    ALL_USERS_KEY,
    PENDING_USERS_KEY,
    SessionCache,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

ALLOWED_TRANSITIONS: dict[ApprovalStatus, frozenset[ApprovalStatus]] = {
    ApprovalStatus.PENDING: frozenset({ApprovalStatus.APPROVED, ApprovalStatus.REJECTED}),
    ApprovalStatus.APPROVED: frozenset({ApprovalStatus.APPROVED}),
    ApprovalStatus.REJECTED: frozenset({ApprovalStatus.REJECTED, ApprovalStatus.APPROVED}),
}


def check_transition(profile: Profile, target: ApprovalStatus) -> None:
    """Raise InvalidTransitionError unless ``target`` is reachable."""
    current = profile.effective_status
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, target.value)


async def provision_account(
    credentials: CredentialStore,
    repository: ProfileRepository,
    email: str,
    password: str,
    profile_fields: dict[str, Any],
) -> Profile:
    """Create an auth identity plus its profile row.

    Duplicate emails are refused before anything is written, checking the
    profile table first and then Supabase Auth's own user list. The two
    stores are not transactional: if the profile insert fails, the new
    identity is deleted again, and a failed delete is only logged.

    Raises:
        ConflictError: If the email is already registered
        InternalError: If the profile could not be created
    """
    if await repository.get_profile_by_email(email) is not None:
        raise ConflictError("User with this email already exists")
    if await credentials.email_exists(email):
        logger.warning(f"Auth user without profile already exists for {email}")
        raise ConflictError("User with this email already exists")

    identity = await credentials.create_identity(
        email, password, full_name=profile_fields.get("full_name")
    )

    try:
        return await repository.create_profile(
            {"id": identity.id, "email": email, **profile_fields}
        )
    except InternalError:
        logger.error(f"Profile insert failed for {identity.id}; removing auth user")
        try:
            await credentials.delete_identity(identity.id)
        except AuthError as e:
            logger.error(f"Failed to delete orphaned auth user {identity.id}: {e}")
        raise InternalError("Failed to create user profile")


class ApprovalManager:
    """Signup, login and the admin approval decisions."""

    def __init__(
        self,
        credentials: CredentialStore,
        repository: ProfileRepository,
        cache: SessionCache,
        user_cache_ttl: int = 300,
        pending_cache_ttl: int = 60,
    ) -> None:
        self.credentials = credentials
        self.repository = repository
        self.cache = cache
        self.user_cache_ttl = user_cache_ttl
        self.pending_cache_ttl = pending_cache_ttl

    # -------------------------------------------------------------------------
    # Self-service
    # -------------------------------------------------------------------------

    async def signup(self, request: SignupRequest) -> Profile:
        """Register a new account awaiting approval."""
        profile = await provision_account(
            self.credentials,
            self.repository,
            request.email,
            request.password,
            {
                "phone": "",
                "full_name": request.full_name or "",
                "role": DEFAULT_ROLE.value,
                "is_active": False,
                "approval_status": ApprovalStatus.PENDING.value,
            },
        )
        await self.cache.invalidate(PENDING_USERS_KEY, ALL_USERS_KEY)
        logger.info(f"New signup {profile.id} awaiting approval")
        return profile

    async def login(self, request: LoginRequest) -> tuple[IssuedSession, Profile]:
        """Check credentials, then the approval gate.

        Wrong passwords and unknown emails yield the same error. Approval
        state is only disclosed once the password has been verified.

        Raises:
            UnauthenticatedError: On bad credentials
            PendingApprovalError: If the profile is not active and approved
        """
        session = await self.credentials.sign_in(request.email, request.password)
        if session is None:
            raise UnauthenticatedError(INVALID_CREDENTIALS)

        user_id = session.identity.id
        profile = await self.repository.get_profile(user_id)
        if profile is None:
            # Auth user with no profile row: queue it for review.
            logger.warning(f"Creating missing profile for {user_id} at login")
            profile = await self.repository.create_profile({
                "id": user_id,
                "email": session.identity.email or request.email,
                "phone": session.identity.phone or "",
                "role": DEFAULT_ROLE.value,
                "is_active": False,
                "approval_status": ApprovalStatus.PENDING.value,
            })
            await self.cache.invalidate(PENDING_USERS_KEY, ALL_USERS_KEY)

        if not profile.is_usable:
            await self._revoke(session.access_token)
            logger.info(
                f"Login blocked for {user_id}: "
                f"status={profile.effective_status.value}, active={profile.is_active}"
            )
            raise PendingApprovalError(profile.effective_status.value, profile.is_active)

        await self.repository.record_login(user_id)
        logger.info(f"User {user_id} logged in")
        return session, profile

    async def logout(self, context: IdentityContext, token: str) -> None:
        await self.credentials.sign_out(token)
        await self.cache.invalidate_user(context.id, lists=False)
        logger.info(f"User {context.id} logged out")

    async def current_user(self, context: IdentityContext) -> dict[str, Any]:
        """Profile projection for ``/auth/me``, served from cache when warm."""
        cached = await self.cache.get_user(context.id)
        if cached is not None:
            return cached

        profile = await self.repository.get_profile(context.id)
        if profile is None:
            raise NotFoundError("User profile not found")

        projection = profile.projection(fallback_email=context.email)
        await self.cache.set_user(context.id, projection, self.user_cache_ttl)
        return projection

    # -------------------------------------------------------------------------
    # Admin decisions
    # -------------------------------------------------------------------------

    async def pending_users(self) -> list[dict[str, Any]]:
        """Profiles awaiting a decision, newest first."""
        cached = await self.cache.get(PENDING_USERS_KEY)
        if cached is not None:
            return cached

        users = await self.repository.list_profiles(ApprovalStatus.PENDING)
        await self.cache.set(PENDING_USERS_KEY, users, self.pending_cache_ttl)
        return users

    async def approve(self, admin: IdentityContext, user_id: str) -> Profile:
        """Approve (or re-approve) an account and activate it."""
        profile = await self._get_for_decision(user_id)
        check_transition(profile, ApprovalStatus.APPROVED)

        update: dict[str, Any] = {"is_active": True}
        if profile.approval_status != ApprovalStatus.APPROVED:
            update.update({
                "approval_status": ApprovalStatus.APPROVED.value,
                "approved_by": admin.id,
                "approved_at": datetime.now(UTC).isoformat(),
            })

        updated = await self.repository.update_profile(user_id, update)
        if updated is None:
            raise NotFoundError("User not found")

        await self.cache.invalidate_user(user_id)
        logger.info(f"User {user_id} approved by {admin.id}")
        return updated

    async def reject(self, admin: IdentityContext, user_id: str) -> Profile:
        """Reject an account request. The profile and identity are kept."""
        profile = await self._get_for_decision(user_id)
        check_transition(profile, ApprovalStatus.REJECTED)

        updated = await self.repository.update_profile(user_id, {
            "is_active": False,
            "approval_status": ApprovalStatus.REJECTED.value,
        })
        if updated is None:
            raise NotFoundError("User not found")

        await self.cache.invalidate_user(user_id)
        logger.info(f"User {user_id} rejected by {admin.id}")
        return updated

    async def _get_for_decision(self, user_id: str) -> Profile:
        profile = await self.repository.get_profile(
            user_id, fields="id, is_active, approval_status"
        )
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    async def _revoke(self, token: str) -> None:
        """Best-effort revocation of a session that must not be used."""
        try:
            await self.credentials.sign_out(token)
        except InternalError:
            logger.warning("Could not revoke session of blocked login")
