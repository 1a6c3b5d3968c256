"""User management: listing, admin edits, role changes, self-service edits."""

import logging
from datetime import UTC, datetime
from typing import Any

from erp_auth.db.client import ProfileRepository
from erp_auth.exceptions import ForbiddenError, NotFoundError, RequestValidationFailed
from erp_auth.manager.approval import provision_account
from erp_auth.manager.authorizer import can_access_user
from erp_auth.models.identity import ApprovalStatus, IdentityContext, Profile, Role
from erp_auth.models.requests import (
    CreateUserRequest,
    ProfileUpdateRequest,
    UserUpdateRequest,
)
from erp_auth.services.credential_store import CredentialStore
from erp_auth.services.session_cache import ALL_USERS_KEY, PENDING_USERS_KEY, SessionCache

logger = logging.getLogger(__name__)


class UserAdmin:
    """Operations on other users' profiles.

    Every mutation drops the ``user:<id>`` entry as well as the cached admin
    lists, so a changed role or flag is visible on the user's next request.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        repository: ProfileRepository,
        cache: SessionCache,
        list_cache_ttl: int = 120,
    ) -> None:
        self.credentials = credentials
        self.repository = repository
        self.cache = cache
        self.list_cache_ttl = list_cache_ttl

    async def list_users(self) -> list[dict[str, Any]]:
        cached = await self.cache.get(ALL_USERS_KEY)
        if cached is not None:
            return cached

        users = await self.repository.list_profiles()
        await self.cache.set(ALL_USERS_KEY, users, self.list_cache_ttl)
        return users

    async def get_user(self, actor: IdentityContext, user_id: str) -> Profile:
        self._check_access(actor, user_id)
        profile = await self.repository.get_profile(user_id)
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    async def create_user(
        self,
        admin: IdentityContext,
        request: CreateUserRequest,
    ) -> Profile:
        """Create an account that is approved from the start."""
        profile = await provision_account(
            self.credentials,
            self.repository,
            request.email,
            request.password,
            {
                "phone": request.phone or "",
                "full_name": request.full_name or "",
                "role": request.role.value,
                "is_active": True,
                "approval_status": ApprovalStatus.APPROVED.value,
                "approved_by": admin.id,
                "approved_at": datetime.now(UTC).isoformat(),
            },
        )
        await self.cache.invalidate(ALL_USERS_KEY, PENDING_USERS_KEY)
        logger.info(f"User {profile.id} created by admin {admin.id}")
        return profile

    async def update_user(
        self,
        admin: IdentityContext,
        user_id: str,
        request: UserUpdateRequest,
    ) -> Profile:
        data = request.model_dump(exclude_unset=True, mode="json")
        if not data:
            raise RequestValidationFailed("No fields to update")
        profile = await self._update(user_id, data)
        logger.info(f"User {user_id} updated by admin {admin.id}: {sorted(data)}")
        return profile

    async def update_role(
        self,
        admin: IdentityContext,
        user_id: str,
        role: Role,
    ) -> Profile:
        profile = await self._update(user_id, {"role": role.value})
        logger.info(f"User {user_id} role set to {role.value} by {admin.id}")
        return profile

    async def update_profile(
        self,
        actor: IdentityContext,
        user_id: str,
        request: ProfileUpdateRequest,
    ) -> Profile:
        """Self-service edit of display attributes."""
        self._check_access(actor, user_id)
        data = request.model_dump(exclude_unset=True)
        return await self._update(user_id, data)

    async def _update(self, user_id: str, data: dict[str, Any]) -> Profile:
        data["updated_at"] = datetime.now(UTC).isoformat()
        profile = await self.repository.update_profile(user_id, data)
        if profile is None:
            raise NotFoundError("User not found")
        await self.cache.invalidate_user(user_id)
        return profile

    @staticmethod
    def _check_access(actor: IdentityContext, user_id: str) -> None:
        if not can_access_user(actor, user_id):
            raise ForbiddenError("Forbidden")
