"""Supabase profile repository.

All reads and writes against ``user_profiles`` go through here, using the
service-role client so row-level security does not hide other users from
admins.
"""

import logging
import time
from datetime import UTC, datetime
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from erp_auth.exceptions import InternalError
from erp_auth.models.identity import ApprovalStatus, Profile

logger = logging.getLogger(__name__)

PROFILES_TABLE = "user_profiles"

# Columns the authenticator needs; everything else stays in the database.
AUTH_FIELDS = "id, email, phone, role, full_name, is_active, approval_status"

LIST_FIELDS = (
    "id, email, phone, full_name, role, avatar_url, is_active, "
    "approval_status, created_at, last_login_at"
)


class ProfileRepository:
    """Client for the ``user_profiles`` table."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    @classmethod
    async def create(cls, url: str, service_role_key: str) -> "ProfileRepository":
        """Build a repository backed by a new service-role client."""
        client = await acreate_client(url, service_role_key)
        return cls(client)

    async def _execute(self, query: Any, action: str) -> list[dict[str, Any]]:
        """Run a query, turning store failures into a generic InternalError."""
        try:
            result = await query.execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Profile repository failed to {action}: {e}")
            raise InternalError(f"Failed to {action}") from e
        return result.data or []

    def _table(self) -> Any:
        return self.client.table(PROFILES_TABLE)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_profile(
        self,
        user_id: str,
        fields: str = "*",
    ) -> Profile | None:
        """Get a profile by user ID.

        Args:
            user_id: The identity ID (same as the profile ID)
            fields: Column list to select

        Returns:
            Profile if found, None otherwise
        """
        rows = await self._execute(
            self._table().select(fields).eq("id", user_id).limit(1),
            "fetch user profile",
        )
        if rows:
            return Profile(**rows[0])
        return None

    async def get_profile_by_email(self, email: str) -> Profile | None:
        """Look up a profile by email address."""
        rows = await self._execute(
            self._table().select("id, email").eq("email", email).limit(1),
            "look up user by email",
        )
        if rows:
            return Profile(**rows[0])
        return None

    async def list_profiles(
        self,
        status: ApprovalStatus | None = None,
    ) -> list[dict[str, Any]]:
        """List profiles, newest first.

        Args:
            status: Only return profiles with this approval status

        Returns:
            Raw rows, ready to be serialized into the cache
        """
        query = self._table().select(LIST_FIELDS)
        if status is not None:
            query = query.eq("approval_status", status.value)
        return await self._execute(
            query.order("created_at", desc=True),
            "list users",
        )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_profile(self, data: dict[str, Any]) -> Profile:
        """Insert a new profile row and return it."""
        rows = await self._execute(
            self._table().insert(data),
            "create user profile",
        )
        if not rows:
            raise InternalError("Failed to create user profile")
        logger.debug(f"Created profile {data.get('id')}")
        return Profile(**rows[0])

    async def update_profile(
        self,
        user_id: str,
        data: dict[str, Any],
    ) -> Profile | None:
        """Apply a single-statement update.

        Returns:
            The updated profile, or None if no row has that ID
        """
        rows = await self._execute(
            self._table().update(data).eq("id", user_id),
            "update user profile",
        )
        if rows:
            logger.debug(f"Updated profile {user_id}: {sorted(data)}")
            return Profile(**rows[0])
        return None

    async def record_login(self, user_id: str) -> None:
        """Stamp ``last_login_at``."""
        await self._execute(
            self._table()
            .update({"last_login_at": datetime.now(UTC).isoformat()})
            .eq("id", user_id),
            "record login",
        )

    # -------------------------------------------------------------------------
    # Health Check
    # -------------------------------------------------------------------------

    async def health_check(self) -> dict[str, Any]:
        """Check database connectivity.

        Returns:
            Dict with ``healthy``, ``latency_ms`` and ``error``
        """
        start = time.perf_counter()
        try:
            await self._table().select("id").limit(1).execute()
            latency_ms = (time.perf_counter() - start) * 1000
            return {"healthy": True, "latency_ms": round(latency_ms, 2), "error": None}
        except (APIError, httpx.HTTPError) as e:
            latency_ms = (time.perf_counter() - start) * 1000
            logger.error(f"Database health check failed: {e}")
            return {
                "healthy": False,
                "latency_ms": round(latency_ms, 2),
                "error": str(e),
            }
