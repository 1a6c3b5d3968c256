"""Tests for the Supabase profile repository."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from postgrest.exceptions import APIError

from erp_auth.db.client import AUTH_FIELDS, ProfileRepository
from erp_auth.exceptions import InternalError
from erp_auth.models.identity import ApprovalStatus


def _client(data=None, error: Exception | None = None) -> tuple[MagicMock, MagicMock]:
    """A supabase client whose query builder chains back to itself."""
    query = MagicMock()
    for method in ("select", "eq", "limit", "order", "insert", "update"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute = AsyncMock(side_effect=error)
    else:
        query.execute = AsyncMock(return_value=MagicMock(data=data))
    client = MagicMock()
    client.table.return_value = query
    return client, query


class TestReads:

    @pytest.mark.asyncio
    async def test_get_profile_selects_requested_fields(self):
        client, query = _client([{"id": "u-1", "role": "admin", "is_active": True,
                                  "approval_status": "approved"}])
        repo = ProfileRepository(client)

        profile = await repo.get_profile("u-1", fields=AUTH_FIELDS)

        assert profile.id == "u-1"
        assert profile.is_usable
        client.table.assert_called_with("user_profiles")
        query.select.assert_called_once_with(AUTH_FIELDS)
        query.eq.assert_called_once_with("id", "u-1")

    @pytest.mark.asyncio
    async def test_get_profile_missing(self):
        client, _ = _client([])
        assert await ProfileRepository(client).get_profile("u-1") is None

    @pytest.mark.asyncio
    async def test_list_profiles_filters_by_status(self):
        client, query = _client([{"id": "u-1"}])

        rows = await ProfileRepository(client).list_profiles(ApprovalStatus.PENDING)

        assert rows == [{"id": "u-1"}]
        query.eq.assert_called_once_with("approval_status", "pending")
        query.order.assert_called_once_with("created_at", desc=True)


class TestWrites:

    @pytest.mark.asyncio
    async def test_update_profile_returns_updated_row(self):
        client, query = _client([{"id": "u-1", "role": "designers"}])

        profile = await ProfileRepository(client).update_profile("u-1", {"role": "designers"})

        assert profile.role.value == "designers"
        query.update.assert_called_once_with({"role": "designers"})

    @pytest.mark.asyncio
    async def test_update_unknown_row_returns_none(self):
        client, _ = _client([])
        assert await ProfileRepository(client).update_profile("nope", {"role": "sales"}) is None

    @pytest.mark.asyncio
    async def test_store_error_becomes_internal_error(self):
        client, _ = _client(error=APIError({"message": "relation does not exist"}))

        with pytest.raises(InternalError) as exc_info:
            await ProfileRepository(client).create_profile({"id": "u-1"})

        assert exc_info.value.message == "Failed to create user profile"
        assert "relation" not in exc_info.value.message


class TestHealthCheck:

    @pytest.mark.asyncio
    async def test_healthy(self):
        client, _ = _client([{"id": "u-1"}])
        result = await ProfileRepository(client).health_check()
        assert result["healthy"] is True
        assert result["error"] is None

    @pytest.mark.asyncio
    async def test_unhealthy(self):
        client, _ = _client(error=APIError({"message": "down"}))
        result = await ProfileRepository(client).health_check()
        assert result["healthy"] is False
