"""Tests for bearer-token authentication."""

from unittest.mock import AsyncMock

import pytest

from erp_auth.exceptions import InternalError, UnauthenticatedError
from erp_auth.manager.authenticator import Authenticator, extract_bearer_token
from erp_auth.models.identity import IdentityContext, Role
from fakes import seed_user


@pytest.fixture
def authenticator(credentials, repository) -> Authenticator:
    return Authenticator(credentials, repository)


class TestExtractBearerToken:

    def test_extracts_token(self):
        assert extract_bearer_token("Bearer abc.def") == "abc.def"

    @pytest.mark.parametrize("header", [None, "", "abc", "Basic dXNlcg==", "bearer abc", "Bearer ", "Bearer    "])
    def test_rejects_malformed_headers(self, header):
        with pytest.raises(UnauthenticatedError) as exc_info:
            extract_bearer_token(header)
        assert exc_info.value.message == "No token provided"


class TestAuthenticate:
    """Tests for Authenticator.authenticate."""

    @pytest.mark.asyncio
    async def test_valid_token_returns_context(self, authenticator, repository, credentials):
        user_id, token = seed_user(
            repository, credentials, "a@x.com", role="developers", full_name="Ada"
        )

        ctx = await authenticator.authenticate(f"Bearer {token}")

        assert isinstance(ctx, IdentityContext)
        assert ctx.id == user_id
        assert ctx.email == "a@x.com"
        assert ctx.role == Role.DEVELOPERS
        assert ctx.full_name == "Ada"
        assert ctx.phone == ""

    @pytest.mark.asyncio
    async def test_unknown_token_is_unauthenticated(self, authenticator, repository):
        with pytest.raises(UnauthenticatedError) as exc_info:
            await authenticator.authenticate("Bearer not-a-real-token")

        assert exc_info.value.message == "Invalid or expired token"
        assert repository.reads == 0

    @pytest.mark.asyncio
    async def test_missing_header_never_reaches_store(self, repository):
        credentials = AsyncMock()
        authenticator = Authenticator(credentials, repository)

        with pytest.raises(UnauthenticatedError):
            await authenticator.authenticate(None)

        credentials.verify_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_identity_without_profile_is_unauthenticated(
        self, authenticator, credentials
    ):
        user_id = credentials.add_user("ghost@x.com", "secret1")
        token = credentials.issue_token(user_id)

        with pytest.raises(UnauthenticatedError) as exc_info:
            await authenticator.authenticate(f"Bearer {token}")

        assert exc_info.value.message == "User profile not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,active",
        [("pending", False), ("rejected", False), ("approved", False), (None, False)],
    )
    async def test_unusable_profile_is_unauthenticated(
        self, authenticator, repository, credentials, status, active
    ):
        _, token = seed_user(
            repository, credentials, "p@x.com", approval_status=status, is_active=active
        )

        with pytest.raises(UnauthenticatedError):
            await authenticator.authenticate(f"Bearer {token}")

    @pytest.mark.asyncio
    async def test_legacy_profile_without_status_is_accepted(
        self, authenticator, repository, credentials
    ):
        user_id, token = seed_user(
            repository, credentials, "old@x.com", approval_status=None, is_active=True
        )

        ctx = await authenticator.authenticate(f"Bearer {token}")

        assert ctx.id == user_id

    @pytest.mark.asyncio
    async def test_store_outage_propagates_as_internal(self, repository):
        credentials = AsyncMock()
        credentials.verify_token.side_effect = InternalError("Authentication failed")
        authenticator = Authenticator(credentials, repository)

        with pytest.raises(InternalError):
            await authenticator.authenticate("Bearer abc")
