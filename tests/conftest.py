"""Global test configuration for ERP Auth."""

import os

import pytest
import pytest_asyncio

from fakes import FakeCredentialStore, FakeProfileRepository, FakeRedis


@pytest.fixture(autouse=True, scope="session")
def _set_test_env_vars():
    """Set dummy environment variables for Settings validation.

    Only sets values that aren't already present, so real env vars take
    precedence (useful for integration tests).
    """
    defaults = {
        "SUPABASE_URL": "https://test.supabase.co",
        "SUPABASE_SERVICE_ROLE_KEY": "test-service-role-key",
        "SUPABASE_ANON_KEY": "test-anon-key",
        "REDIS_HOST": "localhost",
    }
    originals = {}
    for key, value in defaults.items():
        if key not in os.environ:
            os.environ[key] = value
            originals[key] = None
        else:
            originals[key] = os.environ[key]

    # Clear the lru_cache on get_settings so it picks up the new env vars
    from erp_auth.config import get_settings
    get_settings.cache_clear()

    yield

    # Restore original env state
    for key, original in originals.items():
        if original is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original
    get_settings.cache_clear()


@pytest.fixture
def settings():
    from erp_auth.config import get_settings
    return get_settings()


@pytest.fixture
def repository() -> FakeProfileRepository:
    return FakeProfileRepository()


@pytest.fixture
def credentials() -> FakeCredentialStore:
    return FakeCredentialStore()


@pytest.fixture
def redis_client() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def cache(redis_client):
    from erp_auth.services.session_cache import SessionCache
    return SessionCache(redis_client)


@pytest.fixture
def context(settings, repository, credentials, cache):
    from erp_auth.context import AppContext
    return AppContext(
        settings=settings,
        repository=repository,
        credentials=credentials,
        cache=cache,
    )


@pytest_asyncio.fixture
async def client(context):
    """HTTP client bound to an app wired to the in-memory fakes."""
    from httpx import ASGITransport, AsyncClient
    from erp_auth.main import create_app

    app = create_app(context=context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
