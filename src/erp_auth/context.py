"""Process-wide application context.

Holds the store clients and the managers built on them. Created once in
the application lifespan and handed to request handlers through FastAPI
dependencies.
"""

import logging
from dataclasses import dataclass, field

from erp_auth.config import Settings
from erp_auth.db.client import ProfileRepository
from erp_auth.manager.approval import ApprovalManager
from erp_auth.manager.authenticator import Authenticator
from erp_auth.manager.user_admin import UserAdmin
from erp_auth.services.credential_store import CredentialStore
from erp_auth.services.session_cache import SessionCache

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Injected clients plus the managers wired to them."""

    settings: Settings
    repository: ProfileRepository
    credentials: CredentialStore
    cache: SessionCache
    authenticator: Authenticator = field(init=False)
    approvals: ApprovalManager = field(init=False)
    users: UserAdmin = field(init=False)

    def __post_init__(self) -> None:
        self.authenticator = Authenticator(self.credentials, self.repository)
        self.approvals = ApprovalManager(
            self.credentials,
            self.repository,
            self.cache,
            user_cache_ttl=self.settings.user_cache_ttl,
            pending_cache_ttl=self.settings.pending_users_cache_ttl,
        )
        self.users = UserAdmin(
            self.credentials,
            self.repository,
            self.cache,
            list_cache_ttl=self.settings.all_users_cache_ttl,
        )

    @classmethod
    async def create(cls, settings: Settings) -> "AppContext":
        """Connect to Supabase and Redis."""
        repository = await ProfileRepository.create(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )
        credentials = await CredentialStore.create(
            settings.supabase_url,
            settings.supabase_anon_key,
            settings.supabase_service_role_key,
        )
        cache = SessionCache.from_settings(
            settings.redis_host,
            settings.redis_port,
            settings.redis_password,
            settings.redis_db,
        )
        if await cache.ping():
            logger.info("Redis connected successfully")
        else:
            logger.warning("Redis unreachable; serving without session cache")
        return cls(
            settings=settings,
            repository=repository,
            credentials=credentials,
            cache=cache,
        )

    async def aclose(self) -> None:
        await self.cache.aclose()
