"""Configuration and environment loading for ERP Auth."""

from functools import lru_cache

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from erp_auth.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str
    supabase_service_role_key: str  # privileged: profile table + admin auth API
    supabase_anon_key: str  # public: sign-in and token verification

    # Redis
    redis_host: str
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False
    app_url: str | None = None

    # Cache TTLs (seconds)
    user_cache_ttl: int = 300
    pending_users_cache_ttl: int = 60
    all_users_cache_ttl: int = 120


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        ConfigurationError: If a required variable is missing or invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        fields = sorted(
            ".".join(str(part) for part in err["loc"]).upper()
            for err in e.errors()
        )
        raise ConfigurationError(fields) from e
