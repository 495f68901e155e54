from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
    )

    # Database (managed Postgres holding server_analytics / auto_delete_channels)
    # Leave empty to run without a database
    database_url: str = ""

    # Object storage
    supabase_url: str = ""
    supabase_key: str = ""
    maps_bucket: str = "maps"
    maps_folder: str = "maps"
    max_map_size_mb: int = 100

    # Discord
    discord_bot_token: str = ""
    discord_api_url: str = "https://discord.com/api/v10"

    # Outbound HTTP
    http_timeout_seconds: float = 15.0

    # Analytics
    dashboard_timezone: str = "UTC"
    default_stats_days: int = 30

    # Auth (empty hash disables login)
    dashboard_password_hash: str = ""
    session_secret: str = "dev-secret-change-in-production"
    session_expire_hours: int = 24 * 7  # 1 week

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @field_validator("database_url")
    @classmethod
    def use_psycopg_driver(cls, v):
        # plain postgres URLs would make SQLAlchemy load psycopg2
        for scheme in ("postgresql://", "postgres://"):
            if v.startswith(scheme):
                return "postgresql+psycopg://" + v[len(scheme):]
        return v

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url)

    @property
    def storage_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def discord_configured(self) -> bool:
        return bool(self.discord_bot_token)

    @property
    def auth_enabled(self) -> bool:
        return bool(self.dashboard_password_hash)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
