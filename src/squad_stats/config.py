"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Hosted store (env vars: SUPABASE_URL, SUPABASE_ANON_KEY)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    request_timeout: float = 10.0

    # Local DuckDB file, used when no hosted store is configured
    database_path: str = ""

    # Static CSV resource imported by POST /api/import
    csv_import_path: str = "data/player-statistics.csv"

    @computed_field
    @property
    def use_remote_store(self) -> bool:
        """Whether both hosted store credentials are present."""
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
