"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    service_name: str = "ordre-change-order-api"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # CORS
    cors_allow_origins: list[str] = ["http://localhost:3000", "http://localhost:4200"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
