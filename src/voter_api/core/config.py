"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Store
    redis_url: str = Field(
        default="redis://0.0.0.0:6379",
        description="Redis (with RedisJSON) connection URL or bare host:port address",
    )

    @field_validator("redis_url")
    @classmethod
    def normalize_redis_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "redis_url must not be empty"
            raise ValueError(msg)
        if "://" not in v:
            return f"redis://{v}"
        return v

    history_update_max_retries: int = Field(
        default=5,
        description="Attempts for optimistic voter history updates before giving up",
        gt=0,
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit console logs as JSON lines",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins",
    )

    # API
    api_prefix: str = Field(
        default="",
        description="Prefix the voter routes are mounted under",
    )
    api_version: str = Field(
        default="1.0.0",
        description="Version reported by the app and the health endpoint",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
