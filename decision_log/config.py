"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Decision Log"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Database (libSQL / local SQLite file)
    database_url: str = Field(default="file:decisions.db")
    database_auth_token: str | None = Field(default=None)

    # Search and filter limits
    search_default_limit: int = Field(default=20, ge=1)
    search_max_limit: int = Field(
        default=100,
        ge=1,
        description="Requested page sizes above this are clamped down",
    )
    search_max_length: int = Field(
        default=500,
        ge=1,
        description="Maximum characters in a free-text search term",
    )
    search_max_tags: int = Field(
        default=20,
        ge=1,
        description="Maximum number of tags in a single filter request",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def is_development(self) -> bool:
        """Whether internal error detail may be exposed to callers."""
        return self.app_env.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
