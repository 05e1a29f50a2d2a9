"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Console core settings.

    All values loaded from .env file or environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # REMOTE API
    # ===================
    api_base_url: str = Field(
        default="http://localhost:8000/api",
        description="Base URL of the export-readiness backend"
    )
    api_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Per-request timeout in seconds"
    )
    api_token: Optional[str] = Field(
        None,
        description="Bearer token used when no session context is passed"
    )

    # ===================
    # LISTS
    # ===================
    default_page_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Page size for list surfaces (buyer requests, catalogs)"
    )
    reorder_list_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="How many rows a reorderable list fetches at once"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
