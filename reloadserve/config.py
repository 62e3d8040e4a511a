"""
Configuration module for the development server.
Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Network
    address: str = Field(default="127.0.0.1:1111", alias="RELOADSERVE_ADDRESS")
    request_timeout: float = Field(default=30.0, alias="RELOADSERVE_REQUEST_TIMEOUT")  # seconds

    # Live reload
    debounce_ms: int = Field(default=500, alias="RELOADSERVE_DEBOUNCE_MS")
    broadcast_timeout_ms: int = Field(default=1000, alias="RELOADSERVE_BROADCAST_TIMEOUT_MS")

    # Logging
    log_level: str = Field(default="info", alias="RELOADSERVE_LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_prefix = "RELOADSERVE_"
        case_sensitive = False
        populate_by_name = True
        # The .env usually belongs to the project being served
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
