"""
Configuration management for personstore.

Environment-driven configuration using Pydantic's `BaseSettings`. Values are
read from the process environment and, when present, a local `.env` file.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings

from personstore.core.exceptions import ConfigError


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    # Storage connection
    MONGO_URI: Optional[str] = None
    MONGO_DATABASE: Optional[str] = None
    MONGO_COLLECTION: str = "people"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: PositiveInt = 30000

    # Logging
    LOG_LEVEL: str = Field("INFO", pattern=r"^(?i:debug|info|warning|error|critical)$")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @field_validator("MONGO_URI", "MONGO_DATABASE", mode="before")
    def _blank_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def require_mongo_uri(self) -> str:
        """Return the connection string or fail with `ConfigError`."""

        if not self.MONGO_URI:
            raise ConfigError("Missing MONGO_URI in environment or .env")
        return self.MONGO_URI


@lru_cache()
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()
