"""
Application configuration using Pydantic Settings.

Supports hierarchical environment configuration:
- .env.base: Common non-secret defaults (committed to git)
- .env.{ENVIRONMENT}: Environment-specific overrides (gitignored)
- Environment variables: Highest priority
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from ..database.mongodb import parse_database_name

# Get environment from env var, default to development
ENV = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    """Application settings with hierarchical env file support."""

    model_config = SettingsConfigDict(
        env_file=[
            ".env.base",
            f".env.{ENV}",
        ],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "production"] = "development"

    # Database connection (database name is the URL path)
    mongodb_url: str = "mongodb://localhost:27017/sample_mflix"

    # Collection names
    users_collection: str = "users"
    sessions_collection: str = "sessions"
    comments_collection: str = "comments"

    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @property
    def database_name(self) -> str:
        """Extract database name from MongoDB URL."""
        return parse_database_name(self.mongodb_url)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
