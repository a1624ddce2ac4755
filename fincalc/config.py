"""
Calculator service configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Pick the env file for the current APP_ENV."""
    if os.getenv("APP_ENV", "development") == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Service settings, overridable from the environment or the env file."""

    app_name: str = "Financial Calculators"
    app_env: str = "development"
    debug: bool = False

    # Routing
    api_prefix: str = "/api"

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
