"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from audit_assistant.configs.base import BaseSettings
from audit_assistant.configs.database import DatabaseSettings
from audit_assistant.configs.gemini import FileSearchSettings, GeminiSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    gemini: GeminiSettings = GeminiSettings()
    file_search: FileSearchSettings = FileSearchSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from audit_assistant.configs import get_settings
        settings = get_settings()
    """
    return Settings()
