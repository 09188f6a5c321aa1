"""
Database configuration settings.

Manages the async SQLAlchemy connection URL and pool parameters.
SQLite (aiosqlite) is the default store; any async URL such as
postgresql+asyncpg:// is accepted.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for the session store
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from audit_assistant.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Session store database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DATABASE_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str = Field(
        default="sqlite+aiosqlite:///./audit_assistant.db",
        description="Async SQLAlchemy database URL",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    pool_size: int = Field(default=10, description="Connection pool size (non-SQLite only)")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL points at a SQLite database."""
        return self.url.startswith("sqlite")
