"""
Gemini configuration settings.

Model selection, generation parameters, context-cache lifetime and the
analysis fan-out limit, plus File Search polling bounds.

Dependencies: pydantic, pydantic_settings
System role: Language model and document store configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from audit_assistant.configs.base import BaseSettings


class GeminiSettings(BaseSettings):
    """Google Gemini model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Gemini API key; model-backed operations are unavailable without it",
    )
    model: str = Field(default="gemini-2.5-flash", description="Gemini model identifier")

    cache_ttl_seconds: int = Field(
        default=3600,
        description="Lifetime of provider-side context caches in seconds",
    )

    temperature: float = Field(default=0.7, description="Sampling temperature for analysis calls")
    top_k: int = Field(default=40, description="Top-k sampling for analysis calls")
    top_p: float = Field(default=0.95, description="Top-p sampling for analysis calls")
    max_output_tokens: int = Field(default=4096, description="Output token cap for analysis calls")
    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for a single analysis call; failed calls are not retried",
    )

    analysis_concurrency: int = Field(
        default=3,
        ge=1,
        description="Maximum in-flight analysis calls per batch wave",
    )


class FileSearchSettings(BaseSettings):
    """Gemini File Search store (document collections) configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FILE_SEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    poll_interval_seconds: float = Field(
        default=2.0,
        description="Delay between import-operation status checks",
    )
    max_wait_seconds: float = Field(
        default=60.0,
        description="Upper bound on waiting for a document import before reporting 'processing'",
    )
