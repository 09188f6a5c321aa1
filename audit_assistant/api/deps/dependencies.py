"""
Dependency injection container.

Factory functions for FastAPI dependencies. Process-wide objects (the
session registry, the Gemini client, the document store) live in a
ServiceCache; request-scoped services are built per request.

Dependencies: audit_assistant.configs, audit_assistant.application, audit_assistant.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from audit_assistant.application.services import (
    AnalysisService,
    CollectionService,
    SessionLifecycleService,
)
from audit_assistant.boundary.db import get_async_db
from audit_assistant.boundary.gemini import (
    ConversationHandle,
    FileSearchDocumentStore,
    GeminiClient,
    get_gemini_client,
)
from audit_assistant.configs import Settings, get_settings
from audit_assistant.core.session import SessionRegistry


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self) -> None:
        self._session_registry: SessionRegistry[ConversationHandle] = SessionRegistry()
        self._gemini_client: GeminiClient | None = None
        self._document_store: FileSearchDocumentStore | None = None

    @property
    def session_registry(self) -> SessionRegistry[ConversationHandle]:
        """Live conversation handles for this process."""
        return self._session_registry

    @property
    def gemini_client(self) -> GeminiClient:
        """
        Get cached Gemini client.

        Raises:
            ConfigurationError: If GEMINI_API_KEY is not set
        """
        if self._gemini_client is None:
            self._gemini_client = get_gemini_client(get_settings().gemini)
        return self._gemini_client

    @property
    def document_store(self) -> FileSearchDocumentStore:
        """Get cached File Search document store (shares the Gemini client)."""
        if self._document_store is None:
            file_search = get_settings().file_search
            self._document_store = FileSearchDocumentStore(
                self.gemini_client.sdk,
                poll_interval_seconds=file_search.poll_interval_seconds,
                max_wait_seconds=file_search.max_wait_seconds,
            )
        return self._document_store

    def clear(self) -> None:
        """Clear all cached instances, dropping every live handle."""
        self._session_registry.clear()
        self._gemini_client = None
        self._document_store = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_session_lifecycle_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionLifecycleService:
    """
    Get session lifecycle service instance.

    The Gemini client is resolved lazily, so reading and deleting sessions
    works without an API key.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        SessionLifecycleService: Lifecycle service bound to the process registry
    """
    cache = get_service_cache()
    return SessionLifecycleService(
        db=db,
        registry=cache.session_registry,
        client_provider=lambda: cache.gemini_client,
        cache_ttl_seconds=settings.gemini.cache_ttl_seconds,
    )


def get_analysis_service(
    settings: Settings = Depends(get_settings_dependency),
) -> AnalysisService:
    """
    Get analysis service instance.

    Returns:
        AnalysisService: Analysis service with the configured wave size
    """
    cache = get_service_cache()
    return AnalysisService(
        client_provider=lambda: cache.gemini_client,
        concurrency=settings.gemini.analysis_concurrency,
    )


def get_collection_service() -> CollectionService:
    """
    Get collection service instance.

    Returns:
        CollectionService: Collection service over the File Search store
    """
    cache = get_service_cache()
    return CollectionService(store_provider=lambda: cache.document_store)
