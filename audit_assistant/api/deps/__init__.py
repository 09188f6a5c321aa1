"""FastAPI dependency factories."""

from audit_assistant.api.deps.dependencies import (
    ServiceCache,
    get_analysis_service,
    get_collection_service,
    get_service_cache,
    get_session_lifecycle_service,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_analysis_service",
    "get_collection_service",
    "get_service_cache",
    "get_session_lifecycle_service",
    "get_settings_dependency",
]
