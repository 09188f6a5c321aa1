"""
Core business logic module.

Contains domain business logic, exception hierarchy, and core components.
All business rules and domain-specific logic reside here.
"""

from audit_assistant.core.exceptions import (
    AnalysisParseError,
    AuditAssistantError,
    CollectionNotFoundError,
    ConfigurationError,
    DuplicateSessionError,
    OrphanMessageError,
    SessionNotFoundError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    "AnalysisParseError",
    "AuditAssistantError",
    "CollectionNotFoundError",
    "ConfigurationError",
    "DuplicateSessionError",
    "OrphanMessageError",
    "SessionNotFoundError",
    "UpstreamError",
    "ValidationError",
]
