"""
Exception hierarchy for the compliance audit assistant.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class AuditAssistantError(Exception):
    """Base exception for all audit assistant errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(AuditAssistantError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ConfigurationError(AuditAssistantError):
    """
    Raised when the language model client cannot be initialized.

    Typically no API credential is configured. Fatal for the operation,
    never retried.
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)


class UpstreamError(AuditAssistantError):
    """Raised when a model provider or document store call fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            message: Upstream error message, surfaced to the caller as-is
            operation: Operation that failed (send, cache, generate, upload, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class AnalysisParseError(AuditAssistantError):
    """Raised when a model reply holds no recoverable analysis JSON."""

    def __init__(
        self,
        message: str = "Failed to parse AI response. Please try again.",
        raw_preview: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if raw_preview is not None:
            details["raw_preview"] = raw_preview[:200]
        super().__init__(message, details)


class SessionNotFoundError(AuditAssistantError):
    """Raised when a session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session not found: {session_id}", details)


class CollectionNotFoundError(AuditAssistantError):
    """Raised when a document collection (or a document in it) is unknown."""

    def __init__(
        self,
        collection_id: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["collection_id"] = collection_id
        if document_id:
            details["document_id"] = document_id
            message = f"Document not found: {document_id}"
        else:
            message = f"Collection not found: {collection_id}"
        super().__init__(message, details)


class DuplicateSessionError(AuditAssistantError):
    """Raised when a session is created with an identifier that already exists."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session already exists: {session_id}", details)


class OrphanMessageError(AuditAssistantError):
    """Raised when a message is appended to a session that does not exist."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Cannot append message to unknown session: {session_id}", details)
