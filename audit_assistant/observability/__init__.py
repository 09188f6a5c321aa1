"""
Observability module.

Provides logging configuration, correlation ID tracking and request
logging middleware.
"""

from audit_assistant.observability.correlation import get_correlation_id, set_correlation_id
from audit_assistant.observability.logger import configure_logging
from audit_assistant.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

__all__ = [
    "CorrelationMiddleware",
    "RequestLoggingMiddleware",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
