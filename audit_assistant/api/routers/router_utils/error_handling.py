"""
API error handling utilities.

Decorator translating the application exception hierarchy into
HTTPExceptions with consistent logging across routers.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

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
from audit_assistant.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_ERROR: tuple[tuple[type[AuditAssistantError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND),
    (CollectionNotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateSessionError, status.HTTP_409_CONFLICT),
    (OrphanMessageError, status.HTTP_409_CONFLICT),
    (UpstreamError, status.HTTP_502_BAD_GATEWAY),
    (AnalysisParseError, status.HTTP_502_BAD_GATEWAY),
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(error: AuditAssistantError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_audit_errors(func: F) -> F:
    """
    Decorator to handle application errors and transform them into HTTPExceptions.

    Client errors are logged at WARNING, upstream and configuration
    failures at ERROR, anything unexpected with a traceback as a 500.
    The response detail is the error message without internal details.
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except AuditAssistantError as e:
            status_code = status_for(e)
            log = logger.warning if status_code < 500 else logger.error
            log(
                "Request failed",
                extra={
                    "endpoint": func.__name__,
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "status_code": status_code,
                },
            )
            raise HTTPException(status_code=status_code, detail=e.message) from e

        except Exception as e:
            log_exception_with_context(
                logger,
                "Unexpected failure in API operation",
                e,
                endpoint=func.__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred",
            ) from e

    return wrapper  # type: ignore
