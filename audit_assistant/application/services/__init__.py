"""Service orchestrators."""

from .analysis_service import AnalysisService
from .collection_service import CollectionService
from .session_lifecycle_service import ChatTurnResult, CreatedSession, SessionLifecycleService

__all__ = [
    "AnalysisService",
    "ChatTurnResult",
    "CollectionService",
    "CreatedSession",
    "SessionLifecycleService",
]
