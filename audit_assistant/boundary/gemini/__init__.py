"""
Gemini boundary: language model, context caching and File Search document store.
"""

from audit_assistant.boundary.gemini.cache_manager import CacheManager
from audit_assistant.boundary.gemini.client import (
    CacheHandle,
    ConversationHandle,
    GeminiClient,
    get_gemini_client,
    to_content_history,
)
from audit_assistant.boundary.gemini.file_search_store import FileSearchDocumentStore

__all__ = [
    "CacheHandle",
    "CacheManager",
    "ConversationHandle",
    "FileSearchDocumentStore",
    "GeminiClient",
    "get_gemini_client",
    "to_content_history",
]
