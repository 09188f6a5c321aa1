"""Adapters between services and the persistence layer."""

from .chat_history_adapter import ChatHistoryAdapter

__all__ = ["ChatHistoryAdapter"]
