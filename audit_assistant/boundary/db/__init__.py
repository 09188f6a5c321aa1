"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(), init_models()
  - AuditSessionModel, ChatMessageModel, MessageRole: Persisted entities
  - session_crud, message_crud: CRUD operation singletons

Dependencies: sqlalchemy, audit_assistant.configs
System role: Durable storage for audit sessions and their ordered message history.
"""

from audit_assistant.boundary.db.base import Base, TimestampMixin
from audit_assistant.boundary.db.connection import (
    build_async_engine,
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    init_models,
)
from audit_assistant.boundary.db.models import AuditSessionModel, ChatMessageModel, MessageRole
from audit_assistant.boundary.db.CRUD import message_crud, session_crud

__all__ = [
    "AuditSessionModel",
    "Base",
    "ChatMessageModel",
    "MessageRole",
    "TimestampMixin",
    "build_async_engine",
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "init_models",
    "message_crud",
    "session_crud",
]
