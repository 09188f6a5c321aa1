"""ORM models for the session store."""

from audit_assistant.boundary.db.models.message_model import ChatMessageModel, MessageRole
from audit_assistant.boundary.db.models.session_model import AuditSessionModel

__all__ = ["AuditSessionModel", "ChatMessageModel", "MessageRole"]
