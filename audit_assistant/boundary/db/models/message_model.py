"""
Chat message ORM model.

Append-only turns of an audit conversation. The autoincrement id is the
tie-breaker when two turns share a timestamp.

Dependencies: sqlalchemy, audit_assistant.boundary.db.base
System role: Ordered message history persistence
"""

import enum

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from audit_assistant.boundary.db.base import Base, TimestampMixin


class MessageRole(str, enum.Enum):
    """Author of a chat turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessageModel(Base, TimestampMixin):
    """
    Chat message ORM model.

    Attributes:
        id: Autoincrement surrogate sequence
        session_id: Owning session (cascade delete)
        role: 'user' or 'assistant'
        text: Turn content
        created_at: Turn timestamp (UTC)
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_session_order", "session_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("audit_sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    session = relationship("AuditSessionModel", back_populates="messages")
