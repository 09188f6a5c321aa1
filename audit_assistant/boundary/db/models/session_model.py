"""
Audit session ORM model.

One audit conversation: its grounding context, the instruction derived
from it and the provider cache (if any) created at start-up.

Dependencies: sqlalchemy, audit_assistant.boundary.db.base
System role: Session persistence for audit conversations
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from audit_assistant.boundary.db.base import Base, TimestampMixin


class AuditSessionModel(Base, TimestampMixin):
    """
    Audit session ORM model.

    Rows are written once at creation and never updated; deleting a
    session cascades to its messages.

    Attributes:
        id: Opaque session identifier (generated UUID string)
        grounding_context: Snapshot of the grounding context (camelCase JSON)
        system_instruction: Instruction composed from the context, stored verbatim
        cache_name: Provider cached-content name, None when caching failed
        cache_expires_at: When the provider cache stops being valid
        degraded: Created on the fly for an unknown id, without grounding
        created_at: Session creation timestamp (UTC)

    Relationships:
        messages: One-to-many with ChatMessageModel (cascade delete)
    """

    __tablename__ = "audit_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    grounding_context: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Requirements, file references, inline files and query",
    )
    system_instruction: Mapped[str] = mapped_column(Text, nullable=False)

    cache_name: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    cache_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
    degraded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    messages = relationship(
        "ChatMessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChatMessageModel.id",
    )
