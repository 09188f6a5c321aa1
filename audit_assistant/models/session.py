"""
Session domain models and schemas.

Request/response schemas for chat session operations.

Dependencies: pydantic
System role: Session API contracts
"""

from datetime import datetime

from pydantic import Field

from audit_assistant.models.common import CamelModel
from audit_assistant.models.grounding import GroundingContext


class CreateSessionRequest(CamelModel):
    """Request schema for creating a new audit session."""

    context: GroundingContext = Field(default_factory=GroundingContext)


class CreateSessionResponse(CamelModel):
    """Response schema for session creation."""

    success: bool = True
    session_id: str
    cached_content: str | None = Field(
        default=None,
        description="Provider cache name when context caching succeeded",
    )


class SessionSummary(CamelModel):
    """One row of the session list."""

    id: str
    created_at: datetime
    message_count: int
    requirement_count: int
    query: str = ""
    cached: bool = False


class SessionListResponse(CamelModel):
    """Response schema for listing sessions."""

    success: bool = True
    sessions: list[SessionSummary]


class HistoryMessage(CamelModel):
    """Single persisted chat turn."""

    role: str = Field(description="Message role: 'user' or 'assistant'")
    text: str
    created_at: datetime


class SessionDetail(CamelModel):
    """Session record as shown to the reader."""

    id: str
    created_at: datetime
    context: GroundingContext
    cached: bool = False
    degraded: bool = Field(
        default=False,
        description="True when the session was created on the fly without grounding",
    )


class SessionDetailResponse(CamelModel):
    """Response schema for resuming a session for display."""

    success: bool = True
    session: SessionDetail
    history: list[HistoryMessage]
