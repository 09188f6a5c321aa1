"""
Chat domain models and schemas.

Request/response schemas for chat operations.

Dependencies: pydantic
System role: Chat API contracts
"""

from pydantic import Field

from audit_assistant.models.common import CamelModel


class ChatRequest(CamelModel):
    """Request schema for chat messages."""

    session_id: str = Field(min_length=1, description="Session identifier")
    message: str = Field(min_length=1, description="User question or message")


class ChatResponse(CamelModel):
    """Response schema for chat messages."""

    success: bool = True
    reply: str
    degraded: bool = Field(
        default=False,
        description=(
            "True for every turn of a session that was created on the fly for an "
            "unknown id and therefore has no audit grounding"
        ),
    )
