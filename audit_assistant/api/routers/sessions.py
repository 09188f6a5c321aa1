"""
Chat session API endpoints.

Routes:
- POST /chat/sessions - Create a grounded audit session
- GET /chat/sessions - List sessions, newest first
- GET /chat/sessions/{id} - Session context and message history
- DELETE /chat/sessions/{id} - Delete session (idempotent)

Dependencies: audit_assistant.application.services, audit_assistant.models
System role: Session management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query

from audit_assistant.api.deps import get_session_lifecycle_service
from audit_assistant.api.routers.router_utils import handle_audit_errors
from audit_assistant.application.services import SessionLifecycleService
from audit_assistant.models.common import DeleteResponse
from audit_assistant.models.session import (
    CreateSessionRequest,
    CreateSessionResponse,
    HistoryMessage,
    SessionDetail,
    SessionDetailResponse,
    SessionListResponse,
    SessionSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat/sessions", tags=["sessions"])


@router.post("", response_model=CreateSessionResponse)
@handle_audit_errors
async def create_session(
    request: CreateSessionRequest,
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> CreateSessionResponse:
    """
    Create a chat session grounded in the user's selections.

    Args:
        request: CreateSessionRequest with the grounding context
        service: Injected SessionLifecycleService

    Returns:
        CreateSessionResponse: New session id and cache name (if cached)

    Raises:
        HTTPException(503): Gemini API key not configured
    """
    created = await service.create_session(request.context)
    return CreateSessionResponse(session_id=created.session_id, cached_content=created.cache_name)


@router.get("", response_model=SessionListResponse)
@handle_audit_errors
async def list_sessions(
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionListResponse:
    """List sessions newest first with message counts."""
    sessions = await service.list_sessions(limit=limit, offset=offset)
    return SessionListResponse(sessions=[SessionSummary(**session) for session in sessions])


@router.get("/{session_id}", response_model=SessionDetailResponse)
@handle_audit_errors
async def get_session(
    session_id: str,
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionDetailResponse:
    """
    Load a session for display without activating it.

    Raises:
        HTTPException(404): Session not found
    """
    data = await service.get_session(session_id)
    history = [HistoryMessage(**message) for message in data.pop("history")]
    return SessionDetailResponse(session=SessionDetail(**data), history=history)


@router.delete("/{session_id}", response_model=DeleteResponse)
@handle_audit_errors
async def delete_session(
    session_id: str,
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> DeleteResponse:
    """Delete a session and its history; unknown ids succeed as a no-op."""
    await service.delete_session(session_id)
    return DeleteResponse()
