"""Chat API endpoints.

Routes:
- POST /chat - Send a message to an audit session

Dependencies: audit_assistant.application.services.session_lifecycle_service
System role: Chat messaging HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from audit_assistant.api.deps import get_session_lifecycle_service
from audit_assistant.api.routers.router_utils import handle_audit_errors
from audit_assistant.application.services import SessionLifecycleService
from audit_assistant.models.chat import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
@handle_audit_errors
async def chat(
    request: ChatRequest,
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> ChatResponse:
    """Send a chat message and return the assistant's reply.

    Cold sessions are resumed from storage first. An unknown session id
    is answered without audit grounding and flagged with degraded=true.

    Raises:
        HTTPException(400): Empty message or invalid session id
        HTTPException(502): Gemini call failed; nothing was stored
        HTTPException(503): Gemini API key not configured
    """
    result = await service.send_message(request.session_id, request.message)
    return ChatResponse(reply=result.reply, degraded=result.degraded)
