"""Requirement analysis API endpoints.

Routes:
- POST /analyze - Analyze one requirement or a batch of requirements

Dependencies: audit_assistant.application.services.analysis_service
System role: Requirement analysis HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from audit_assistant.api.deps import get_analysis_service
from audit_assistant.api.routers.router_utils import handle_audit_errors
from audit_assistant.application.services import AnalysisService
from audit_assistant.core.exceptions import ValidationError
from audit_assistant.models.analysis import (
    AnalyzeRequest,
    BatchAnalysis,
    BatchAnalysisResponse,
    SingleAnalysisResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analysis"])


@router.post("", response_model=None)
@handle_audit_errors
async def analyze(
    request: AnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
) -> SingleAnalysisResponse | BatchAnalysisResponse:
    """Analyze requirements.

    A `requirements` list runs as a batch where each item succeeds or fails
    on its own; a single `requirement` fails the whole request on error.

    Raises:
        HTTPException(400): Neither requirement nor requirements given
        HTTPException(502): Single analysis failed upstream or could not be parsed
    """
    if request.requirements:
        results = await service.analyze_batch(
            request.requirements, request.prompt, request.context_files
        )
        return BatchAnalysisResponse(data=BatchAnalysis(results=results))

    if request.requirement:
        analysis = await service.analyze_single(
            request.requirement, request.prompt, request.context_files
        )
        return SingleAnalysisResponse(data=analysis)

    raise ValidationError("No requirement(s) provided", field="requirement")
