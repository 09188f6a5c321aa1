"""
Requirement analysis schemas.

Dependencies: pydantic
System role: Analysis API contracts
"""

from typing import Any

from pydantic import BaseModel, Field

from audit_assistant.models.common import CamelModel
from audit_assistant.models.grounding import InlineContextFile


class AnalysisContent(BaseModel):
    """
    Structured guidance for one requirement.

    Field names stay snake_case; they mirror the JSON the model is asked
    to produce and the browser reads them verbatim.
    """

    typical_evidence: list[Any] = Field(default_factory=list)
    questions: list[Any] = Field(default_factory=list)
    suggestions: list[Any] = Field(default_factory=list)


class AnalyzeRequest(CamelModel):
    """Single (`requirement`) or batch (`requirements`) analysis request."""

    requirement: dict[str, Any] | None = None
    requirements: list[dict[str, Any]] | None = None
    prompt: str = ""
    context_files: list[InlineContextFile] = Field(default_factory=list)


class AnalysisItemResult(CamelModel):
    """Outcome of analysing one requirement in a batch."""

    requirement: dict[str, Any]
    analysis: AnalysisContent = Field(default_factory=AnalysisContent)
    success: bool
    error: str | None = None


class BatchAnalysis(CamelModel):
    results: list[AnalysisItemResult]


class SingleAnalysisResponse(CamelModel):
    success: bool = True
    data: AnalysisContent


class BatchAnalysisResponse(CamelModel):
    success: bool = True
    data: BatchAnalysis
