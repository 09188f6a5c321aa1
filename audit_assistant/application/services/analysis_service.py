"""
Requirement analysis service.

Dispatches single and batch analysis requests to the AnalysisRunner.

Dependencies: audit_assistant.core.audit
System role: Analysis use case orchestration
"""

import logging
from typing import Any, Callable, Sequence

from audit_assistant.core.audit.analysis_runner import (
    DEFAULT_CONCURRENCY,
    AnalysisRunner,
    OneShotModel,
)
from audit_assistant.core.exceptions import ValidationError
from audit_assistant.models.analysis import AnalysisContent, AnalysisItemResult
from audit_assistant.models.grounding import InlineContextFile

logger = logging.getLogger(__name__)


class AnalysisService:
    """Analysis service orchestrator."""

    def __init__(
        self,
        client_provider: Callable[[], OneShotModel],
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        """
        Initialize analysis service.

        Args:
            client_provider: Returns the language model; raises
                ConfigurationError when none is configured
            concurrency: Batch wave size
        """
        self._client_provider = client_provider
        self.concurrency = concurrency

    def _runner(self) -> AnalysisRunner:
        return AnalysisRunner(self._client_provider(), concurrency=self.concurrency)

    async def analyze_single(
        self,
        requirement: dict[str, Any],
        prompt: str = "",
        context_files: Sequence[InlineContextFile] = (),
    ) -> AnalysisContent:
        """
        Analyze one requirement; failures propagate to the caller.

        Raises:
            ConfigurationError: If the language model is not configured
            UpstreamError: If the model call fails
            AnalysisParseError: If the reply cannot be parsed
        """
        return await self._runner().analyze_one(requirement, prompt, context_files)

    async def analyze_batch(
        self,
        requirements: Sequence[dict[str, Any]],
        prompt: str = "",
        context_files: Sequence[InlineContextFile] = (),
    ) -> list[AnalysisItemResult]:
        """
        Analyze many requirements; per-item failures are reported in the results.

        Raises:
            ValidationError: If no requirements are given
            ConfigurationError: If the language model is not configured
        """
        if not requirements:
            raise ValidationError("At least one requirement is required", field="requirements")

        results = await self._runner().analyze_many(requirements, prompt, context_files)
        failed = sum(1 for result in results if not result.success)
        logger.info(
            "Batch analysis finished",
            extra={"total": len(results), "failed": failed},
        )
        return results
