"""
Analysis batch runner.

One-shot requirement analysis with bounded fan-out. Items are processed
in fixed-size waves; a wave finishes completely before the next starts.
A failing item yields an empty analysis marked unsuccessful and never
aborts its siblings.

Dependencies: asyncio, audit_assistant.core.audit
System role: Single and batch requirement analysis against the language model
"""

import asyncio
import json
import logging
from typing import Any, Iterable, Protocol, Sequence

from audit_assistant.core.audit.analysis_parser import parse_analysis_reply
from audit_assistant.core.audit.audit_prompts import (
    ANALYZER_PROMPT_TEMPLATE,
    NO_ADDITIONAL_CONTEXT,
)
from audit_assistant.core.audit.context_composer import render_context_files
from audit_assistant.models.analysis import AnalysisContent, AnalysisItemResult
from audit_assistant.models.grounding import InlineContextFile
from audit_assistant.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 3


class OneShotModel(Protocol):
    """Anything that can answer a single prompt without history."""

    async def generate_once(self, prompt: str) -> str: ...


def build_analysis_prompt(
    requirement: dict[str, Any],
    user_prompt: str = "",
    context_files: Iterable[InlineContextFile] = (),
) -> str:
    """Fill the analyzer template for one requirement."""
    files_block = render_context_files(context_files)
    if files_block:
        files_block = "\n## Uploaded Context Files\n" + files_block + "\n"

    return (
        ANALYZER_PROMPT_TEMPLATE.replace(
            "{{REQUIREMENT}}", json.dumps(requirement, indent=2, ensure_ascii=False)
        )
        .replace("{{USER_PROMPT}}", user_prompt.strip() or NO_ADDITIONAL_CONTEXT)
        .replace("{{CONTEXT_FILES}}", files_block)
    )


class AnalysisRunner:
    """
    Runs requirement analyses against a one-shot model.

    Attributes:
        model: Object exposing `async generate_once(prompt) -> str`
        concurrency: Wave size for batch runs
    """

    def __init__(self, model: OneShotModel, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.model = model
        self.concurrency = concurrency

    async def analyze_one(
        self,
        requirement: dict[str, Any],
        user_prompt: str = "",
        context_files: Sequence[InlineContextFile] = (),
    ) -> AnalysisContent:
        """
        Analyze a single requirement.

        Raises:
            UpstreamError: If the model call fails
            AnalysisParseError: If the reply holds no recoverable analysis
        """
        prompt = build_analysis_prompt(requirement, user_prompt, context_files)
        reply = await self.model.generate_once(prompt)
        return AnalysisContent.model_validate(parse_analysis_reply(reply))

    async def _analyze_item(
        self,
        index: int,
        total: int,
        requirement: dict[str, Any],
        user_prompt: str,
        context_files: Sequence[InlineContextFile],
    ) -> AnalysisItemResult:
        logger.debug(
            "Analyzing requirement %d/%d: %s",
            index + 1,
            total,
            requirement.get("refId") or requirement.get("ref_id") or "No ref",
        )
        try:
            analysis = await self.analyze_one(requirement, user_prompt, context_files)
        except Exception as e:
            log_with_context(
                logger,
                logging.WARNING,
                "analysis.item_failed",
                index=index,
                ref_id=requirement.get("refId") or requirement.get("ref_id"),
                error=str(e),
                error_type=type(e).__name__,
            )
            return AnalysisItemResult(
                requirement=requirement,
                analysis=AnalysisContent(),
                success=False,
                error=getattr(e, "message", None) or str(e),
            )
        return AnalysisItemResult(requirement=requirement, analysis=analysis, success=True)

    async def analyze_many(
        self,
        requirements: Sequence[dict[str, Any]],
        user_prompt: str = "",
        context_files: Sequence[InlineContextFile] = (),
    ) -> list[AnalysisItemResult]:
        """
        Analyze several requirements in waves of `concurrency` items.

        Returns:
            One result per requirement, in input order
        """
        total = len(requirements)
        logger.info("Processing %d requirements", total)

        results: list[AnalysisItemResult] = []
        for start in range(0, total, self.concurrency):
            wave = requirements[start : start + self.concurrency]
            wave_results = await asyncio.gather(
                *(
                    self._analyze_item(start + offset, total, requirement, user_prompt, context_files)
                    for offset, requirement in enumerate(wave)
                )
            )
            results.extend(wave_results)
        return results
