"""
Analysis reply parser.

Extracts the structured analysis object from a model's free-text reply.
Two layers: a structured JSON parse of the fenced block or first
top-level object, then a per-field regex recovery when that parse fails.
Each layer logs under its own event tag.

Dependencies: json, re
System role: Turns analyzer replies into typical_evidence/questions/suggestions
"""

import json
import logging
import re
from typing import Any

from audit_assistant.core.exceptions import AnalysisParseError
from audit_assistant.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

ANALYSIS_FIELDS = ("typical_evidence", "questions", "suggestions")

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


def _field_pattern(field: str) -> re.Pattern[str]:
    return re.compile(rf'"{field}"\s*:\s*\[([\s\S]*?)\]')


_FIELD_PATTERNS = {field: _field_pattern(field) for field in ANALYSIS_FIELDS}


def _find_object_span(text: str) -> str | None:
    """
    Return the first balanced top-level {...} span.

    Braces inside JSON strings are ignored. An unbalanced object yields
    everything from the first brace so that partial recovery still has
    something to work with.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return text[start:]


def extract_json_candidate(text: str) -> str:
    """Strip a surrounding code fence, else locate the first JSON object."""
    candidate = text.strip()
    fenced = _FENCE_RE.search(candidate)
    if fenced:
        candidate = fenced.group(1).strip()

    if not candidate.startswith("{"):
        span = _find_object_span(candidate)
        if span is not None:
            candidate = span
    return candidate


def normalize_analysis(parsed: dict[str, Any]) -> dict[str, Any]:
    """Default every missing or non-list analysis field to an empty list."""
    for field in ANALYSIS_FIELDS:
        if not isinstance(parsed.get(field), list):
            parsed[field] = []
    return parsed


def _partial_extract(candidate: str) -> dict[str, Any] | None:
    recovered: dict[str, Any] = {}
    for field, pattern in _FIELD_PATTERNS.items():
        match = pattern.search(candidate)
        if not match:
            continue
        try:
            items = json.loads(f"[{match.group(1)}]")
        except json.JSONDecodeError:
            continue
        recovered[field] = items
    if not recovered:
        return None
    return normalize_analysis(recovered)


def parse_analysis_reply(text: str) -> dict[str, Any]:
    """
    Parse an analyzer reply into a dict with the three analysis lists.

    Args:
        text: Raw model reply

    Returns:
        dict with typical_evidence, questions and suggestions lists
        (plus any extra keys the model returned)

    Raises:
        AnalysisParseError: If neither the structured parse nor partial
            extraction recovers anything
    """
    candidate = extract_json_candidate(text)

    try:
        parsed = json.loads(candidate)
        if not isinstance(parsed, dict):
            raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
        return normalize_analysis(parsed)
    except ValueError as e:
        logger.warning(
            "analysis.parse_structured_failed",
            extra={"error": str(e), "reply_length": len(text)},
        )

    recovered = _partial_extract(candidate)
    if recovered is not None:
        logger.info(
            "analysis.parse_partial_recovered",
            extra={field: len(recovered[field]) for field in ANALYSIS_FIELDS},
        )
        return recovered

    log_with_context(logger, logging.ERROR, "analysis.parse_failed", reply_preview=text)
    raise AnalysisParseError(raw_preview=text)
