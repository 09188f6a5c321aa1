"""
Audit domain logic: grounding instruction composition and requirement analysis.
"""

from audit_assistant.core.audit.analysis_parser import parse_analysis_reply
from audit_assistant.core.audit.analysis_runner import AnalysisRunner, build_analysis_prompt
from audit_assistant.core.audit.context_composer import (
    INLINE_FILE_CHAR_LIMIT,
    compose,
    truncate_inline_content,
)

__all__ = [
    "AnalysisRunner",
    "INLINE_FILE_CHAR_LIMIT",
    "build_analysis_prompt",
    "compose",
    "parse_analysis_reply",
    "truncate_inline_content",
]
