"""
Pydantic request/response and domain schemas.
"""

from audit_assistant.models.grounding import (
    CollectionReference,
    FileResource,
    GroundingContext,
    InlineContextFile,
    RequirementSelection,
)

__all__ = [
    "CollectionReference",
    "FileResource",
    "GroundingContext",
    "InlineContextFile",
    "RequirementSelection",
]
