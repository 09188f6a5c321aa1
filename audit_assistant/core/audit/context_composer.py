"""
Context composer.

Turns a grounding context (selected requirements, reference documents,
inline files and a free-text query) into the system instruction a chat
session is grounded in. Pure and deterministic: the same context always
yields byte-identical text.

Dependencies: audit_assistant.models.grounding
System role: Builds the grounding instruction for audit conversations
"""

from typing import Any, Iterable

from audit_assistant.core.audit.audit_prompts import BASELINE_INSTRUCTION
from audit_assistant.models.grounding import (
    GroundingContext,
    InlineContextFile,
    RequirementSelection,
)

INLINE_FILE_CHAR_LIMIT = 8000
UNSPECIFIED_FRAMEWORK = "Unspecified framework"


def coerce_context(context: GroundingContext | dict[str, Any] | None) -> GroundingContext:
    """
    Validate a loosely structured context into a GroundingContext.

    Accepts camelCase or snake_case keys; missing fields take their
    empty defaults.
    """
    if context is None:
        return GroundingContext()
    if isinstance(context, GroundingContext):
        return context
    return GroundingContext.model_validate(context)


def truncate_inline_content(content: str, limit: int = INLINE_FILE_CHAR_LIMIT) -> str:
    """Cap inline file content, appending a visible marker when anything was cut."""
    if len(content) <= limit:
        return content
    return (
        content[:limit]
        + f"\n[TRUNCATED: showing first {limit:,} of {len(content):,} characters]"
    )


def render_context_files(files: Iterable[InlineContextFile]) -> str:
    """Render inline files as delimited blocks. Empty string when there are none."""
    blocks = []
    for file in files:
        name = file.name or "untitled"
        blocks.append(
            f"----- BEGIN FILE: {name} -----\n"
            f"{truncate_inline_content(file.content)}\n"
            "----- END FILE -----"
        )
    return "\n\n".join(blocks)


def _group_by_framework(
    requirements: list[RequirementSelection],
) -> dict[str, list[RequirementSelection]]:
    # dicts keep insertion order, so groups follow first occurrence
    groups: dict[str, list[RequirementSelection]] = {}
    for requirement in requirements:
        framework = requirement.framework_name.strip() or UNSPECIFIED_FRAMEWORK
        groups.setdefault(framework, []).append(requirement)
    return groups


def _render_requirements(requirements: list[RequirementSelection]) -> str:
    lines = [
        "## Selected Framework Requirements",
        "The auditor is assessing the following requirements. "
        "Keep your guidance focused on them.",
    ]
    for framework, items in _group_by_framework(requirements).items():
        lines.append("")
        lines.append(f"### {framework}")
        for index, requirement in enumerate(items, start=1):
            ref = requirement.ref_id.strip() or "No ref"
            text = requirement.description.strip() or requirement.name.strip() or "(no description)"
            lines.append(f"{index}. [{ref}] {text}")
            if requirement.node_urn:
                lines.append(f"   URN: {requirement.node_urn}")
    return "\n".join(lines)


def _render_references(context: GroundingContext) -> str:
    lines = ["## Reference Documents"]
    for resource in context.file_resources:
        name = resource.name or resource.document_id or "unnamed document"
        lines.append(
            f"- {name} (store: {resource.store_id or 'unknown'}, "
            f"document: {resource.document_id or 'unknown'})"
        )
    for collection in context.collections:
        lines.append(f"- Collection: {collection.name or collection.id} (id: {collection.id})")
    lines.append("")
    lines.append(
        "Ground your answers in these documents whenever they are relevant, "
        "and say which document supports a statement."
    )
    return "\n".join(lines)


def _render_inline_files(context: GroundingContext) -> str:
    return (
        "## Uploaded Context Files\n"
        "The auditor uploaded the following files. Use them as organisational context.\n\n"
        + render_context_files(context.context_files)
    )


def _render_query(query: str) -> str:
    return (
        "## Initial Audit Query\n"
        f"{query}\n\n"
        "Address this query directly in your first reply."
    )


def compose(context: GroundingContext | dict[str, Any] | None) -> str:
    """
    Build the system instruction for a grounding context.

    Starts from the baseline auditor persona and appends one section per
    non-empty part of the context. Absent parts are omitted; nothing here
    raises for an empty context.

    Args:
        context: GroundingContext or an equivalent dict (camelCase or snake_case)

    Returns:
        str: System instruction text

    Raises:
        pydantic.ValidationError: If a dict context has fields of the wrong type
    """
    ctx = coerce_context(context)

    sections = [BASELINE_INSTRUCTION]
    if ctx.requirements:
        sections.append(_render_requirements(ctx.requirements))
    if ctx.file_resources or ctx.collections:
        sections.append(_render_references(ctx))
    if ctx.context_files:
        sections.append(_render_inline_files(ctx))
    if ctx.query.strip():
        sections.append(_render_query(ctx.query))

    return "\n\n".join(sections)
