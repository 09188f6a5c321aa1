"""
Grounding context schemas.

The structured selection a conversation is grounded in: framework
requirements, reference documents in File Search stores, document
collections, inline uploaded files and an optional free-text query.
Every field is optional with an empty default, and explicit nulls are
treated as absent, so that partially filled contexts from the browser
validate cleanly.

Dependencies: pydantic
System role: Grounding context contract shared by the composer, the
session store and the API
"""

from typing import Any

from pydantic import Field, model_validator

from audit_assistant.models.common import CamelModel


class GroundingModel(CamelModel):
    """Schema whose null fields fall back to their empty defaults."""

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # the browser sends null for unset node attributes
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class RequirementSelection(GroundingModel):
    """One selected framework requirement node."""

    framework_urn: str = Field(default="", description="URN of the owning framework")
    framework_name: str = Field(default="", description="Human-readable framework name")
    node_urn: str = Field(default="", description="Stable URN of the requirement node")
    ref_id: str = Field(default="", description="Reference code, e.g. 'A.5.1'")
    name: str = Field(default="", description="Short requirement name")
    description: str = Field(default="", description="Requirement text")
    depth: int | None = Field(default=None, description="Depth in the framework tree")
    assessable: bool | None = Field(default=None, description="Whether the node is assessable")


class FileResource(GroundingModel):
    """A reference document held in a File Search store."""

    store_id: str = Field(default="", description="File Search store (collection) id")
    document_id: str = Field(default="", description="Document id inside the store")
    name: str = Field(default="", description="Display name")
    mime_type: str | None = None


class CollectionReference(GroundingModel):
    """A whole document collection referenced by the user."""

    id: str = ""
    name: str = ""


class InlineContextFile(GroundingModel):
    """An uploaded text file whose content is inlined into the instruction."""

    name: str = ""
    content: str = ""


class GroundingContext(GroundingModel):
    """Everything a session is grounded in. Write-once once persisted."""

    requirements: list[RequirementSelection] = Field(default_factory=list)
    file_resources: list[FileResource] = Field(default_factory=list)
    collections: list[CollectionReference] = Field(default_factory=list)
    context_files: list[InlineContextFile] = Field(default_factory=list)
    query: str = ""
