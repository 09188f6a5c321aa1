"""
Document collection schemas.

Collections are Gemini File Search stores; documents are the files
imported into them.

Dependencies: pydantic
System role: Collection proxy API contracts
"""

from pydantic import Field

from audit_assistant.models.common import CamelModel


class CreateCollectionRequest(CamelModel):
    """Request schema for creating a collection."""

    name: str = Field(min_length=1, max_length=512, description="Display name")


class CollectionInfo(CamelModel):
    id: str
    name: str
    display_name: str = ""


class DocumentInfo(CamelModel):
    id: str
    name: str
    display_name: str = ""
    mime_type: str | None = None
    state: str | None = None


class UploadResult(CamelModel):
    """Outcome of a document import."""

    status: str = Field(description="'completed' or 'processing'")
    operation_name: str | None = None
    document: DocumentInfo | None = None


class CollectionResponse(CamelModel):
    success: bool = True
    collection: CollectionInfo


class CollectionListResponse(CamelModel):
    success: bool = True
    collections: list[CollectionInfo]


class DocumentListResponse(CamelModel):
    success: bool = True
    documents: list[DocumentInfo]


class UploadResponse(CamelModel):
    success: bool = True
    result: UploadResult
