"""
Document collection service.

Thin orchestration over the File Search document store: input
validation, then pass-through.

Dependencies: audit_assistant.boundary.gemini.file_search_store
System role: Collection and document management use cases
"""

import logging
from typing import Callable

from audit_assistant.boundary.gemini.file_search_store import FileSearchDocumentStore
from audit_assistant.core.exceptions import ValidationError
from audit_assistant.models.collection import CollectionInfo, DocumentInfo, UploadResult

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"pdf", "txt", "md", "csv", "json", "html", "docx", "xlsx"}
MAX_FILENAME_LENGTH = 255


def validate_filename(filename: str) -> None:
    """
    Validate an uploaded filename.

    Raises:
        ValidationError: If the name is empty, too long, contains a path
            or has a disallowed extension
    """
    if not filename or len(filename) > MAX_FILENAME_LENGTH:
        raise ValidationError("Invalid filename length", field="file")

    if ".." in filename or "/" in filename or "\\" in filename:
        raise ValidationError("Invalid filename: path traversal detected", field="file")

    if "." not in filename:
        raise ValidationError("File must have an extension", field="file")

    ext = filename.rsplit(".", 1)[-1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"File type '.{ext}' not allowed. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
            field="file",
        )


class CollectionService:
    """Collection service orchestrator."""

    def __init__(self, store_provider: Callable[[], FileSearchDocumentStore]) -> None:
        """
        Initialize collection service.

        Args:
            store_provider: Returns the document store; raises
                ConfigurationError when the API key is missing
        """
        self._store_provider = store_provider

    async def list_collections(self) -> list[CollectionInfo]:
        return await self._store_provider().list_collections()

    async def create_collection(self, name: str) -> CollectionInfo:
        if not name.strip():
            raise ValidationError("Collection name must not be empty", field="name")
        return await self._store_provider().create_collection(name.strip())

    async def delete_collection(self, collection_id: str) -> None:
        await self._store_provider().delete_collection(collection_id)

    async def list_documents(self, collection_id: str) -> list[DocumentInfo]:
        return await self._store_provider().list_documents(collection_id)

    async def upload_document(
        self,
        collection_id: str,
        filename: str,
        mime_type: str | None,
        data: bytes,
    ) -> UploadResult:
        """
        Upload a document into a collection.

        Raises:
            ValidationError: If the file is invalid or empty
            CollectionNotFoundError: If the collection does not exist
            UpstreamError: If the import fails
        """
        validate_filename(filename)
        if not data:
            raise ValidationError("Uploaded file is empty", field="file")

        result = await self._store_provider().upload_document(
            collection_id,
            filename,
            mime_type or "application/octet-stream",
            data,
        )
        logger.info(
            "Document upload finished",
            extra={"collection_id": collection_id, "status": result.status, "size": len(data)},
        )
        return result

    async def delete_document(self, collection_id: str, document_id: str) -> None:
        await self._store_provider().delete_document(collection_id, document_id)
