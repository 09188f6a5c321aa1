"""
Document store backed by Gemini File Search stores.

Collections are File Search stores and documents are files imported into
them. Imports are long-running operations: they are polled at a fixed
interval up to a bounded wait, after which the caller gets a
'processing' status instead of an error.

Dependencies: google.genai, httpx
System role: DocumentStore boundary for reference document collections
"""

import asyncio
import io
import logging
from typing import Any

from google import genai

from audit_assistant.boundary.gemini.client import PROVIDER_ERRORS, describe_provider_error
from audit_assistant.core.exceptions import CollectionNotFoundError, UpstreamError
from audit_assistant.models.collection import CollectionInfo, DocumentInfo, UploadResult

logger = logging.getLogger(__name__)

STORE_PREFIX = "fileSearchStores/"


def store_resource_name(collection_id: str) -> str:
    """Expand a short store id to its `fileSearchStores/<id>` resource name."""
    if collection_id.startswith(STORE_PREFIX):
        return collection_id
    return f"{STORE_PREFIX}{collection_id}"


def document_resource_name(collection_id: str, document_id: str) -> str:
    if document_id.startswith(STORE_PREFIX):
        return document_id
    return f"{store_resource_name(collection_id)}/documents/{document_id}"


def short_id(resource_name: str) -> str:
    return resource_name.rsplit("/", 1)[-1]


def _is_not_found(error: Exception) -> bool:
    return getattr(error, "code", None) == 404


def _to_collection(store: Any) -> CollectionInfo:
    display_name = getattr(store, "display_name", None) or ""
    return CollectionInfo(
        id=short_id(store.name),
        name=store.name,
        display_name=display_name,
    )


def _to_document(document: Any) -> DocumentInfo:
    state = getattr(document, "state", None)
    return DocumentInfo(
        id=short_id(document.name),
        name=document.name,
        display_name=getattr(document, "display_name", None) or "",
        mime_type=getattr(document, "mime_type", None),
        state=getattr(state, "value", state),
    )


class FileSearchDocumentStore:
    """
    DocumentStore over Gemini File Search stores.

    Attributes:
        poll_interval_seconds: Delay between import status checks
        max_wait_seconds: Bound on waiting for an import to finish
    """

    def __init__(
        self,
        client: genai.Client,
        poll_interval_seconds: float = 2.0,
        max_wait_seconds: float = 60.0,
    ) -> None:
        self._client = client
        self.poll_interval_seconds = poll_interval_seconds
        self.max_wait_seconds = max_wait_seconds

    async def _call(
        self,
        operation: str,
        func: Any,
        *args: Any,
        collection_id: str | None = None,
        document_id: str | None = None,
        **kwargs: Any,
    ) -> Any:
        """Run a blocking SDK call in a thread, translating provider errors."""
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except PROVIDER_ERRORS as e:
            if collection_id is not None and _is_not_found(e):
                raise CollectionNotFoundError(collection_id, document_id) from e
            logger.error(
                "Document store call failed",
                extra={"operation": operation, "error": describe_provider_error(e)},
            )
            raise UpstreamError(describe_provider_error(e), operation=operation) from e

    async def create_collection(self, name: str) -> CollectionInfo:
        store = await self._call(
            "create_collection",
            self._client.file_search_stores.create,
            config={"display_name": name},
        )
        logger.info("Collection created", extra={"collection": store.name})
        return _to_collection(store)

    async def list_collections(self) -> list[CollectionInfo]:
        stores = await self._call(
            "list_collections",
            lambda: list(self._client.file_search_stores.list()),
        )
        return [_to_collection(store) for store in stores]

    async def delete_collection(self, collection_id: str) -> None:
        """Delete a store together with all of its documents."""
        await self._call(
            "delete_collection",
            self._client.file_search_stores.delete,
            name=store_resource_name(collection_id),
            config={"force": True},
            collection_id=collection_id,
        )
        logger.info("Collection deleted", extra={"collection_id": collection_id})

    async def upload_document(
        self,
        collection_id: str,
        name: str,
        mime_type: str,
        data: bytes,
    ) -> UploadResult:
        """
        Import a file into a store and wait (bounded) for indexing.

        Returns:
            UploadResult with status 'completed', or 'processing' when the
            operation is still running after max_wait_seconds

        Raises:
            CollectionNotFoundError: If the store does not exist
            UpstreamError: If the import fails
        """
        operation = await self._call(
            "upload_document",
            self._client.file_search_stores.upload_to_file_search_store,
            file=io.BytesIO(data),
            file_search_store_name=store_resource_name(collection_id),
            config={"display_name": name, "mime_type": mime_type},
            collection_id=collection_id,
        )

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.max_wait_seconds
        while not operation.done:
            if loop.time() >= deadline:
                logger.info(
                    "Document import still processing",
                    extra={"collection_id": collection_id, "operation": operation.name},
                )
                return UploadResult(status="processing", operation_name=operation.name)
            await asyncio.sleep(self.poll_interval_seconds)
            operation = await self._call(
                "poll_upload",
                self._client.operations.get,
                operation,
            )

        error = getattr(operation, "error", None)
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise UpstreamError(f"Document import failed: {message}", operation="upload_document")

        response = getattr(operation, "response", None)
        document_name = getattr(response, "document_name", None)
        document = None
        if document_name:
            document = DocumentInfo(
                id=short_id(document_name),
                name=document_name,
                display_name=name,
                mime_type=mime_type,
            )
        logger.info(
            "Document imported",
            extra={"collection_id": collection_id, "document": document_name},
        )
        return UploadResult(status="completed", operation_name=operation.name, document=document)

    async def list_documents(self, collection_id: str) -> list[DocumentInfo]:
        documents = await self._call(
            "list_documents",
            lambda: list(
                self._client.file_search_stores.documents.list(
                    parent=store_resource_name(collection_id)
                )
            ),
            collection_id=collection_id,
        )
        return [_to_document(document) for document in documents]

    async def delete_document(self, collection_id: str, document_id: str) -> None:
        await self._call(
            "delete_document",
            self._client.file_search_stores.documents.delete,
            name=document_resource_name(collection_id, document_id),
            config={"force": True},
            collection_id=collection_id,
            document_id=document_id,
        )
        logger.info(
            "Document deleted",
            extra={"collection_id": collection_id, "document_id": document_id},
        )
