"""
Document collection API endpoints.

Routes:
- GET /collections - List collections
- POST /collections - Create collection
- DELETE /collections/{collection_id} - Delete collection and its documents
- GET /collections/{collection_id}/documents - List documents
- POST /collections/{collection_id}/documents - Upload a document (multipart)
- DELETE /collections/{collection_id}/documents/{document_id} - Delete a document

Dependencies: audit_assistant.application.services.collection_service
System role: Collection proxy HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from audit_assistant.api.deps import get_collection_service
from audit_assistant.api.routers.router_utils import handle_audit_errors
from audit_assistant.application.services import CollectionService
from audit_assistant.models.collection import (
    CollectionListResponse,
    CollectionResponse,
    CreateCollectionRequest,
    DocumentListResponse,
    UploadResponse,
)
from audit_assistant.models.common import DeleteResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("", response_model=CollectionListResponse)
@handle_audit_errors
async def list_collections(
    service: CollectionService = Depends(get_collection_service),
) -> CollectionListResponse:
    return CollectionListResponse(collections=await service.list_collections())


@router.post("", response_model=CollectionResponse)
@handle_audit_errors
async def create_collection(
    request: CreateCollectionRequest,
    service: CollectionService = Depends(get_collection_service),
) -> CollectionResponse:
    return CollectionResponse(collection=await service.create_collection(request.name))


@router.delete("/{collection_id}", response_model=DeleteResponse)
@handle_audit_errors
async def delete_collection(
    collection_id: str,
    service: CollectionService = Depends(get_collection_service),
) -> DeleteResponse:
    await service.delete_collection(collection_id)
    return DeleteResponse()


@router.get("/{collection_id}/documents", response_model=DocumentListResponse)
@handle_audit_errors
async def list_documents(
    collection_id: str,
    service: CollectionService = Depends(get_collection_service),
) -> DocumentListResponse:
    return DocumentListResponse(documents=await service.list_documents(collection_id))


@router.post("/{collection_id}/documents", response_model=UploadResponse)
@handle_audit_errors
async def upload_document(
    collection_id: str,
    file: UploadFile = File(...),
    service: CollectionService = Depends(get_collection_service),
) -> UploadResponse:
    """
    Upload a document and wait (bounded) for it to be indexed.

    Returns status 'processing' when indexing outlasts the wait bound.

    Raises:
        HTTPException(400): Invalid or empty file
        HTTPException(404): Collection not found
    """
    data = await file.read()
    result = await service.upload_document(
        collection_id,
        file.filename or "",
        file.content_type,
        data,
    )
    return UploadResponse(result=result)


@router.delete("/{collection_id}/documents/{document_id}", response_model=DeleteResponse)
@handle_audit_errors
async def delete_document(
    collection_id: str,
    document_id: str,
    service: CollectionService = Depends(get_collection_service),
) -> DeleteResponse:
    await service.delete_document(collection_id, document_id)
    return DeleteResponse()
