"""
Test suite for collection API endpoints.

System role: Verification of the collection proxy HTTP contract
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from audit_assistant.api.deps import get_collection_service
from audit_assistant.api.routers.collections import router
from audit_assistant.application.services import CollectionService
from audit_assistant.core.exceptions import CollectionNotFoundError, ValidationError
from audit_assistant.models.collection import CollectionInfo, DocumentInfo, UploadResult


@pytest.fixture
def mock_service() -> AsyncMock:
    return AsyncMock(spec=CollectionService)


@pytest.fixture
def client(mock_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.include_router(router, prefix="/api")
    app.dependency_overrides[get_collection_service] = lambda: mock_service
    return TestClient(app)


class TestCollectionEndpoints:
    def test_list_should_return_collections(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.list_collections.return_value = [
            CollectionInfo(id="abc", name="fileSearchStores/abc", display_name="Policies")
        ]

        response = client.get("/api/collections")

        assert response.status_code == 200
        assert response.json()["collections"][0]["displayName"] == "Policies"

    def test_create_should_return_collection(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.create_collection.return_value = CollectionInfo(
            id="abc", name="fileSearchStores/abc", display_name="Policies"
        )

        response = client.post("/api/collections", json={"name": "Policies"})

        assert response.status_code == 200
        assert response.json()["collection"]["id"] == "abc"
        mock_service.create_collection.assert_awaited_once_with("Policies")

    def test_delete_unknown_collection_should_return_404(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.delete_collection.side_effect = CollectionNotFoundError("missing")

        response = client.delete("/api/collections/missing")

        assert response.status_code == 404

    def test_list_documents_should_return_documents(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.list_documents.return_value = [
            DocumentInfo(
                id="doc-1",
                name="fileSearchStores/abc/documents/doc-1",
                display_name="policy.pdf",
                mime_type="application/pdf",
                state="STATE_ACTIVE",
            )
        ]

        response = client.get("/api/collections/abc/documents")

        assert response.status_code == 200
        document = response.json()["documents"][0]
        assert document["mimeType"] == "application/pdf"
        assert document["state"] == "STATE_ACTIVE"


class TestUploadEndpoint:
    def test_upload_should_pass_file_to_service(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        # Arrange
        mock_service.upload_document.return_value = UploadResult(
            status="processing", operation_name="operations/op-1"
        )

        # Act
        response = client.post(
            "/api/collections/abc/documents",
            files={"file": ("policy.pdf", b"%PDF-1.7", "application/pdf")},
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["result"] == {
            "status": "processing",
            "operationName": "operations/op-1",
            "document": None,
        }
        mock_service.upload_document.assert_awaited_once_with(
            "abc", "policy.pdf", "application/pdf", b"%PDF-1.7"
        )

    def test_invalid_file_should_return_400(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.upload_document.side_effect = ValidationError(
            "File type '.exe' not allowed", field="file"
        )

        response = client.post(
            "/api/collections/abc/documents",
            files={"file": ("run.exe", b"MZ", "application/octet-stream")},
        )

        assert response.status_code == 400

    def test_delete_document_should_succeed(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        response = client.delete("/api/collections/abc/documents/doc-1")

        assert response.status_code == 200
        mock_service.delete_document.assert_awaited_once_with("abc", "doc-1")
