"""
Test suite for the analysis endpoint.

System role: Verification of single and batch analysis HTTP contract
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from audit_assistant.api.deps import get_analysis_service
from audit_assistant.api.routers.analysis import router
from audit_assistant.application.services import AnalysisService
from audit_assistant.core.exceptions import AnalysisParseError
from audit_assistant.models.analysis import AnalysisContent, AnalysisItemResult


@pytest.fixture
def mock_service() -> AsyncMock:
    return AsyncMock(spec=AnalysisService)


@pytest.fixture
def client(mock_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.include_router(router, prefix="/api")
    app.dependency_overrides[get_analysis_service] = lambda: mock_service
    return TestClient(app)


class TestAnalyzeEndpoint:
    def test_single_requirement_should_return_analysis(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        # Arrange
        mock_service.analyze_single.return_value = AnalysisContent(
            typical_evidence=[{"title": "Policy", "description": "Approved policy"}],
            questions=[{"question": "Who approves?"}],
            suggestions=["Review yearly"],
        )

        # Act
        response = client.post(
            "/api/analyze",
            json={"requirement": {"refId": "A.5.1"}, "prompt": "cloud only"},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["typical_evidence"][0]["title"] == "Policy"
        assert data["suggestions"] == ["Review yearly"]
        args = mock_service.analyze_single.call_args.args
        assert args[0] == {"refId": "A.5.1"}
        assert args[1] == "cloud only"

    def test_batch_should_report_per_item_success(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        # Arrange
        mock_service.analyze_batch.return_value = [
            AnalysisItemResult(requirement={"refId": "A"}, success=True),
            AnalysisItemResult(requirement={"refId": "B"}, success=False, error="quota"),
        ]

        # Act
        response = client.post(
            "/api/analyze",
            json={
                "requirements": [{"refId": "A"}, {"refId": "B"}],
                "contextFiles": [{"name": "scope.txt", "content": "HQ"}],
            },
        )

        # Assert
        assert response.status_code == 200
        results = response.json()["data"]["results"]
        assert [r["success"] for r in results] == [True, False]
        assert results[1]["error"] == "quota"
        assert results[1]["analysis"] == {
            "typical_evidence": [],
            "questions": [],
            "suggestions": [],
        }
        context_files = mock_service.analyze_batch.call_args.args[2]
        assert context_files[0].name == "scope.txt"

    def test_no_requirement_should_return_400(self, client: TestClient) -> None:
        response = client.post("/api/analyze", json={"prompt": "anything"})

        assert response.status_code == 400
        assert response.json()["detail"] == "No requirement(s) provided"

    def test_single_parse_failure_should_return_502(
        self, client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.analyze_single.side_effect = AnalysisParseError(raw_preview="garbage")

        response = client.post("/api/analyze", json={"requirement": {"refId": "A"}})

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to parse AI response. Please try again."
