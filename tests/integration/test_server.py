"""Integration tests for the dashboard API."""

import pytest
from fastapi.testclient import TestClient

from prreview.analysis.orchestrator import ReviewOrchestrator
from prreview.config import load_config_from_dict
from prreview.server import create_app, get_orchestrator


@pytest.fixture
def app():
    return create_app(load_config_from_dict({}))


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


class TestMetricsEndpoint:
    """Tests for GET /api/metrics."""

    def test_quality_series(self, client: TestClient) -> None:
        response = client.get("/api/metrics", params={"repositoryId": "acme/widgets", "type": "quality"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 31
        assert set(data[0]) == {"date", "score"}

    def test_complexity_series_with_days(self, client: TestClient) -> None:
        response = client.get(
            "/api/metrics",
            params={"repositoryId": "acme/widgets", "type": "complexity", "days": 7},
        )

        data = response.json()["data"]
        assert len(data) == 8
        assert all(0 <= point["complexity"] <= 100 for point in data)

    def test_issue_counts(self, client: TestClient) -> None:
        response = client.get("/api/metrics", params={"repositoryId": "acme/widgets", "type": "issues"})

        names = [item["name"] for item in response.json()["data"]]
        assert names == ["Security", "Performance", "Complexity", "Code Style", "Documentation"]

    @pytest.mark.parametrize(
        ("params", "message"),
        [
            ({"type": "quality"}, "Repository ID is required"),
            ({"repositoryId": "acme/widgets"}, "Metric type is required"),
            ({"repositoryId": "acme/widgets", "type": "velocity"}, "Invalid metric type"),
        ],
    )
    def test_bad_requests(self, client: TestClient, params: dict, message: str) -> None:
        response = client.get("/api/metrics", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": message}


class TestAnalyzeEndpoint:
    """Tests for POST /api/analyze."""

    def test_returns_result(self, app, make_source, make_transport) -> None:
        orchestrator = ReviewOrchestrator(
            make_source(fail=True), make_transport({}), load_config_from_dict({})
        )
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator

        response = TestClient(app).post(
            "/api/analyze", json={"owner": "acme", "repo": "widgets", "prNumber": 7}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "mock"
        assert data["riskyFiles"] == ["src/components/UserProfile.tsx", "lib/api/auth.ts"]
        assert data["securityIssues"] == []
        assert data["scores"] == {"complexityScore": 42, "testCoverage": 63, "codeStyleScore": 85}

    def test_validates_body(self, client: TestClient) -> None:
        response = client.post("/api/analyze", json={"owner": "acme", "repo": "widgets"})

        assert response.status_code == 422


def test_healthz(client: TestClient) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
