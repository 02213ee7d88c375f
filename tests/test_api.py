import pytest
from fastapi.testclient import TestClient

from gitgrade.api.main import create_app
from gitgrade.api.routes import get_pipeline
from gitgrade.config import Settings
from gitgrade.errors import AnalysisError
from gitgrade.models.schemas import AnalysisResult
from tests.helpers import make_metrics


class StubPipeline:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.urls: list[str] = []

    async def analyze_repository(self, repo_url: str) -> AnalysisResult:
        self.urls.append(repo_url)
        if self.error:
            raise self.error
        return AnalysisResult(
            score=88,
            summary="Solid project.",
            roadmap=["Add docs"],
            metrics=make_metrics(name="demo"),
        )


@pytest.fixture
def pipeline() -> StubPipeline:
    return StubPipeline()


@pytest.fixture
def client(pipeline) -> TestClient:
    app = create_app(Settings())
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    return TestClient(app)


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["message"] == "GitGrade API is running"
        assert "timestamp" in body


class TestAnalyze:
    def test_success(self, client, pipeline):
        response = client.post("/api/analyze", json={"repo_url": "https://github.com/octo/demo"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["score"] == 88
        assert body["data"]["summary"] == "Solid project."
        assert body["data"]["roadmap"] == ["Add docs"]
        assert body["data"]["metrics"]["name"] == "demo"
        assert pipeline.urls == ["https://github.com/octo/demo"]

    @pytest.mark.parametrize("payload", [{}, {"repo_url": ""}, {"repo_url": None}])
    def test_missing_url(self, client, pipeline, payload):
        response = client.post("/api/analyze", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Repository URL is required"}
        assert pipeline.urls == []

    def test_no_body(self, client):
        response = client.post("/api/analyze")

        assert response.status_code == 400
        assert response.json()["error"] == "Repository URL is required"

    @pytest.mark.parametrize(
        "url", ["https://gitlab.com/octo/demo", "https://github.com/octo", "github.com"]
    )
    def test_invalid_url(self, client, pipeline, url):
        response = client.post("/api/analyze", json={"repo_url": url})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid GitHub URL"}
        assert pipeline.urls == []

    def test_malformed_json(self, client):
        response = client.post(
            "/api/analyze",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_analysis_failure(self):
        app = create_app(Settings())
        failing = StubPipeline(error=AnalysisError("Failed to fetch metrics for octo/demo: Not Found"))
        app.dependency_overrides[get_pipeline] = lambda: failing

        response = TestClient(app).post("/api/analyze", json={"repo_url": "https://github.com/octo/demo"})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Analysis failed: Failed to fetch metrics for octo/demo: Not Found",
        }

    def test_cors_headers(self, client):
        response = client.get("/api/health", headers={"Origin": "http://localhost:3000"})

        assert response.headers["access-control-allow-origin"] == "*"
