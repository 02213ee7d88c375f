import pytest

from gitgrade.models.schemas import MetricsRecord
from tests.helpers import make_metrics


@pytest.fixture
def metrics() -> MetricsRecord:
    return make_metrics()


@pytest.fixture(autouse=True)
def clear_api_env(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
