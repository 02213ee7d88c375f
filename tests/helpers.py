import base64
from collections.abc import Callable

import httpx

from gitgrade.models.schemas import MetricsRecord


def make_metrics(**overrides) -> MetricsRecord:
    base = {
        "name": "repo",
        "stars": 42,
        "forks": 7,
        "watchers": 42,
        "open_issues": 3,
        "primary_language": "Python",
        "languages": ["Python", "Shell", "Dockerfile", "Makefile"],
        "has_readme": True,
        "readme_length": 1500,
        "total_commits": 120,
        "recent_commits": 25,
        "branch_count": 5,
        "total_prs": 15,
        "has_tests": True,
        "has_cicd": True,
    }
    base.update(overrides)
    return MetricsRecord(**base)


def readme_payload(size: int) -> dict:
    encoded = base64.b64encode(b"#" * size).decode()
    # GitHub wraps base64 content at 60 characters
    wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
    return {"name": "README.md", "content": wrapped, "encoding": "base64"}


def route_handler(routes: dict, requested: list[str] | None = None) -> Callable:
    """MockTransport handler serving {path: (status, json_body)}; unknown paths 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requested is not None:
            requested.append(request.url.path)
        status, body = routes.get(request.url.path, (404, {"message": "Not Found"}))
        return httpx.Response(status, json=body)

    return handler
