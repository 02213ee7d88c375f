"""HTTP API for repository analysis."""

from gitgrade.api.main import create_app

__all__ = ["create_app"]
