"""Data models and schemas."""

from gitgrade.models.schemas import (
    AnalysisResult,
    Insights,
    MetricsRecord,
    RepoRef,
    ScoreComponent,
)

__all__ = ["RepoRef", "MetricsRecord", "ScoreComponent", "Insights", "AnalysisResult"]
