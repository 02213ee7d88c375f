"""Analyzers for fetching, scoring and describing repositories."""

from gitgrade.analyzers.github import GitHubFetcher
from gitgrade.analyzers.llm import InsightGenerator
from gitgrade.analyzers.pipeline import AnalysisPipeline
from gitgrade.analyzers.scorer import Scorer

__all__ = ["GitHubFetcher", "InsightGenerator", "AnalysisPipeline", "Scorer"]
