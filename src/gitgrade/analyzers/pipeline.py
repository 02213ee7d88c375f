"""End-to-end analysis pipeline for repositories."""

import logging

import httpx

from gitgrade.analyzers.github import GitHubFetcher
from gitgrade.analyzers.llm import InsightGenerator
from gitgrade.analyzers.scorer import Scorer
from gitgrade.config import Settings
from gitgrade.errors import AnalysisError
from gitgrade.models.schemas import AnalysisResult
from gitgrade.urls import parse_repo_url

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """Orchestrates the full analysis pipeline for a repository.

    Pipeline stages:
    1. Parse the repository URL
    2. Fetch GitHub metrics
    3. Calculate the score
    4. Generate insights (Gemini, or the templated fallback)

    The fetcher and insight generator hold no per-request state, so one
    pipeline can serve concurrent analyses.
    """

    def __init__(
        self,
        github: GitHubFetcher,
        insights: InsightGenerator,
        scorer: Scorer | None = None,
        skip_ai: bool = False,
    ) -> None:
        """Initialize the pipeline.

        Args:
            github: Fetcher for repository metrics.
            insights: Generator for the summary and roadmap.
            scorer: Score calculator. Defaults to Scorer().
            skip_ai: Use templated insights without calling Gemini.
        """
        self.github = github
        self.insights = insights
        self.scorer = scorer or Scorer()
        self.skip_ai = skip_ai

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        skip_ai: bool = False,
    ) -> "AnalysisPipeline":
        """Build a pipeline whose API clients share one httpx client."""
        return cls(
            github=GitHubFetcher(token=settings.github_token, client=client),
            insights=InsightGenerator(
                api_key=settings.gemini_api_key,
                model=settings.gemini_model,
                client=client,
                timeout=settings.llm_timeout,
            ),
            skip_ai=skip_ai,
        )

    async def analyze_repository(self, repo_url: str) -> AnalysisResult:
        """Run full analysis on a single repository.

        Args:
            repo_url: GitHub repository URL.

        Returns:
            Complete AnalysisResult.

        Raises:
            AnalysisError: If any stage fails.
        """
        logger.info(f"Analyzing repository: {repo_url}")

        try:
            repo_ref = parse_repo_url(repo_url)
            metrics = await self.github.fetch_metrics(repo_ref)
            score = self.scorer.calculate_score(metrics)

            if self.skip_ai:
                insights = self.insights.fallback_insights(metrics, score)
            else:
                insights = await self.insights.generate_insights(metrics, score)
        except Exception as e:
            logger.error(f"Analysis of {repo_url} failed: {e}")
            raise AnalysisError(str(e)) from e

        logger.info(f"Analysis complete for {repo_ref.full_name}. Score: {score}/100")

        return AnalysisResult(
            score=score,
            summary=insights.summary,
            roadmap=insights.roadmap,
            metrics=metrics,
        )
