"""AI-generated repository insights using Google Gemini."""

import logging
import os
import re

import httpx

from gitgrade.config import DEFAULT_GEMINI_MODEL
from gitgrade.models.contracts import GeminiResponse
from gitgrade.models.schemas import Insights, MetricsRecord

logger = logging.getLogger(__name__)

ROADMAP_MARKER = "ROADMAP:"
SUMMARY_MARKER = "SUMMARY:"
BULLET_PREFIX = re.compile(r"^-\s*")


class InsightGenerator:
    """Generates a summary and improvement roadmap for a repository.

    Sends one prompt to the Gemini generateContent endpoint and parses
    the SUMMARY/ROADMAP reply. Any failure falls back to templated
    insights, so generate_insights never raises.
    """

    GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_GEMINI_MODEL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 60.0,
    ) -> None:
        """Initialize the generator.

        Args:
            api_key: Gemini API key. If not provided, uses GEMINI_API_KEY env var.
            model: Gemini model name.
            client: Optional httpx client.
            timeout: Request timeout in seconds for the generation call.
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        self.model = model
        self.timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=self.timeout)  # LLM can be slow

    async def _generate(self, prompt: str) -> str:
        """Generate a response from Gemini.

        Args:
            prompt: The prompt to send.

        Returns:
            The generated text response.

        Raises:
            ValueError: If no API key is configured or the reply has no text.
            httpx.HTTPError: On transport or HTTP status errors.
        """
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY is not configured")

        client = await self._get_client()
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }

        try:
            response = await client.post(
                f"{self.GEMINI_URL}/models/{self.model}:generateContent",
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            reply = GeminiResponse.model_validate(response.json())
        finally:
            if self._client is None:
                await client.aclose()

        if not reply.text.strip():
            raise ValueError("Gemini returned no text")
        return reply.text

    def build_prompt(self, metrics: MetricsRecord, score: int) -> str:
        """Build the review prompt for a repository."""
        languages = ", ".join(metrics.languages[:3])

        return f"""You are an expert code reviewer analyzing a GitHub repository. Based on these metrics, provide honest feedback.

Repository Metrics:
- Name: {metrics.name}
- Primary Language: {metrics.primary_language}
- Total Commits: {metrics.total_commits}
- Recent Commits (3 months): {metrics.recent_commits}
- Has README: {_flag(metrics.has_readme)}
- README Length: {metrics.readme_length} characters
- Has Tests: {_flag(metrics.has_tests)}
- Has CI/CD: {_flag(metrics.has_cicd)}
- Branches: {metrics.branch_count}
- Open Issues: {metrics.open_issues}
- Pull Requests: {metrics.total_prs}
- Stars: {metrics.stars}
- Languages: {languages}

Calculated Score: {score}/100

Please provide:
1. A 2-3 sentence summary of the repository's strengths and weaknesses
2. A personalized roadmap with 4-6 specific, actionable improvement items

Format your response EXACTLY as:
SUMMARY: [your summary]
ROADMAP:
- [item 1]
- [item 2]
- [item 3]
etc."""

    def parse_insights(self, text: str) -> Insights:
        """Parse a SUMMARY/ROADMAP reply.

        Text before the first ROADMAP: marker is the summary. Lines starting
        with "-" between it and any second marker become roadmap items,
        in order.
        """
        head, _, tail = text.partition(ROADMAP_MARKER)
        tail = tail.split(ROADMAP_MARKER, 1)[0]
        summary = head.replace(SUMMARY_MARKER, "", 1).strip()

        roadmap = []
        for line in tail.splitlines():
            line = line.strip()
            if not line.startswith("-"):
                continue
            item = BULLET_PREFIX.sub("", line).strip()
            if item:
                roadmap.append(item)

        return Insights(summary=summary, roadmap=roadmap)

    def fallback_insights(self, metrics: MetricsRecord, score: int) -> Insights:
        """Templated insights used when generation is unavailable.

        Always returns six roadmap items.
        """
        if score > 70:
            practice = "testing" if metrics.has_tests else "active development"
            summary = (
                f"Repository demonstrates strong development practices with "
                f"{metrics.total_commits} commits and {practice}."
            )
        elif score > 40:
            docs = "Has documentation" if metrics.has_readme else "Needs documentation"
            tests = "includes tests" if metrics.has_tests else "lacks tests"
            summary = f"Repository shows moderate development practices. {docs} and {tests}."
        else:
            focus = ""
            if not metrics.has_readme:
                focus += "documentation, "
            if not metrics.has_tests:
                focus += "testing, "
            summary = (
                f"Repository is in early stages. Focus on establishing {focus}"
                f"and consistent development practices."
            )

        roadmap = [
            "Expand README with usage examples and contribution guidelines"
            if metrics.has_readme
            else "Add comprehensive README with setup instructions and project overview",
            "Increase test coverage to 80%+"
            if metrics.has_tests
            else "Implement unit tests for core functionality",
            "Enhance CI/CD with automated deployments"
            if metrics.has_cicd
            else "Set up CI/CD pipeline using GitHub Actions",
            "Establish regular commit schedule (weekly minimum)"
            if metrics.recent_commits < 10
            else "Maintain consistent commit patterns",
            "Adopt feature branch workflow (main + feature branches)"
            if metrics.branch_count <= 1
            else "Continue effective branch management",
            "Add code documentation and inline comments for complex logic",
        ]

        return Insights(summary=summary, roadmap=roadmap)

    async def generate_insights(self, metrics: MetricsRecord, score: int) -> Insights:
        """Generate insights for a repository, falling back to templates on failure.

        Args:
            metrics: Repository metrics.
            score: Calculated repository score.

        Returns:
            Insights from Gemini, or the templated fallback.
        """
        prompt = self.build_prompt(metrics, score)

        try:
            text = await self._generate(prompt)
        except Exception as e:  # Generation failures never break the analysis
            logger.warning(f"AI generation failed for {metrics.name}: {e}")
            return self.fallback_insights(metrics, score)

        insights = self.parse_insights(text)
        if not insights.summary or not insights.roadmap:
            logger.warning(
                f"AI reply for {metrics.name} did not match the SUMMARY/ROADMAP format"
            )
            return self.fallback_insights(metrics, score)

        return insights


def _flag(value: bool) -> str:
    return "true" if value else "false"
