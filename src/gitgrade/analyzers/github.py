"""GitHub metrics fetcher for repository analysis."""

import base64
import binascii
import calendar
import json
import logging
import os
from datetime import datetime, timezone
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from gitgrade.errors import MetricsFetchError
from gitgrade.models.contracts import (
    GitHubCommitPayload,
    GitHubContentEntry,
    GitHubReadmePayload,
    GitHubRepoPayload,
)
from gitgrade.models.schemas import MetricsRecord, RepoRef

logger = logging.getLogger(__name__)

# Errors from a sub-fetch that are defaulted instead of propagated
SUB_FETCH_ERRORS = (httpx.HTTPError, ValidationError, ValueError, TypeError)


def months_before(moment: datetime, months: int) -> datetime:
    """Step back a number of calendar months, clamping the day to the month's length."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class GitHubFetcher:
    """Fetches repository metrics from the GitHub REST API.

    A personal access token is optional but raises the rate limit.
    Set GITHUB_TOKEN environment variable or pass token to constructor.

    Commit, branch and pull request counts are taken from a single page
    of at most PAGE_SIZE items and are not full counts.
    """

    BASE_URL = "https://api.github.com"
    PAGE_SIZE = 100
    RECENT_MONTHS = 3
    RATE_LIMIT_WARNING = 10

    TEST_INDICATORS = ("test", "tests", "__tests__", "spec", "specs")
    CICD_PATHS = (
        ".github/workflows",
        ".gitlab-ci.yml",
        ".travis.yml",
        "Jenkinsfile",
        ".circleci/config.yml",
    )

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            token: GitHub personal access token. If not provided, uses GITHUB_TOKEN env var.
            client: Optional httpx client. If not provided, a new client is created per request.
        """
        self._token = token or os.environ.get("GITHUB_TOKEN")
        self._client = client

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=30.0, headers=self._headers())

    def _check_rate_limit(self, response: httpx.Response) -> None:
        """Warn when the X-RateLimit-Remaining header shows the quota nearly spent."""
        remaining = response.headers.get("X-RateLimit-Remaining", "")
        if remaining.isdigit() and int(remaining) < self.RATE_LIMIT_WARNING:
            logger.warning(f"GitHub rate limit nearly exhausted: {remaining} calls left")

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        """API path for a repository, with owner and name percent-encoded."""
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    async def _fetch(self, path: str, params: dict | None = None) -> dict | list | None:
        """Fetch from GitHub API.

        Returns None if 404, raises on other errors.
        """
        client = await self._get_client()
        url = f"{self.BASE_URL}{path}"

        try:
            response = await client.get(url, params=params, headers=self._headers())
            self._check_rate_limit(response)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        finally:
            if self._client is None:
                await client.aclose()

    async def _fetch_page(self, path: str, params: dict | None = None) -> list:
        """Fetch the first page (up to PAGE_SIZE items) of a list endpoint."""
        params = dict(params or {})
        params["per_page"] = self.PAGE_SIZE
        params["page"] = 1

        data = await self._fetch(path, params=params)
        if data is None:
            return []
        if not isinstance(data, list):
            raise TypeError(f"Expected a list from {path}, got {type(data).__name__}")
        return data

    async def fetch_metrics(self, repo_ref: RepoRef) -> MetricsRecord:
        """Fetch the full metrics record for a repository.

        Only the repository metadata call is fatal; every other stage
        falls back to its default value when it fails.

        Args:
            repo_ref: Reference to the repository.

        Returns:
            MetricsRecord with every field populated.

        Raises:
            MetricsFetchError: If the repository metadata cannot be fetched.
        """
        owner = repo_ref.owner
        repo = repo_ref.name

        repo_data = await self._fetch_repo_info(owner, repo)
        now = datetime.now(timezone.utc)

        languages = await self._fetch_languages(owner, repo)
        has_readme, readme_length = await self._fetch_readme_stats(owner, repo)
        total_commits, recent_commits = await self._fetch_commit_counts(owner, repo, now)
        branch_count = await self._fetch_branch_count(owner, repo)
        total_prs = await self._fetch_pr_count(owner, repo)
        has_tests = await self.check_for_tests(owner, repo)
        has_cicd = await self.check_for_cicd(owner, repo)

        return MetricsRecord(
            name=repo_data.name,
            stars=repo_data.stargazers_count,
            forks=repo_data.forks_count,
            watchers=repo_data.watchers_count,
            open_issues=repo_data.open_issues_count,
            primary_language=repo_data.language or "Unknown",
            languages=languages,
            has_readme=has_readme,
            readme_length=readme_length,
            total_commits=total_commits,
            recent_commits=recent_commits,
            branch_count=branch_count,
            total_prs=total_prs,
            has_tests=has_tests,
            has_cicd=has_cicd,
        )

    async def _fetch_repo_info(self, owner: str, repo: str) -> GitHubRepoPayload:
        """Fetch basic repository information."""
        try:
            data = await self._fetch(self._repo_path(owner, repo))
        except httpx.HTTPStatusError as e:
            raise MetricsFetchError(
                owner, repo, f"GitHub returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise MetricsFetchError(owner, repo, str(e) or type(e).__name__) from e
        except json.JSONDecodeError as e:
            raise MetricsFetchError(owner, repo, "Response was not valid JSON") from e

        if data is None:
            raise MetricsFetchError(owner, repo, "Not Found")

        try:
            return GitHubRepoPayload.model_validate(data)
        except ValidationError as e:
            raise MetricsFetchError(owner, repo, "Unexpected repository payload") from e

    async def _fetch_languages(self, owner: str, repo: str) -> list[str]:
        """Fetch language names in the order GitHub reports them."""
        try:
            data = await self._fetch(f"{self._repo_path(owner, repo)}/languages")
        except SUB_FETCH_ERRORS as e:
            logger.warning(f"Languages fetch failed for {owner}/{repo}: {e}")
            return []

        if not isinstance(data, dict):
            return []
        return [str(name) for name in data]

    async def _fetch_readme_stats(self, owner: str, repo: str) -> tuple[bool, int]:
        """Fetch README presence and decoded byte length."""
        try:
            data = await self._fetch(f"{self._repo_path(owner, repo)}/readme")
            if data is None:
                return False, 0
            readme = GitHubReadmePayload.model_validate(data)
            content = base64.b64decode(readme.content)
        except (*SUB_FETCH_ERRORS, binascii.Error) as e:
            logger.warning(f"README fetch failed for {owner}/{repo}: {e}")
            return False, 0

        return True, len(content)

    async def _fetch_commit_counts(
        self, owner: str, repo: str, now: datetime
    ) -> tuple[int, int]:
        """Count commits on the first page and those authored in the last 3 months."""
        try:
            page = await self._fetch_page(f"{self._repo_path(owner, repo)}/commits")
            commits = [GitHubCommitPayload.model_validate(item) for item in page]
        except SUB_FETCH_ERRORS as e:
            logger.warning(f"Commit fetch failed for {owner}/{repo}: {e}")
            return 0, 0

        cutoff = months_before(now, self.RECENT_MONTHS)
        recent = 0
        for commit in commits:
            authored_at = commit.authored_at
            if authored_at is None:
                continue
            if authored_at.tzinfo is None:
                authored_at = authored_at.replace(tzinfo=timezone.utc)
            if authored_at > cutoff:
                recent += 1

        return len(commits), recent

    async def _fetch_branch_count(self, owner: str, repo: str) -> int:
        """Count branches on the first page."""
        try:
            branches = await self._fetch_page(f"{self._repo_path(owner, repo)}/branches")
        except SUB_FETCH_ERRORS as e:
            logger.warning(f"Branch fetch failed for {owner}/{repo}: {e}")
            return 0
        return len(branches)

    async def _fetch_pr_count(self, owner: str, repo: str) -> int:
        """Count pull requests in any state on the first page."""
        try:
            prs = await self._fetch_page(
                f"{self._repo_path(owner, repo)}/pulls",
                params={"state": "all"},
            )
        except SUB_FETCH_ERRORS as e:
            logger.warning(f"Pull request fetch failed for {owner}/{repo}: {e}")
            return 0
        return len(prs)

    async def check_for_tests(self, owner: str, repo: str) -> bool:
        """Check whether any root entry name looks like a test directory or file."""
        try:
            root = await self._fetch(f"{self._repo_path(owner, repo)}/contents")
            if not isinstance(root, list):
                return False
            entries = [GitHubContentEntry.model_validate(item) for item in root]
        except SUB_FETCH_ERRORS as e:
            logger.warning(f"Root listing failed for {owner}/{repo}: {e}")
            return False

        return any(
            indicator in entry.name.lower()
            for entry in entries
            for indicator in self.TEST_INDICATORS
        )

    async def check_for_cicd(self, owner: str, repo: str) -> bool:
        """Probe well-known CI configuration paths, stopping at the first hit."""
        base = self._repo_path(owner, repo)
        for path in self.CICD_PATHS:
            try:
                found = await self._fetch(f"{base}/contents/{quote(path)}")
            except SUB_FETCH_ERRORS as e:
                logger.debug(f"CI probe {path} failed for {owner}/{repo}: {e}")
                continue
            if found is not None:
                return True
        return False
