"""Pydantic models for repository analysis data."""

from pydantic import BaseModel, ConfigDict, Field


class RepoRef(BaseModel):
    """Reference to a GitHub repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def url(self) -> str:
        """Get the full repository URL."""
        return f"https://github.com/{self.full_name}"


class MetricsRecord(BaseModel):
    """Flat repository metrics collected from GitHub.

    Every field has a default so a record stays complete when a
    non-fatal sub-fetch fails. Commit, branch and pull request counts
    come from a single page of at most 100 items, so they saturate at 100.
    """

    name: str
    stars: int = Field(default=0, ge=0)
    forks: int = Field(default=0, ge=0)
    watchers: int = Field(default=0, ge=0)
    open_issues: int = Field(default=0, ge=0)
    primary_language: str = "Unknown"
    languages: list[str] = Field(default_factory=list)
    has_readme: bool = False
    readme_length: int = Field(default=0, ge=0)  # Decoded bytes
    total_commits: int = Field(default=0, ge=0)
    recent_commits: int = Field(default=0, ge=0)  # Last 3 months
    branch_count: int = Field(default=0, ge=0)
    total_prs: int = Field(default=0, ge=0)
    has_tests: bool = False
    has_cicd: bool = False


# --- Scoring Models ---


class ScoreComponent(BaseModel):
    """Points awarded for one scoring dimension."""

    dimension: str
    points: int = Field(ge=0)
    cap: int


# --- Insight Models ---


class Insights(BaseModel):
    """Natural-language summary and improvement roadmap."""

    summary: str
    roadmap: list[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """Complete analysis result for a repository."""

    score: int = Field(ge=0, le=100)
    summary: str
    roadmap: list[str]
    metrics: MetricsRecord


# --- API Models ---


class AnalyzeRequest(BaseModel):
    """Request body for the analyze endpoint."""

    repo_url: str | None = None
