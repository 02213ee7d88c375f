"""Typed contracts for external API responses.

Only the fields gitgrade reads are declared; everything else in the
payloads is ignored. Missing fields fall back to the defaults here.
"""

from datetime import datetime

from pydantic import BaseModel, Field

# --- GitHub REST API ---


class GitHubRepoPayload(BaseModel):
    """GET /repos/{owner}/{repo}"""

    name: str
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    language: str | None = None


class GitHubReadmePayload(BaseModel):
    """GET /repos/{owner}/{repo}/readme"""

    content: str = ""


class GitHubCommitAuthor(BaseModel):
    date: datetime | None = None


class GitHubCommitDetail(BaseModel):
    author: GitHubCommitAuthor | None = None


class GitHubCommitPayload(BaseModel):
    """One item of GET /repos/{owner}/{repo}/commits"""

    commit: GitHubCommitDetail = Field(default_factory=GitHubCommitDetail)

    @property
    def authored_at(self) -> datetime | None:
        if self.commit.author is None:
            return None
        return self.commit.author.date


class GitHubContentEntry(BaseModel):
    """One item of a GET /repos/{owner}/{repo}/contents directory listing."""

    name: str


# --- Gemini generateContent ---


class GeminiPart(BaseModel):
    text: str = ""


class GeminiContent(BaseModel):
    parts: list[GeminiPart] = Field(default_factory=list)


class GeminiCandidate(BaseModel):
    content: GeminiContent = Field(default_factory=GeminiContent)


class GeminiResponse(BaseModel):
    """POST /v1beta/models/{model}:generateContent"""

    candidates: list[GeminiCandidate] = Field(default_factory=list)

    @property
    def text(self) -> str:
        """Concatenated text of the first candidate."""
        if not self.candidates:
            return ""
        return "".join(part.text for part in self.candidates[0].content.parts)
