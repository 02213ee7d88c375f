"""Exceptions raised by the analysis pipeline."""


class GitGradeError(Exception):
    """Base class for gitgrade errors."""


class InvalidUrlError(GitGradeError):
    """Raised when a repository URL has no host/owner/repo segment."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Invalid GitHub URL: {url}")


class MetricsFetchError(GitGradeError):
    """Raised when core repository metadata cannot be fetched."""

    def __init__(self, owner: str, repo: str, reason: str) -> None:
        self.owner = owner
        self.repo = repo
        self.reason = reason
        super().__init__(f"Failed to fetch metrics for {owner}/{repo}: {reason}")


class AnalysisError(GitGradeError):
    """Raised when any stage of a repository analysis fails."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Analysis failed: {message}")
