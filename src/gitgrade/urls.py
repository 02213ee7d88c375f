"""Repository URL parsing."""

import re

from gitgrade.errors import InvalidUrlError
from gitgrade.models.schemas import RepoRef

# github.com/owner/repo, anywhere in the string
GITHUB_PATTERN = re.compile(r"github\.com/([^/?#\s]+)/([^/?#\s]+)")


def parse_repo_url(url: str) -> RepoRef:
    """Parse a GitHub repository URL into a RepoRef.

    Handles:
    - https://github.com/owner/repo
    - https://github.com/owner/repo.git
    - https://github.com/owner/repo/tree/main/docs
    - github.com/owner/repo
    - https://github.com/owner/repo#readme (query and fragment are dropped)

    Args:
        url: Repository URL to parse.

    Returns:
        RepoRef with the owner and repository name.

    Raises:
        InvalidUrlError: If no github.com/owner/repo segment is found.
    """
    match = GITHUB_PATTERN.search(url or "")
    if not match:
        raise InvalidUrlError(url)

    owner, name = match.group(1), match.group(2)
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not name:
        raise InvalidUrlError(url)

    return RepoRef(owner=owner, name=name)
