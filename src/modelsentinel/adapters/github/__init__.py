"""Git + GitHub submission of catalog changes."""

from __future__ import annotations

from .git import GitCommandError, GitRepository
from .pulls import GitHubAPIError, GitHubPullRequests
from .schema import PullRequest
from .submitter import GitHubSubmitter, branch_name

__all__ = [
    "GitCommandError",
    "GitHubAPIError",
    "GitHubPullRequests",
    "GitHubSubmitter",
    "GitRepository",
    "PullRequest",
    "branch_name",
]
