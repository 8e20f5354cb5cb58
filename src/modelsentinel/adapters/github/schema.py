"""GitHub REST payloads used when opening pull requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PullRequest(GitHubBaseModel):
    number: int
    html_url: str
    draft: bool = False


class GitHubErrorPayload(GitHubBaseModel):
    message: str = ""
    documentation_url: str | None = None
