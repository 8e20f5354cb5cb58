"""GitHub submission settings."""

from __future__ import annotations

from dataclasses import dataclass

GITHUB_API_URL = "https://api.github.com"


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    token: str | None = None
    owner: str = ""
    repo: str = ""
    base_branch: str = "main"
    api_url: str = GITHUB_API_URL

    @property
    def enabled(self) -> bool:
        return bool(self.token and self.owner and self.repo)
