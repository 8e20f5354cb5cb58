"""Publish a sync report as a branch plus pull request."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from modelsentinel.domain.ports.submission import SubmissionResult
from modelsentinel.domain.reporting import render_pr_body, render_pr_title

if TYPE_CHECKING:
    from collections.abc import Callable

    from modelsentinel.config.github import GitHubConfig
    from modelsentinel.domain.reconciliation import SyncReport

    from .git import GitRepository
    from .pulls import GitHubPullRequests

log = getLogger(__name__)

BRANCH_PREFIX = "sentinel"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def branch_name(providers: list[str], now: datetime) -> str:
    return f"{BRANCH_PREFIX}/{'-'.join(providers) or 'catalog'}-{now:%Y%m%d-%H%M%S}"


class GitHubSubmitter:
    def __init__(
        self,
        *,
        repository: GitRepository,
        pulls: GitHubPullRequests,
        config: GitHubConfig,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._repository = repository
        self._pulls = pulls
        self._config = config
        self._clock = clock

    def submit(self, report: SyncReport) -> SubmissionResult:
        providers = [outcome.provider for outcome in report.outcomes if outcome.wrote_changes]
        branch = branch_name(providers, self._clock())
        title = render_pr_title(report)
        draft = report.draft

        log.info("Submitting catalog changes on branch %s", branch)
        self._repository.create_branch(branch)
        self._repository.add_all()
        self._repository.commit(title)
        self._repository.push(branch, token=self._config.token)

        pull = self._pulls.create(
            title=title,
            body=render_pr_body(report),
            head=branch,
            base=self._config.base_branch,
            draft=draft,
        )
        return SubmissionResult(branch=branch, url=pull.html_url, draft=draft)

