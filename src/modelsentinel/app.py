"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from modelsentinel.adapters.github import (
    GitCommandError,
    GitHubAPIError,
    GitHubPullRequests,
    GitHubSubmitter,
    GitRepository,
)
from modelsentinel.adapters.llm import (
    AnthropicMessagesClient,
    LLMChangeSetReviewer,
    OpenAIChatClient,
)
from modelsentinel.adapters.registry import build_adapter_registry
from modelsentinel.adapters.yaml_catalog import (
    SmartMergeWriter,
    YamlCatalogStore,
    load_catalog,
    write_manifest,
)
from modelsentinel.config.errors import ConfigurationError
from modelsentinel.domain.model import SourceType
from modelsentinel.domain.reconciliation import (
    DiffOptions,
    EngineOptions,
    ReconciliationEngine,
)
from modelsentinel.domain.review import OnRejectBehavior
from modelsentinel.domain.validation import validate_catalog

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from modelsentinel.config import Settings
    from modelsentinel.domain.model import DiscoveredModel
    from modelsentinel.domain.ports.discovery import AdapterRegistry
    from modelsentinel.domain.ports.review import ChangeSetReviewer, LLMClient
    from modelsentinel.domain.ports.submission import ChangeSubmitter
    from modelsentinel.domain.reconciliation import SyncReport
    from modelsentinel.domain.validation import ValidationResult

log = getLogger(__name__)


def _source_types(names: Sequence[str]) -> tuple[SourceType, ...]:
    try:
        return tuple(SourceType(name.strip().lower()) for name in names)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown discovery source in {list(names)}: {exc}") from exc


def build_engine_options(settings: Settings) -> EngineOptions:
    sync = settings.sync
    return EngineOptions(
        dry_run=sync.dry_run,
        diff=DiffOptions(track_display_name=sync.track_display_name),
        health_enabled=sync.health_enabled,
        health_threshold=sync.health_threshold,
        block_on_review=sync.block_on_review,
        on_reject=OnRejectBehavior(settings.judge.on_reject),
        sources=_source_types(sync.sources),
        no_cache=sync.no_cache,
        max_workers=sync.max_workers,
    )


def build_llm_client(settings: Settings) -> LLMClient:
    judge = settings.judge
    if judge.provider == "openai":
        return OpenAIChatClient(
            config=settings.openai, model=judge.model, max_tokens=judge.max_tokens
        )
    return AnthropicMessagesClient(
        config=settings.anthropic, model=judge.model, max_tokens=judge.max_tokens
    )


def build_reviewer(settings: Settings) -> ChangeSetReviewer | None:
    if not settings.judge.enabled:
        return None
    log.info("LLM review enabled (%s, %s)", settings.judge.provider, settings.judge.model)
    return LLMChangeSetReviewer(build_llm_client(settings))


def build_engine(
    settings: Settings,
    *,
    registry: AdapterRegistry | None = None,
    reviewer: ChangeSetReviewer | None = None,
) -> ReconciliationEngine:
    root = settings.sync.catalog_path
    return ReconciliationEngine(
        registry=registry or build_adapter_registry(settings),
        store=YamlCatalogStore(root),
        writer=SmartMergeWriter(root, track_display_name=settings.sync.track_display_name),
        options=build_engine_options(settings),
        reviewer=reviewer if reviewer is not None else build_reviewer(settings),
    )


def build_submitter(settings: Settings) -> ChangeSubmitter | None:
    github = settings.github
    if not github.enabled:
        return None
    return GitHubSubmitter(
        repository=GitRepository(settings.sync.catalog_path),
        pulls=GitHubPullRequests(github),
        config=github,
    )


def _providers(settings: Settings, providers: Sequence[str] | None) -> list[str]:
    return list(providers or settings.sync.providers)


def sync_catalog(
    settings: Settings,
    *,
    providers: Sequence[str] | None = None,
    engine: ReconciliationEngine | None = None,
    submitter: ChangeSubmitter | None = None,
) -> SyncReport:
    """Reconcile the catalog and, outside dry runs, submit written changes."""

    names = _providers(settings, providers)
    effective_engine = engine or build_engine(settings)
    log.info(
        "Starting sync: providers=%s, catalog=%s, dry_run=%s",
        ",".join(names),
        settings.sync.catalog_path,
        settings.sync.dry_run,
    )
    report = effective_engine.sync(names)

    if report.wrote_changes and not report.dry_run and report.error is None:
        effective_submitter = submitter or build_submitter(settings)
        if effective_submitter is None:
            log.info("GitHub submission not configured; changes left in the working tree")
        else:
            try:
                report.submission = effective_submitter.submit(report)
            except (GitCommandError, GitHubAPIError, ConfigurationError) as exc:
                log.exception("Submitting catalog changes failed")
                report.error = f"submission failed: {exc}"

    log.info("Finished sync: exit code %s", int(report.exit_code))
    return report


def diff_catalog(
    settings: Settings,
    *,
    providers: Sequence[str] | None = None,
    engine: ReconciliationEngine | None = None,
) -> SyncReport:
    effective_engine = engine or build_engine(settings)
    return effective_engine.diff(_providers(settings, providers))


def discover_models(
    settings: Settings,
    provider: str,
    *,
    engine: ReconciliationEngine | None = None,
) -> list[DiscoveredModel]:
    effective_engine = engine or build_engine(settings)
    return effective_engine.discover(provider)


def validate_catalog_at(root: Path) -> ValidationResult:
    catalog = load_catalog(root)
    log.info("Validating catalog %s (version %s)", root, catalog.version)
    return validate_catalog(catalog)


def regenerate_manifest(root: Path) -> Path:
    path = write_manifest(root)
    log.info("Manifest written to %s", path)
    return path
