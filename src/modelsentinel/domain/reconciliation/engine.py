"""Orchestrator for catalog reconciliation.

The engine composes injected collaborators (adapter registry, catalog store,
writer, validator, optional reviewer) but does not prescribe concrete
adapters. Each provider is reconciled in isolation: a failure is captured in
that provider's ``GroupOutcome`` and never prevents siblings from finishing.

The catalog version and manifest are shared by every provider, so they are
only touched in a sequential post-pass once all providers are done.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from modelsentinel.domain.model import UpdaterMetadata
from modelsentinel.domain.ports.discovery import DiscoverOptions, HealthChecker
from modelsentinel.domain.review import OnRejectBehavior, apply_review
from modelsentinel.domain.validation import format_result, validate_changeset

from .dedupe import deduplicate_discovered
from .diff import compute_changeset
from .fields import DiffOptions
from .outcome import GroupOutcome, SyncReport
from .risk import RiskThresholds, assess_risk

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

    from modelsentinel.domain.model import CatalogVersion, DiscoveredModel, SourceType
    from modelsentinel.domain.ports.catalog import CatalogStore, ModelWriter
    from modelsentinel.domain.ports.discovery import AdapterRegistry, DiscoveryAdapter
    from modelsentinel.domain.ports.review import ChangeSetReviewer
    from modelsentinel.domain.validation import ValidationResult

    from .changeset import ChangeSet

    type ValidateChangeSet = Callable[..., ValidationResult]

log = getLogger(__name__)


class SourceHealthError(RuntimeError):
    """A provider's source failed its liveness probe or returned too few models."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"source health check failed for {provider}: {reason}")
        self.provider = provider
        self.reason = reason


@dataclass(slots=True, frozen=True, kw_only=True)
class EngineOptions:
    dry_run: bool = False
    diff: DiffOptions = field(default_factory=DiffOptions)
    risk: RiskThresholds = field(default_factory=RiskThresholds)
    health_enabled: bool = True
    # Fraction of ``min_expected_models`` a discovery must reach.
    health_threshold: float = 0.5
    block_on_review: bool = False
    on_reject: OnRejectBehavior = OnRejectBehavior.DRAFT
    sources: tuple[SourceType, ...] = ()
    no_cache: bool = False
    max_workers: int = 1


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class ReconciliationEngine:
    """Run discovery, diff, policy stages and writes for each provider."""

    registry: AdapterRegistry
    store: CatalogStore
    writer: ModelWriter
    options: EngineOptions = field(default_factory=EngineOptions)
    reviewer: ChangeSetReviewer | None = None
    validate: ValidateChangeSet = validate_changeset
    clock: Callable[[], datetime] = _utcnow

    # ------------------------------------------------------------------
    # Discovery + diff
    # ------------------------------------------------------------------

    def discover(self, provider: str) -> list[DiscoveredModel]:
        """Discover and deduplicate models for ``provider`` with health gates applied."""

        adapter = self.registry.get(provider)
        self._check_liveness(adapter)
        discovered = adapter.discover(
            DiscoverOptions(sources=self.options.sources, no_cache=self.options.no_cache)
        )
        discovered = deduplicate_discovered(discovered)
        log.info("Discovered %s models for %s", len(discovered), provider)
        self._check_model_count(adapter, len(discovered))
        return discovered

    def diff_provider(self, provider: str) -> ChangeSet:
        discovered = self.discover(provider)
        existing = self.store.load_models(provider)
        changeset = compute_changeset(provider, discovered, existing, self.options.diff)
        log.info(
            "Diff for %s: %s new, %s updated, %s unchanged, %s disappeared, %s renamed",
            provider,
            len(changeset.new),
            len(changeset.updated),
            changeset.unchanged,
            len(changeset.disappeared),
            len(changeset.renames),
        )
        return changeset

    def diff(self, providers: Sequence[str]) -> SyncReport:
        """Compute change sets only; nothing is written."""

        outcomes = self._run_all(self._diff_outcome, providers)
        return SyncReport(outcomes=outcomes, diff_only=True, dry_run=True)

    # ------------------------------------------------------------------
    # Full reconciliation
    # ------------------------------------------------------------------

    def sync(self, providers: Sequence[str]) -> SyncReport:
        """Reconcile every provider, then advance the version once if anything was written.

        The catalog version is read before any provider runs; an unreadable
        version aborts the sync without touching model files.
        """

        try:
            previous = self.store.read_version()
        except Exception as exc:
            log.exception("Reading catalog version failed; nothing reconciled")
            return SyncReport(dry_run=self.options.dry_run, error=f"reading catalog version: {exc}")

        outcomes = self._run_all(self.reconcile_provider, providers)
        report = SyncReport(outcomes=outcomes, dry_run=self.options.dry_run)
        report.previous_version = previous
        if report.wrote_changes:
            self._advance_catalog(report, previous)
        else:
            log.info("No catalog files changed; version left as is")
        return report

    def reconcile_provider(self, provider: str) -> GroupOutcome:
        outcome = GroupOutcome(provider=provider)
        with self._isolated(outcome):
            self._reconcile(provider, outcome)
        return outcome

    def _reconcile(self, provider: str, outcome: GroupOutcome) -> None:
        changeset = self.diff_provider(provider)
        outcome.changeset = changeset
        if not changeset.has_changes:
            log.info("No changes detected for %s", provider)
            outcome.skip("no changes")
            return

        risk = assess_risk(changeset, self.options.risk)
        outcome.risk = risk
        outcome.draft = risk.needs_review
        if risk.needs_review:
            log.warning("%s needs review: %s", provider, "; ".join(risk.reasons))
            if self.options.block_on_review:
                risk.blocked = True
                outcome.blocked = True
                outcome.skip("blocked by risk policy: " + "; ".join(risk.reasons))
                return

        validation = self.validate(
            changeset, include_display_name=self.options.diff.track_display_name
        )
        outcome.validation = validation
        if validation.has_errors:
            outcome.error = "validation failed:\n" + format_result(validation)
            log.error("Validation failed for %s; skipping writes", provider)
            return

        self._review(changeset, outcome)
        if not changeset.new and not changeset.updated:
            if changeset.disappeared:
                log.info("%s has only disappearance candidates; nothing to write", provider)
            else:
                outcome.skip("all models rejected by review")
            return

        if self.options.dry_run:
            log.info("Dry run: would write %s models for %s", changeset.total_changed, provider)
            return

        self._write(provider, changeset, outcome)

    def _review(self, changeset: ChangeSet, outcome: GroupOutcome) -> None:
        if self.reviewer is None or not (changeset.new or changeset.updated):
            return
        try:
            result = self.reviewer.evaluate(changeset)
        except Exception as exc:
            log.warning("Review failed for %s, continuing unfiltered: %s", outcome.provider, exc)
            return
        if result is None:
            return
        outcome.review = result
        if apply_review(changeset, result, self.options.on_reject):
            outcome.draft = True

    def _write(self, provider: str, changeset: ChangeSet, outcome: GroupOutcome) -> None:
        metadata = UpdaterMetadata(
            last_verified_at=self.clock().astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
            sources=self._metadata_sources(provider),
        )
        for entry in changeset.new:
            outcome.written.append(
                self.writer.write_model(provider, entry.model, metadata=metadata)
            )
        for update in changeset.updated:
            outcome.written.append(
                self.writer.write_model(provider, update.model, metadata=metadata)
            )
        log.info(
            "Wrote %s model files for %s",
            sum(1 for result in outcome.written if result.written),
            provider,
        )

    def _metadata_sources(self, provider: str) -> tuple[str, ...]:
        sources = self.options.sources or self.registry.get(provider).supported_sources
        return tuple(str(source) for source in sources)

    # ------------------------------------------------------------------
    # Shared catalog state
    # ------------------------------------------------------------------

    def _advance_catalog(self, report: SyncReport, previous: CatalogVersion) -> None:
        had_new = any(outcome.wrote_new for outcome in report.outcomes)
        version = previous.advance(had_new_records=had_new)
        try:
            self.store.write_version(version)
            report.version = version
            report.manifest_path = self.store.write_manifest()
        except Exception as exc:
            log.exception("Updating catalog version/manifest failed")
            report.error = f"updating catalog version/manifest: {exc}"
            return
        log.info("Catalog version %s -> %s", previous, version)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _diff_outcome(self, provider: str) -> GroupOutcome:
        outcome = GroupOutcome(provider=provider)
        with self._isolated(outcome):
            outcome.changeset = self.diff_provider(provider)
        return outcome

    def _run_all(
        self,
        run: Callable[[str], GroupOutcome],
        providers: Iterable[str],
    ) -> list[GroupOutcome]:
        names = list(providers)
        workers = max(1, min(self.options.max_workers, len(names)))
        if workers == 1:
            return [run(name) for name in names]
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sentinel") as pool:
            return list(pool.map(run, names))

    @contextmanager
    def _isolated(self, outcome: GroupOutcome) -> Iterator[None]:
        try:
            yield
        except SourceHealthError as exc:
            log.warning("%s", exc)
            outcome.health_failed = True
            outcome.error = str(exc)
        except Exception as exc:
            log.exception("Reconciliation failed for %s", outcome.provider)
            outcome.error = str(exc)

    def _check_liveness(self, adapter: DiscoveryAdapter) -> None:
        if not self.options.health_enabled or not isinstance(adapter, HealthChecker):
            return
        log.info("Running health check for %s", adapter.name)
        try:
            adapter.health_check()
        except Exception as exc:
            raise SourceHealthError(adapter.name, f"liveness probe failed: {exc}") from exc

    def _check_model_count(self, adapter: DiscoveryAdapter, count: int) -> None:
        if not self.options.health_enabled or not isinstance(adapter, HealthChecker):
            return
        minimum = adapter.min_expected_models
        if minimum <= 0:
            return
        required = int(minimum * self.options.health_threshold)
        if count < required:
            raise SourceHealthError(
                adapter.name,
                f"discovered {count} models, below threshold {required} "
                f"(min={minimum} x {self.options.health_threshold:.0%})",
            )


__all__ = ["EngineOptions", "ReconciliationEngine", "SourceHealthError"]
