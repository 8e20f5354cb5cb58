from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest

from modelsentinel.adapters.yaml_catalog import SmartMergeWriter, YamlCatalogStore
from modelsentinel.adapters.yaml_catalog.yaml_io import read_yaml_file
from modelsentinel.config import MissingConfigurationError
from modelsentinel.domain.model import CatalogVersion
from modelsentinel.domain.ports.discovery import AdapterRegistry
from modelsentinel.domain.reconciliation import (
    EngineOptions,
    ExitCode,
    ReconciliationEngine,
    RiskThresholds,
)
from modelsentinel.domain.review import (
    ModelVerdict,
    OnRejectBehavior,
    ReviewError,
    ReviewResult,
    Verdict,
)
from tests.helpers.catalog import FakeAdapter, FakeHealthAdapter, make_discovered

if TYPE_CHECKING:
    from pathlib import Path

    from modelsentinel.domain.model import DiscoveredModel
    from modelsentinel.domain.ports.discovery import DiscoveryAdapter
    from modelsentinel.domain.reconciliation import ChangeSet

NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)


def _current_openai() -> list[DiscoveredModel]:
    return [
        make_discovered("gpt-4o", capabilities=("chat", "function_calling", "vision")),
        make_discovered(
            "gpt-3.5-turbo",
            family="gpt-3.5",
            max_tokens=16_385,
            max_completion_tokens=4_096,
        ),
    ]


class _Reviewer:
    def __init__(self, result: ReviewResult | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.seen: list[str] = []

    def evaluate(self, changeset: ChangeSet) -> ReviewResult | None:
        self.seen.append(changeset.provider)
        if self.error is not None:
            raise self.error
        return self.result


def _engine(
    root: Path,
    *adapters: DiscoveryAdapter,
    reviewer: _Reviewer | None = None,
    **options: object,
) -> ReconciliationEngine:
    return ReconciliationEngine(
        registry=AdapterRegistry.from_adapters({adapter.name: adapter for adapter in adapters}),
        store=YamlCatalogStore(root),
        writer=SmartMergeWriter(root),
        options=EngineOptions(**options),  # type: ignore[arg-type]
        reviewer=reviewer,
        clock=lambda: NOW,
    )


def _load(path: Path) -> dict[str, Any]:
    data = read_yaml_file(path)
    assert isinstance(data, dict)
    return data  # pyright: ignore[reportUnknownVariableType]


def _version(root: Path) -> str:
    return (root / "version.txt").read_text(encoding="utf-8").strip()


def test_sync_writes_new_model_and_bumps_minor(catalog_root: Path) -> None:
    adapter = FakeAdapter(
        "openai", models=[*_current_openai(), make_discovered("gpt-5", family="gpt-5")]
    )

    report = _engine(catalog_root, adapter).sync(["openai"])

    (outcome,) = report.outcomes
    assert outcome.error is None
    assert outcome.wrote_new
    assert report.exit_code is ExitCode.SUCCESS
    assert report.previous_version == CatalogVersion(1, 2, 3)
    assert report.version == CatalogVersion(1, 3, 0)
    assert _version(catalog_root) == "1.3.0"

    written = _load(catalog_root / "providers/openai/models/gpt-5.yaml")
    assert written["name"] == "gpt-5"
    assert written["x_updater"] == {
        "last_verified_at": "2025-01-02T03:04:05Z",
        "sources": ["api"],
    }

    manifest = _load(catalog_root / "manifest.yaml")
    assert report.manifest_path == catalog_root / "manifest.yaml"
    assert manifest["version"] == "1.3.0"
    assert manifest["stats"] == {
        "total_providers": 2,
        "total_models": 3,
        "static_providers": 1,
        "meta_providers": 1,
    }


def test_sync_update_only_bumps_patch_and_preserves_unknown_keys(catalog_root: Path) -> None:
    models = _current_openai()
    models[1] = make_discovered(
        "gpt-3.5-turbo", family="gpt-3.5", max_tokens=32_000, max_completion_tokens=4_096
    )

    report = _engine(catalog_root, FakeAdapter("openai", models=models)).sync(["openai"])

    assert report.version == CatalogVersion(1, 2, 4)
    written = _load(catalog_root / "providers/openai/models/gpt-3.5-turbo.yaml")
    assert written["limits"] == {"max_tokens": 32_000, "max_completion_tokens": 4_096}
    assert written["tags"] == ["legacy"]
    assert written["cost"] == {"input_per_1k": 0.0005, "output_per_1k": 0.0015}
    assert written["display_name"] == "GPT-3.5-TURBO"


def test_sync_without_changes_leaves_catalog_alone(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=_current_openai())

    report = _engine(catalog_root, adapter).sync(["openai"])

    (outcome,) = report.outcomes
    assert outcome.skipped
    assert outcome.skip_reason == "no changes"
    assert report.version is None
    assert _version(catalog_root) == "1.2.3"
    assert not (catalog_root / "manifest.yaml").exists()
    assert report.exit_code is ExitCode.SUCCESS


def test_malformed_version_aborts_before_any_write(catalog_root: Path) -> None:
    (catalog_root / "version.txt").write_text("1.2\n", encoding="utf-8")
    models_dir = catalog_root / "providers" / "openai" / "models"
    before = {path.name: path.read_bytes() for path in models_dir.iterdir()}
    adapter = FakeAdapter(
        "openai",
        models=[
            make_discovered("gpt-4o", capabilities=("chat", "vision")),
            make_discovered("gpt-5", family="gpt-5"),
        ],
    )

    report = _engine(catalog_root, adapter).sync(["openai"])

    assert report.error is not None
    assert report.error.startswith("reading catalog version:")
    assert report.outcomes == []
    assert adapter.calls == []
    assert report.exit_code is ExitCode.FAILURE
    assert {path.name: path.read_bytes() for path in models_dir.iterdir()} == before
    assert _version(catalog_root) == "1.2"


def test_dry_run_writes_nothing(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=[*_current_openai(), make_discovered("gpt-5")])

    report = _engine(catalog_root, adapter, dry_run=True).sync(["openai"])

    assert report.dry_run
    assert report.outcomes[0].counts.new == 1
    assert not report.wrote_changes
    assert not (catalog_root / "providers/openai/models/gpt-5.yaml").exists()
    assert _version(catalog_root) == "1.2.3"


def test_failing_provider_does_not_stop_siblings(catalog_root: Path) -> None:
    broken = FakeAdapter("anthropic", error=RuntimeError("boom"))
    working = FakeAdapter("openai", models=[*_current_openai(), make_discovered("gpt-5")])

    report = _engine(catalog_root, broken, working).sync(["anthropic", "openai"])

    assert [outcome.provider for outcome in report.outcomes] == ["anthropic", "openai"]
    assert report.outcomes[0].error == "boom"
    assert report.outcomes[1].wrote_new
    assert report.exit_code is ExitCode.FAILURE


def test_unknown_provider_is_reported_per_provider(catalog_root: Path) -> None:
    report = _engine(catalog_root).sync(["mistral"])

    assert report.outcomes[0].error == "No discovery adapter registered for provider 'mistral'"
    assert report.exit_code is ExitCode.FAILURE


def test_health_probe_failure_exits_with_source_health(catalog_root: Path) -> None:
    adapter = FakeHealthAdapter("openai", models=_current_openai(), healthy=False)

    report = _engine(catalog_root, adapter).sync(["openai"])

    (outcome,) = report.outcomes
    assert outcome.health_failed
    assert "liveness probe failed" in (outcome.error or "")
    assert adapter.calls == []
    assert report.exit_code is ExitCode.SOURCE_HEALTH


def test_too_few_models_fails_health(catalog_root: Path) -> None:
    adapter = FakeHealthAdapter(
        "openai", models=[make_discovered("gpt-4o")], min_expected_models=4
    )

    report = _engine(catalog_root, adapter).sync(["openai"])

    assert report.outcomes[0].health_failed
    assert "below threshold 2" in (report.outcomes[0].error or "")
    assert report.exit_code is ExitCode.SOURCE_HEALTH


def test_health_checks_can_be_disabled(catalog_root: Path) -> None:
    adapter = FakeHealthAdapter("openai", models=_current_openai(), healthy=False)

    report = _engine(catalog_root, adapter, health_enabled=False).sync(["openai"])

    assert not report.outcomes[0].health_failed
    assert report.exit_code is ExitCode.SUCCESS


def test_risk_marks_draft_without_blocking(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=[*_current_openai(), make_discovered("gpt-5")])

    report = _engine(catalog_root, adapter, risk=RiskThresholds(max_changed=0)).sync(["openai"])

    (outcome,) = report.outcomes
    assert outcome.draft
    assert outcome.risk is not None and outcome.risk.needs_review
    assert outcome.wrote_new
    assert report.draft
    assert report.exit_code is ExitCode.SUCCESS


def test_block_on_review_stops_writes(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=[*_current_openai(), make_discovered("gpt-5")])

    report = _engine(
        catalog_root,
        adapter,
        risk=RiskThresholds(max_changed=0),
        block_on_review=True,
    ).sync(["openai"])

    (outcome,) = report.outcomes
    assert outcome.blocked
    assert outcome.skip_reason.startswith("blocked by risk policy")
    assert not (catalog_root / "providers/openai/models/gpt-5.yaml").exists()
    assert report.exit_code is ExitCode.POLICY_BLOCK


def test_validation_errors_skip_writes(catalog_root: Path) -> None:
    adapter = FakeAdapter(
        "openai",
        models=[
            *_current_openai(),
            make_discovered("tiny", max_tokens=10, max_completion_tokens=None),
        ],
    )

    report = _engine(catalog_root, adapter).sync(["openai"])

    (outcome,) = report.outcomes
    assert outcome.error is not None
    assert outcome.error.startswith("validation failed:")
    assert "limits.max_tokens" in outcome.error
    assert not outcome.written
    assert report.exit_code is ExitCode.FAILURE


@pytest.mark.parametrize(
    "error",
    [
        ReviewError("timeout"),
        MissingConfigurationError("Missing configuration for: ANTHROPIC_API_KEY"),
        RuntimeError("unexpected"),
    ],
    ids=["review-error", "missing-api-key", "unexpected"],
)
def test_review_failure_fails_open(catalog_root: Path, error: Exception) -> None:
    adapter = FakeAdapter("openai", models=[*_current_openai(), make_discovered("gpt-5")])
    reviewer = _Reviewer(error=error)

    report = _engine(catalog_root, adapter, reviewer=reviewer).sync(["openai"])

    assert reviewer.seen == ["openai"]
    assert report.outcomes[0].error is None
    assert report.outcomes[0].wrote_new
    assert report.outcomes[0].review is None
    assert report.version == CatalogVersion(1, 3, 0)


def test_review_flag_forces_draft(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=[*_current_openai(), make_discovered("gpt-5")])
    reviewer = _Reviewer(ReviewResult([ModelVerdict("gpt-5", Verdict.FLAG, 0.6)]))

    report = _engine(catalog_root, adapter, reviewer=reviewer).sync(["openai"])

    assert report.outcomes[0].draft
    assert report.outcomes[0].wrote_new


def test_review_rejection_can_exclude_models(catalog_root: Path) -> None:
    adapter = FakeAdapter(
        "openai",
        models=[*_current_openai(), make_discovered("gpt-5"), make_discovered("gpt-6")],
    )
    reviewer = _Reviewer(ReviewResult([ModelVerdict("gpt-6", Verdict.REJECT, 0.9)]))

    report = _engine(
        catalog_root, adapter, reviewer=reviewer, on_reject=OnRejectBehavior.EXCLUDE
    ).sync(["openai"])

    models_dir = catalog_root / "providers/openai/models"
    assert (models_dir / "gpt-5.yaml").exists()
    assert not (models_dir / "gpt-6.yaml").exists()
    assert not report.outcomes[0].draft


def test_all_models_rejected_skips_provider(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=[*_current_openai(), make_discovered("gpt-5")])
    reviewer = _Reviewer(ReviewResult([ModelVerdict("gpt-5", Verdict.REJECT, 0.9)]))

    report = _engine(
        catalog_root, adapter, reviewer=reviewer, on_reject=OnRejectBehavior.EXCLUDE
    ).sync(["openai"])

    assert report.outcomes[0].skip_reason == "all models rejected by review"
    assert report.version is None


def test_diff_only_reports_changes_exit_code(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=[*_current_openai(), make_discovered("gpt-5")])

    report = _engine(catalog_root, adapter).diff(["openai"])

    assert report.diff_only
    assert report.outcomes[0].counts.new == 1
    assert report.exit_code is ExitCode.CHANGES
    assert not (catalog_root / "providers/openai/models/gpt-5.yaml").exists()


def test_diff_without_changes_succeeds(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=_current_openai())

    assert _engine(catalog_root, adapter).diff(["openai"]).exit_code is ExitCode.SUCCESS


def test_disappeared_models_are_reported_not_removed(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=[_current_openai()[0]])

    report = _engine(catalog_root, adapter).sync(["openai"])

    (outcome,) = report.outcomes
    assert outcome.counts.disappeared == 1
    assert not outcome.written
    assert (catalog_root / "providers/openai/models/gpt-3.5-turbo.yaml").exists()
    assert report.version is None


def test_discover_passes_options_and_deduplicates(catalog_root: Path) -> None:
    adapter = FakeAdapter("openai", models=[make_discovered("a"), make_discovered("a")])

    discovered = _engine(catalog_root, adapter, no_cache=True).discover("openai")

    assert [model.name for model in discovered] == ["a"]
    assert adapter.calls[0].no_cache


@pytest.mark.parametrize("workers", [1, 4])
def test_outcomes_follow_requested_order(catalog_root: Path, workers: int) -> None:
    adapters = [FakeAdapter(name) for name in ("c", "a", "b")]

    report = _engine(catalog_root, *adapters, max_workers=workers).diff(["c", "a", "b"])

    assert [outcome.provider for outcome in report.outcomes] == ["c", "a", "b"]
