"""Schema and range rules for catalog models.

Errors block a provider's write step; warnings are reported but never block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from modelsentinel.domain.model import ModelStatus, model_filename

if TYPE_CHECKING:
    from collections.abc import Iterable

    from modelsentinel.domain.model import Catalog, Model
    from modelsentinel.domain.reconciliation.changeset import ChangeSet

KNOWN_CAPABILITIES = frozenset(
    {
        "chat",
        "completions",
        "embeddings",
        "function_calling",
        "vision",
        "streaming",
        "fine_tuning",
        "extended_thinking",
        "computer_use",
        "reasoning",
        "coding",
        "rerank",
    }
)
KNOWN_MODALITIES = frozenset({"text", "image", "audio", "video", "embedding"})

MAX_COST_PER_1K = 0.10
MAX_TOKENS_CEILING = 2_000_000
MIN_TOKENS = 1024
MIN_EMBEDDING_TOKENS = 64


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(slots=True, frozen=True)
class Issue:
    severity: Severity
    model: str
    field: str
    message: str

    def __str__(self) -> str:
        label = "ERROR" if self.severity is Severity.ERROR else "WARN"
        return f"[{label}] {self.model}: {self.field} - {self.message}"


@dataclass(slots=True)
class ValidationResult:
    issues: list[Issue] = field(default_factory=list[Issue])

    @property
    def has_errors(self) -> bool:
        return any(issue.severity is Severity.ERROR for issue in self.issues)

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity is Severity.WARNING]

    def extend(self, other: ValidationResult) -> None:
        self.issues.extend(other.issues)


def validate_model(model: Model, filename: str) -> ValidationResult:
    """Check a single model; ``filename`` is its (prospective) storage path."""

    result = ValidationResult()

    def error(field_name: str, message: str, subject: str | None = None) -> None:
        result.issues.append(Issue(Severity.ERROR, subject or model.name, field_name, message))

    def warn(field_name: str, message: str) -> None:
        result.issues.append(Issue(Severity.WARNING, model.name, field_name, message))

    if not model.name:
        error("name", "required field is empty", filename)
    if not model.display_name:
        error("display_name", "required field is empty", filename)
    if not model.status:
        error("status", "required field is empty", filename)
    if not model.limits.max_tokens:
        error("limits.max_tokens", "required field is zero", filename)
    if not model.capabilities:
        error("capabilities", "at least one capability required", filename)
    if not model.modalities.input:
        error("modalities.input", "at least one input modality required", filename)
    if not model.modalities.output:
        error("modalities.output", "at least one output modality required", filename)

    if model.name and filename:
        actual = PurePosixPath(filename).name
        expected = model_filename(model.name)
        if actual != expected:
            error("name", f"filename {actual!r} does not match name field {model.name!r}", filename)

    known_statuses = {status.value for status in ModelStatus}
    if model.status and model.status not in known_statuses:
        warn(
            "status",
            f"unknown status {model.status!r}, expected one of: "
            + ", ".join(sorted(known_statuses)),
        )

    if model.cost is not None:
        for field_name, value in (
            ("cost.input_per_1k", model.cost.input_per_1k),
            ("cost.output_per_1k", model.cost.output_per_1k),
        ):
            if value < 0 or value > MAX_COST_PER_1K:
                error(
                    field_name,
                    f"value {value:.6f} outside expected range [0, {MAX_COST_PER_1K}]",
                )
        if not model.is_embedding and model.cost.output_per_1k == 0:
            warn("cost.output_per_1k", "non-embedding model has zero output cost")

    max_tokens = model.limits.max_tokens or 0
    if max_tokens > 0:
        floor = MIN_EMBEDDING_TOKENS if model.is_embedding else MIN_TOKENS
        if max_tokens < floor or max_tokens > MAX_TOKENS_CEILING:
            error(
                "limits.max_tokens",
                f"value {max_tokens} outside expected range [{floor}, {MAX_TOKENS_CEILING}]",
            )
    completion = model.limits.max_completion_tokens or 0
    if completion > 0 and completion > max_tokens:
        error(
            "limits.max_completion_tokens",
            f"value {completion} exceeds max_tokens {max_tokens}",
        )

    for capability in model.capabilities:
        if capability not in KNOWN_CAPABILITIES:
            warn("capabilities", f"unknown capability {capability!r}")
    for direction in ("input", "output"):
        for modality in getattr(model.modalities, direction) or ():
            if modality not in KNOWN_MODALITIES:
                warn(f"modalities.{direction}", f"unknown modality {modality!r}")

    return result


def validate_models(models: Iterable[tuple[Model, str]]) -> ValidationResult:
    result = ValidationResult()
    for model, filename in models:
        result.extend(validate_model(model, filename))
    return result


def validate_changeset(
    changeset: ChangeSet,
    *,
    include_display_name: bool = False,
) -> ValidationResult:
    """Validate the payloads a change set would write.

    New entries are checked as fresh records; updates are checked as the
    stored record with the discovered values overlaid.
    """

    payloads: list[tuple[Model, str]] = []
    for entry in changeset.new:
        model = entry.model.to_model()
        payloads.append((model, model.filename()))
    for update in changeset.updated:
        model = update.model.apply_to(update.existing, include_display_name=include_display_name)
        payloads.append((model, model.filename()))
    return validate_models(payloads)


def validate_catalog(catalog: Catalog) -> ValidationResult:
    payloads: list[tuple[Model, str]] = []
    for provider_name in sorted(catalog.providers):
        provider = catalog.providers[provider_name]
        for model_name in provider.model_names():
            model = provider.models[model_name]
            filename = provider.filename_for(model_name)
            payloads.append((model, f"providers/{provider_name}/models/{filename}"))
    return validate_models(payloads)


def format_result(result: ValidationResult) -> str:
    if not result.issues:
        return "Validation passed: no issues found."

    lines: list[str] = []
    if result.errors:
        lines.append(f"Errors ({len(result.errors)}):")
        lines.extend(f"  {issue}" for issue in result.errors)
    if result.warnings:
        lines.append(f"Warnings ({len(result.warnings)}):")
        lines.extend(f"  {issue}" for issue in result.warnings)
    return "\n".join(lines)
