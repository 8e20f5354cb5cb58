"""Candidate model values produced by discovery adapters.

Every attribute is optional: ``None`` means the source had no opinion and the
stored value must be left alone.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .catalog import Cost, Limits, Modalities, Model, UpdaterMetadata
from .enums import SourceType


@dataclass(slots=True, kw_only=True)
class DiscoveredModel:
    name: str
    display_name: str | None = None
    family: str | None = None
    status: str | None = None
    cost: Cost | None = None
    limits: Limits | None = None
    capabilities: tuple[str, ...] | None = None
    modalities: Modalities | None = None
    discovered_by: SourceType = SourceType.API

    @property
    def known_cost(self) -> Cost | None:
        """Cost with the zero pair folded into "absent"."""
        if self.cost is None or self.cost.is_zero:
            return None
        return self.cost

    def to_model(self, *, x_updater: UpdaterMetadata | None = None) -> Model:
        """Materialise a fresh catalog entry from this candidate."""

        return Model(
            name=self.name,
            display_name=self.display_name or "",
            family=self.family or "",
            status=self.status or "",
            cost=self.known_cost,
            limits=self.limits or Limits(),
            capabilities=self.capabilities or (),
            modalities=self.modalities or Modalities(),
            x_updater=x_updater,
        )

    def apply_to(self, existing: Model, *, include_display_name: bool = False) -> Model:
        """Return ``existing`` with every value this candidate supplies overlaid."""

        limits = existing.limits
        if self.limits is not None:
            limits = Limits(
                max_tokens=self.limits.max_tokens
                if self.limits.max_tokens is not None
                else limits.max_tokens,
                max_completion_tokens=self.limits.max_completion_tokens
                if self.limits.max_completion_tokens is not None
                else limits.max_completion_tokens,
            )
        modalities = existing.modalities
        if self.modalities is not None:
            modalities = Modalities(
                input=self.modalities.input
                if self.modalities.input is not None
                else modalities.input,
                output=self.modalities.output
                if self.modalities.output is not None
                else modalities.output,
            )
        display_name = existing.display_name
        if include_display_name and self.display_name:
            display_name = self.display_name
        return replace(
            existing,
            display_name=display_name,
            family=self.family or existing.family,
            status=self.status or existing.status,
            cost=self.known_cost or existing.cost,
            limits=limits,
            capabilities=self.capabilities
            if self.capabilities is not None
            else existing.capabilities,
            modalities=modalities,
            extra=dict(existing.extra),
        )
