"""Field-level comparison between a stored model and a discovered candidate.

Shared by the diff engine and the smart-merge writer so that "is there a
change?" has exactly one definition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .changeset import FieldChange

if TYPE_CHECKING:
    from collections.abc import Iterable

    from modelsentinel.domain.model import DiscoveredModel, Model


@dataclass(slots=True, frozen=True)
class DiffOptions:
    """Controls diff behaviour.

    ``track_display_name`` reports display-name drift for existing models. By
    default the catalog's display name is authoritative.
    """

    track_display_name: bool = False


def compute_field_changes(
    existing: Model,
    discovered: DiscoveredModel,
    options: DiffOptions | None = None,
) -> list[FieldChange]:
    """Compare every attribute the discovered candidate supplies."""

    opts = options or DiffOptions()
    changes: list[FieldChange] = []

    if (
        opts.track_display_name
        and discovered.display_name
        and discovered.display_name != existing.display_name
    ):
        changes.append(
            FieldChange("display_name", existing.display_name, discovered.display_name)
        )
    if discovered.family and discovered.family != existing.family:
        changes.append(FieldChange("family", existing.family, discovered.family))
    if discovered.status and discovered.status != existing.status:
        changes.append(FieldChange("status", existing.status, str(discovered.status)))

    changes.extend(_cost_changes(existing, discovered))
    changes.extend(_limit_changes(existing, discovered))

    if discovered.capabilities is not None and not same_members(
        existing.capabilities, discovered.capabilities
    ):
        changes.append(
            FieldChange(
                "capabilities",
                list(existing.capabilities),
                list(discovered.capabilities),
            )
        )

    if discovered.modalities is not None:
        for direction in ("input", "output"):
            new_value = getattr(discovered.modalities, direction)
            old_value = getattr(existing.modalities, direction)
            if new_value is not None and not same_members(old_value or (), new_value):
                changes.append(
                    FieldChange(
                        f"modalities.{direction}",
                        list(old_value or ()),
                        list(new_value),
                    )
                )

    return changes


def same_members(left: Iterable[str], right: Iterable[str]) -> bool:
    """Order-independent comparison of two tag collections."""

    return set(left) == set(right)


def _cost_changes(existing: Model, discovered: DiscoveredModel) -> list[FieldChange]:
    cost = discovered.known_cost
    if cost is None:
        return []
    if existing.cost is None:
        return [FieldChange("cost", None, cost.as_dict())]
    changes: list[FieldChange] = []
    if existing.cost.input_per_1k != cost.input_per_1k:
        changes.append(
            FieldChange("cost.input_per_1k", existing.cost.input_per_1k, cost.input_per_1k)
        )
    if existing.cost.output_per_1k != cost.output_per_1k:
        changes.append(
            FieldChange("cost.output_per_1k", existing.cost.output_per_1k, cost.output_per_1k)
        )
    return changes


def _limit_changes(existing: Model, discovered: DiscoveredModel) -> list[FieldChange]:
    limits = discovered.limits
    if limits is None:
        return []
    changes: list[FieldChange] = []
    if limits.max_tokens and limits.max_tokens != existing.limits.max_tokens:
        changes.append(
            FieldChange("limits.max_tokens", existing.limits.max_tokens, limits.max_tokens)
        )
    if (
        limits.max_completion_tokens
        and limits.max_completion_tokens != existing.limits.max_completion_tokens
    ):
        changes.append(
            FieldChange(
                "limits.max_completion_tokens",
                existing.limits.max_completion_tokens,
                limits.max_completion_tokens,
            )
        )
    return changes
