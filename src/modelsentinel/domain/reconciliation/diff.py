"""Diff engine: discovered candidates vs. the stored catalog for one provider.

Output ordering is a pure function of the inputs. Discovered candidates and
disappeared names are sorted before any heuristic pass so that identical
inputs always yield identical change sets.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .changeset import ChangeSet, Disappearance, ModelUpdate, NewModel, RenamePair
from .fields import DiffOptions, compute_field_changes

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from modelsentinel.domain.model import DiscoveredModel, Model

RENAME_LIMIT_TOLERANCE = 0.10
RENAME_COST_TOLERANCE = 0.20

_DIGITS = re.compile(r"[0-9]+")


def compute_changeset(
    provider: str,
    discovered: Iterable[DiscoveredModel],
    existing: Mapping[str, Model],
    options: DiffOptions | None = None,
) -> ChangeSet:
    """Compare discovered models against the stored models of ``provider``."""

    opts = options or DiffOptions()
    changeset = ChangeSet(provider=provider)
    seen: set[str] = set()

    for candidate in sorted(discovered, key=lambda item: item.name):
        seen.add(candidate.name)
        stored = existing.get(candidate.name)
        if stored is None:
            changeset.new.append(NewModel(name=candidate.name, model=candidate))
            continue

        changes = compute_field_changes(stored, candidate, opts)
        if changes:
            changeset.updated.append(
                ModelUpdate(
                    name=candidate.name,
                    existing=stored,
                    model=candidate,
                    changes=tuple(changes),
                )
            )
        else:
            changeset.unchanged += 1

    disappeared = [
        Disappearance(name=name, model=existing[name])
        for name in sorted(existing)
        if name not in seen and not looks_like_dated_snapshot(name)
    ]

    changeset.renames = detect_renames(changeset.new, disappeared)
    renamed = {pair.old_name for pair in changeset.renames}
    changeset.disappeared = [entry for entry in disappeared if entry.name not in renamed]
    return changeset


def detect_renames(
    new_models: Iterable[NewModel],
    disappeared: Iterable[Disappearance],
) -> list[RenamePair]:
    """Pair new models with disappeared ones that look like the same model renamed.

    Each new model takes the first qualifying disappeared model (in the order
    given) that has not already been claimed by an earlier new model.
    """

    candidates = list(disappeared)
    claimed: set[str] = set()
    renames: list[RenamePair] = []

    for new_entry in new_models:
        for old_entry in candidates:
            if old_entry.name in claimed:
                continue
            reason = _rename_reason(new_entry.model, old_entry.model)
            if reason is None:
                continue
            claimed.add(old_entry.name)
            renames.append(
                RenamePair(old_name=old_entry.name, new_name=new_entry.name, reason=reason)
            )
            break

    return renames


def _rename_reason(new: DiscoveredModel, old: Model) -> str | None:
    family = new.family or ""
    if not family or family != old.family:
        return None

    reasons = [f"same family {family!r}"]

    new_tokens = new.limits.max_tokens if new.limits is not None else None
    old_tokens = old.limits.max_tokens
    if new_tokens and old_tokens:
        if not _within(new_tokens, old_tokens, RENAME_LIMIT_TOLERANCE):
            return None
        reasons.append("similar limits")

    new_cost = new.known_cost
    if new_cost is not None and old.cost is not None and old.cost.input_per_1k > 0:
        if not _within(new_cost.input_per_1k, old.cost.input_per_1k, RENAME_COST_TOLERANCE):
            return None
        reasons.append("similar cost")

    return ", ".join(reasons)


def _within(new: float, old: float, tolerance: float) -> bool:
    return abs(new / old - 1.0) <= tolerance


def looks_like_dated_snapshot(name: str) -> bool:
    """Whether ``name`` carries a date-like segment (``gpt-4-0613``, ``x-2024-05-13``).

    Dated snapshots are immutable and expected to age out, so they are never
    reported as disappeared.
    """

    parts = name.split("-")
    if len(parts) < 2:
        return False
    for part in parts[1:]:
        if len(part) in (4, 8) and _DIGITS.fullmatch(part):
            return True
    for index in range(1, len(parts) - 2):
        year, month, day = parts[index : index + 3]
        if (
            len(year) == 4
            and len(month) == 2
            and len(day) == 2
            and all(_DIGITS.fullmatch(value) for value in (year, month, day))
        ):
            return True
    return False
