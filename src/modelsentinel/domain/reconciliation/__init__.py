"""Reconciliation core: discovered models against the stored catalog.

Layered flow per provider:
1) discover and deduplicate candidates
2) diff against stored models (new, updated, disappeared, renamed)
3) assess risk, validate payloads, optionally ask an LLM reviewer
4) smart-merge writes
5) one catalog-wide version bump and manifest refresh
"""

from __future__ import annotations

from .changeset import ChangeSet, Disappearance, FieldChange, ModelUpdate, NewModel, RenamePair
from .dedupe import deduplicate_discovered
from .diff import compute_changeset, detect_renames, looks_like_dated_snapshot
from .engine import EngineOptions, ReconciliationEngine, SourceHealthError
from .fields import DiffOptions, compute_field_changes
from .outcome import ExitCode, GroupOutcome, OutcomeCounts, SyncReport
from .risk import RiskAssessment, RiskThresholds, assess_risk
from .tree import Tree, merge_trees

__all__ = [
    "ChangeSet",
    "DiffOptions",
    "Disappearance",
    "EngineOptions",
    "ExitCode",
    "FieldChange",
    "GroupOutcome",
    "ModelUpdate",
    "NewModel",
    "OutcomeCounts",
    "ReconciliationEngine",
    "RenamePair",
    "RiskAssessment",
    "RiskThresholds",
    "SourceHealthError",
    "SyncReport",
    "Tree",
    "assess_risk",
    "compute_changeset",
    "compute_field_changes",
    "deduplicate_discovered",
    "detect_renames",
    "looks_like_dated_snapshot",
    "merge_trees",
]
