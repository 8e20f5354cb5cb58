"""Collapse duplicate discovery results before diffing.

Adapters may report the same model from several sources (API listing, docs
scrape). API entries take priority; docs-sourced pricing fills the gap when
the API entry carries none.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from modelsentinel.domain.model import SourceType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from modelsentinel.domain.model import DiscoveredModel


def deduplicate_discovered(models: Iterable[DiscoveredModel]) -> list[DiscoveredModel]:
    """Return one candidate per name, keeping first-seen order."""

    by_name: dict[str, DiscoveredModel] = {}

    for model in models:
        current = by_name.get(model.name)
        if current is None:
            by_name[model.name] = model
            continue

        current_is_api = current.discovered_by == SourceType.API
        model_is_api = model.discovered_by == SourceType.API
        if current_is_api and not model_is_api:
            if current.known_cost is None and model.known_cost is not None:
                by_name[model.name] = replace(current, cost=model.cost)
        elif model_is_api and not current_is_api:
            if model.known_cost is None and current.known_cost is not None:
                by_name[model.name] = replace(model, cost=current.cost)
            else:
                by_name[model.name] = model
        # same source type: first one wins

    return list(by_name.values())
