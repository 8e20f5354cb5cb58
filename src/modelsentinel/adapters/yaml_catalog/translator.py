"""Translate between catalog YAML mappings and domain models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modelsentinel.domain.model import (
    Cost,
    Limits,
    Modalities,
    Model,
    ProviderDescriptor,
    ProviderType,
    UpdaterMetadata,
)

from .schema import ModelDocument, ProviderDocument
from .yaml_io import TimestampText

if TYPE_CHECKING:
    from collections.abc import Mapping

    from modelsentinel.domain.model import DiscoveredModel
    from modelsentinel.domain.reconciliation import Tree


def parse_model(data: Mapping[str, object]) -> Model:
    """Validate a model mapping; raises ``pydantic.ValidationError`` on bad shapes."""

    document = ModelDocument.model_validate(data)
    limits = document.limits
    modalities = document.modalities
    updater = document.x_updater
    return Model(
        name=document.name,
        display_name=document.display_name,
        family=document.family,
        status=document.status,
        cost=Cost(document.cost.input_per_1k, document.cost.output_per_1k)
        if document.cost is not None
        else None,
        limits=Limits(limits.max_tokens, limits.max_completion_tokens)
        if limits is not None
        else Limits(),
        capabilities=tuple(document.capabilities or ()),
        modalities=Modalities(
            input=tuple(modalities.input) if modalities.input is not None else None,
            output=tuple(modalities.output) if modalities.output is not None else None,
        )
        if modalities is not None
        else Modalities(),
        x_updater=UpdaterMetadata(updater.last_verified_at, tuple(updater.sources or ()))
        if updater is not None
        else None,
        extra=dict(document.model_extra or {}),
    )


def parse_provider(name: str, data: Mapping[str, object]) -> ProviderDescriptor:
    document = ProviderDocument.model_validate(data)
    provider_type = (
        ProviderType.META if document.provider_type == ProviderType.META else ProviderType.STATIC
    )
    return ProviderDescriptor(
        name=document.name or name,
        display_name=document.display_name,
        provider_type=provider_type,
        supports_model_discovery=document.supports_model_discovery,
    )


def model_to_tree(model: Model) -> Tree:
    """Full document for a freshly created model file."""

    tree: Tree = {
        "name": model.name,
        "display_name": model.display_name,
        "family": model.family,
        "status": str(model.status),
    }
    if model.cost is not None:
        tree["cost"] = model.cost.as_dict()
    tree["limits"] = _limits_tree(model.limits)
    tree["capabilities"] = list(model.capabilities)
    tree["modalities"] = {
        "input": list(model.modalities.input or ()),
        "output": list(model.modalities.output or ()),
    }
    if model.x_updater is not None:
        tree["x_updater"] = updater_to_tree(model.x_updater)
    for key, value in model.extra.items():
        tree.setdefault(key, value)
    return tree


def overlay_from_discovered(
    model: DiscoveredModel,
    *,
    include_display_name: bool = False,
    metadata: UpdaterMetadata | None = None,
) -> Tree:
    """Mapping of only the fields the source has an opinion on.

    Zero cost and zero limits count as "no opinion"; the display name is the
    catalog's own unless ``include_display_name`` is set.
    """

    overlay: Tree = {}
    if include_display_name and model.display_name:
        overlay["display_name"] = model.display_name
    if model.family:
        overlay["family"] = model.family
    if model.status:
        overlay["status"] = str(model.status)
    cost = model.known_cost
    if cost is not None:
        overlay["cost"] = cost.as_dict()
    if model.limits is not None:
        limits = _limits_tree(model.limits)
        if limits:
            overlay["limits"] = limits
    if model.capabilities is not None:
        overlay["capabilities"] = list(model.capabilities)
    if model.modalities is not None:
        modalities: Tree = {}
        if model.modalities.input is not None:
            modalities["input"] = list(model.modalities.input)
        if model.modalities.output is not None:
            modalities["output"] = list(model.modalities.output)
        if modalities:
            overlay["modalities"] = modalities
    if metadata is not None:
        overlay["x_updater"] = updater_to_tree(metadata)
    return overlay


def updater_to_tree(metadata: UpdaterMetadata) -> Tree:
    return {
        "last_verified_at": TimestampText(metadata.last_verified_at),
        "sources": list(metadata.sources),
    }


def _limits_tree(limits: Limits) -> Tree:
    tree: Tree = {}
    if limits.max_tokens:
        tree["max_tokens"] = limits.max_tokens
    if limits.max_completion_tokens:
        tree["max_completion_tokens"] = limits.max_completion_tokens
    return tree
