"""Smart-merge writer for model files.

Existing files are merged, not replaced:
- keys the engine does not know (and their order) are preserved
- only fields the source has an opinion on are overwritten
- nothing is written when no authoritative field changed
- comments, flow sequences and quoting survive on keys the merge leaves alone
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError
from ruamel.yaml.error import YAMLError

from modelsentinel.domain.model import MODEL_FILE_EXTENSION, model_filename
from modelsentinel.domain.ports.catalog import WriteResult
from modelsentinel.domain.reconciliation import DiffOptions, compute_field_changes, merge_trees

from .errors import CatalogFormatError
from .layout import models_dir
from .translator import model_to_tree, overlay_from_discovered, parse_model
from .yaml_io import read_round_trip_file, write_round_trip_file, write_yaml_file

if TYPE_CHECKING:
    from pathlib import Path

    from modelsentinel.domain.model import DiscoveredModel, UpdaterMetadata
    from modelsentinel.domain.reconciliation import Tree

log = getLogger(__name__)


@dataclass(slots=True)
class SmartMergeWriter:
    root: Path
    track_display_name: bool = False
    extension: str = MODEL_FILE_EXTENSION

    def path_for(self, provider: str, name: str) -> Path:
        return models_dir(self.root, provider) / model_filename(name, self.extension)

    def write_model(
        self,
        provider: str,
        model: DiscoveredModel,
        *,
        metadata: UpdaterMetadata | None = None,
    ) -> WriteResult:
        path = self.path_for(provider, model.name)
        if not path.exists():
            write_yaml_file(path, model_to_tree(model.to_model(x_updater=metadata)))
            log.info("Created %s", path)
            return WriteResult(path=path, is_new=True)

        stored = self._read_tree(path)
        try:
            existing = parse_model(stored)
        except ValidationError as exc:
            raise CatalogFormatError(path, f"invalid model document: {exc}") from exc

        changes = compute_field_changes(
            existing,
            model,
            DiffOptions(track_display_name=self.track_display_name),
        )
        if not changes:
            return WriteResult(path=path, is_new=False)

        overlay = overlay_from_discovered(
            model,
            include_display_name=self.track_display_name,
            metadata=metadata,
        )
        write_round_trip_file(path, merge_trees(stored, overlay))
        log.info(
            "Updated %s (%s)",
            path,
            ", ".join(change.field for change in changes),
        )
        return WriteResult(path=path, is_new=False, changes=tuple(changes))

    def _read_tree(self, path: Path) -> Tree:
        try:
            data = read_round_trip_file(path)
        except YAMLError as exc:
            raise CatalogFormatError(path, f"invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise CatalogFormatError(path, "expected a mapping at the top level")
        return data  # pyright: ignore[reportUnknownVariableType]
