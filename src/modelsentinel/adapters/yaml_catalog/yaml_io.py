"""YAML reading and writing for catalog files.

PyYAML handles whole documents: catalog loading, fresh model files and the
manifest. Merging into a hand-maintained model file goes through ruamel.yaml's
round-trip mode instead, so comments, flow-style sequences and quoting on keys
the merge leaves alone are written back unchanged.

Timestamps stay plain strings in both directions so ``last_verified_at`` and
hand-written dates round-trip byte for byte. Block sequences are indented
under their key, matching the hand-maintained catalog files.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

import yaml
from ruamel.yaml import YAML
from ruamel.yaml.constructor import RoundTripConstructor
from ruamel.yaml.representer import RoundTripRepresenter

if TYPE_CHECKING:
    from pathlib import Path

    from ruamel.yaml.nodes import ScalarNode

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class TimestampText(str):
    """A timestamp-shaped scalar kept as text and written back unquoted."""

    __slots__ = ()


class CatalogLoader(yaml.SafeLoader):
    """Safe loader without implicit timestamp resolution."""


class CatalogDumper(yaml.SafeDumper):
    """Safe dumper emitting indented block sequences and plain timestamp-like strings."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:  # noqa: FBT001, FBT002
        del indentless
        super().increase_indent(flow, False)


def _drop_timestamp_resolver(cls: type[yaml.SafeLoader] | type[yaml.SafeDumper]) -> None:
    cls.yaml_implicit_resolvers = {
        first: [(tag, pattern) for tag, pattern in resolvers if tag != _TIMESTAMP_TAG]
        for first, resolvers in cls.yaml_implicit_resolvers.items()
    }


_drop_timestamp_resolver(CatalogLoader)
_drop_timestamp_resolver(CatalogDumper)
CatalogDumper.add_representer(TimestampText, CatalogDumper.represent_str)


class _RoundTripConstructor(RoundTripConstructor):
    """Reads plain timestamps as ``TimestampText``."""


class _RoundTripRepresenter(RoundTripRepresenter):
    """Writes ``TimestampText`` back as a plain scalar."""


def _construct_timestamp_text(
    constructor: RoundTripConstructor, node: ScalarNode
) -> TimestampText:
    return TimestampText(constructor.construct_scalar(node))


def _represent_timestamp_text(representer: RoundTripRepresenter, data: TimestampText) -> object:
    # Same tag the resolver detects for the text, so it is emitted untagged and unquoted.
    return representer.represent_scalar(_TIMESTAMP_TAG, str(data))


_RoundTripConstructor.add_constructor(_TIMESTAMP_TAG, _construct_timestamp_text)
_RoundTripRepresenter.add_representer(TimestampText, _represent_timestamp_text)


def load_yaml(text: str) -> object:
    return yaml.load(text, Loader=CatalogLoader)  # noqa: S506


def dump_yaml(data: object) -> str:
    return yaml.dump(
        data,
        Dumper=CatalogDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def read_yaml_file(path: Path) -> object:
    return load_yaml(path.read_text(encoding="utf-8"))


def write_yaml_file(path: Path, data: object, *, header: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(header + dump_yaml(data), encoding="utf-8")


def _round_trip() -> YAML:
    # YAML instances are not thread-safe; providers are written concurrently.
    handler = YAML(typ="rt")
    handler.Constructor = _RoundTripConstructor
    handler.Representer = _RoundTripRepresenter
    handler.preserve_quotes = True
    handler.indent(mapping=2, sequence=4, offset=2)
    return handler


def load_round_trip(text: str) -> object:
    """Parse keeping comments and layout; mappings are ``dict`` subclasses."""

    return _round_trip().load(text)


def dump_round_trip(data: object) -> str:
    stream = StringIO()
    _round_trip().dump(data, stream)
    return stream.getvalue()


def read_round_trip_file(path: Path) -> object:
    return load_round_trip(path.read_text(encoding="utf-8"))


def write_round_trip_file(path: Path, data: object) -> None:
    path.write_text(dump_round_trip(data), encoding="utf-8")
