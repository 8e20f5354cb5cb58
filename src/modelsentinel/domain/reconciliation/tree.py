"""Order-preserving overlay of plain mapping trees.

Used by the smart-merge writer: a parsed YAML document is an insertion-ordered
``dict`` whose values may themselves be mappings, lists or scalars. Round-trip
YAML mappings are ``dict`` subclasses carrying comments and layout; the merge
works on a deep copy of the base so that those survive on every key the
overlay leaves alone.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping

type Tree = dict[str, object]


def merge_trees(base: Tree, overlay: Mapping[str, object]) -> Tree:
    """Overlay ``overlay`` onto ``base`` without mutating either.

    - keys present in both keep ``base``'s position and take ``overlay``'s
      value; nested mappings are merged recursively
    - a value equal to the stored one keeps the stored node as is
    - keys only in ``base`` are kept untouched
    - keys only in ``overlay`` are appended in ``overlay`` order
    """

    merged = copy.deepcopy(base)
    _overlay_in_place(merged, overlay)
    return merged


def _overlay_in_place(target: Tree, overlay: Mapping[str, object]) -> None:
    for key, incoming in overlay.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(incoming, Mapping):
            _overlay_in_place(current, incoming)  # pyright: ignore[reportUnknownArgumentType]
        elif key not in target or current != incoming:
            target[key] = copy.deepcopy(incoming)
