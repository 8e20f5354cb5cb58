"""Catalog-wide version marker stored in ``version.txt``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Self

_VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")


class InvalidVersionError(ValueError):
    """Raised when a stored version is not exactly ``MAJOR.MINOR.PATCH``."""


@dataclass(slots=True, frozen=True, order=True)
class CatalogVersion:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> Self:
        value = text.strip()
        match = _VERSION_PATTERN.fullmatch(value)
        if match is None:
            raise InvalidVersionError(f"invalid catalog version: {text!r}")
        major, minor, patch = (int(part) for part in match.groups())
        return cls(major, minor, patch)

    def advance(self, *, had_new_records: bool) -> CatalogVersion:
        """New records bump MINOR (resetting PATCH); updates alone bump PATCH."""

        if had_new_records:
            return CatalogVersion(self.major, self.minor + 1, 0)
        return CatalogVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
