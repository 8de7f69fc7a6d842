"""Flattened configuration value models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kubesearch.models import ValueKind


@dataclass(frozen=True)
class ValueOccurrence:
    """A leaf value together with the repository that set it."""

    value: Any
    repo: str
    repo_url: str
    stars: int


@dataclass
class PathAggregate:
    values: list[ValueOccurrence] = field(default_factory=list)
    # dict used as an ordered set
    kinds: dict[ValueKind, None] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.values)

    @property
    def types(self) -> list[str]:
        return [k.value for k in self.kinds]

    def add(self, occurrence: ValueOccurrence, kind: ValueKind) -> None:
        self.values.append(occurrence)
        self.kinds.setdefault(kind, None)

    def merge(self, other: PathAggregate) -> None:
        self.values.extend(other.values)
        for kind in other.kinds:
            self.kinds.setdefault(kind, None)

    def copy(self) -> PathAggregate:
        return PathAggregate(values=list(self.values), kinds=dict(self.kinds))
