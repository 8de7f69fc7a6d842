"""Per-author score multipliers."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class AuthorWeights:
    """Read-only mapping of lowercase repository owner to a score multiplier."""

    weights: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, d: Mapping[str, float] | None) -> AuthorWeights:
        if not d:
            return cls()
        normalized = {str(k).lower(): float(v) for k, v in d.items() if v and v > 0}
        return cls(weights=MappingProxyType(normalized))

    def multiplier_for(self, repo: str) -> float:
        """Return the multiplier for the owner part of an ``owner/repo`` name."""
        owner = repo.split("/", 1)[0].lower() if repo else ""
        return self.weights.get(owner, 1.0)

    def __len__(self) -> int:
        return len(self.weights)

    def to_dict(self) -> dict[str, float]:
        return dict(self.weights)
