"""Deployment and chart source models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Deployment:
    """One observed installation of a chart in one repository."""

    release: str
    chart: str
    name: str
    key: str
    charts_url: str
    repo: str
    repo_url: str
    stars: int = 0
    version: str = ""
    deployment_url: str = ""
    icon: str | None = None
    timestamp: int = 0


@dataclass(frozen=True)
class RepoEntry:
    """Deployment metadata kept per chart source group."""

    name: str
    repo: str
    helm_repo_name: str
    helm_repo_url: str
    url: str
    repo_url: str
    chart_version: str = ""
    stars: int = 0
    icon: str = ""
    group: str = ""
    timestamp: int = 0


class ChartGroups:
    """Insertion-ordered mapping of dedup key to its repo entries.

    Keys keep the order in which they were first seen, and entries keep
    the order in which rows were delivered.
    """

    def __init__(self) -> None:
        self._keys: list[str] = []
        self._index: dict[str, list[RepoEntry]] = {}

    def add(self, key: str, entry: RepoEntry) -> None:
        entries = self._index.get(key)
        if entries is None:
            entries = []
            self._index[key] = entries
            self._keys.append(key)
        entries.append(entry)

    def get(self, key: str) -> list[RepoEntry]:
        """Return the entries for a key, or an empty list."""
        return list(self._index.get(key, ()))

    def count(self, key: str) -> int:
        return len(self._index.get(key, ()))

    def keys(self) -> list[str]:
        return list(self._keys)

    def __len__(self) -> int:
        return len(self._keys)


@dataclass
class CollectorData:
    releases: list[Deployment] = field(default_factory=list)
    repos: ChartGroups = field(default_factory=ChartGroups)

    def find_release(self, key: str) -> Deployment | None:
        """Return the first deployment carrying the given key."""
        for release in self.releases:
            if release.key == key:
                return release
        return None

    def deployment_urls(self) -> list[str]:
        """Distinct deployment URLs in discovery order."""
        seen: dict[str, None] = {}
        for release in self.releases:
            seen.setdefault(release.deployment_url, None)
        return list(seen)
