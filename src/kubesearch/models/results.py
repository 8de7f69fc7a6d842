"""Query result models.

``to_dict`` produces the camel-case JSON shape consumed by tool clients.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kubesearch.models.deployment import Deployment


@dataclass
class SearchResult:
    name: str
    chart: str
    helm_repo_url: str
    repo: str
    repo_url: str
    stars: int
    version: str
    deployment_url: str
    key: str
    score: float
    icon: str | None = None

    @classmethod
    def from_deployment(cls, d: Deployment, score: float) -> SearchResult:
        return cls(
            name=d.name,
            chart=d.chart,
            helm_repo_url=d.charts_url,
            repo=d.repo,
            repo_url=d.repo_url,
            stars=d.stars,
            version=d.version,
            deployment_url=d.deployment_url,
            key=d.key,
            score=score,
            icon=d.icon,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "chart": self.chart,
            "helmRepoURL": self.helm_repo_url,
            "repo": self.repo,
            "repoUrl": self.repo_url,
            "stars": self.stars,
            "version": self.version,
            "deploymentUrl": self.deployment_url,
        }
        if self.icon:
            data["icon"] = self.icon
        data["key"] = self.key
        data["score"] = self.score
        return data


@dataclass
class ChartSourceEntry:
    name: str
    chart: str
    helm_repo_url: str
    key: str
    count: int
    icon: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "chart": self.chart,
            "helmRepoURL": self.helm_repo_url,
            "key": self.key,
            "count": self.count,
        }
        if self.icon:
            data["icon"] = self.icon
        return data


@dataclass
class ValueExample:
    value: Any
    repo: str
    repo_url: str
    stars: int
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "repo": self.repo,
            "repoUrl": self.repo_url,
            "stars": self.stars,
            "score": self.score,
        }


@dataclass
class PopularValue:
    path: str
    count: int
    types: list[str] = field(default_factory=list)
    values: list[ValueExample] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "count": self.count,
            "types": list(self.types),
            "values": [v.to_dict() for v in self.values],
        }


@dataclass
class ChartDetails:
    name: str
    chart_name: str
    helm_repo_url: str
    helm_repo_name: str
    total_repos: int
    latest_version: str
    icon: str | None = None
    popular_values: list[PopularValue] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "chartName": self.chart_name,
            "helmRepoURL": self.helm_repo_url,
            "helmRepoName": self.helm_repo_name,
        }
        if self.icon:
            data["icon"] = self.icon
        if self.popular_values is not None:
            data["popularValues"] = [p.to_dict() for p in self.popular_values]
        data["statistics"] = {
            "totalRepos": self.total_repos,
            "latestVersion": self.latest_version,
        }
        return data


@dataclass
class PathUsage:
    path: str
    usage_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "usageCount": self.usage_count}


@dataclass
class ChartIndex:
    name: str
    chart_name: str
    total_deployments: int
    paths: list[PathUsage] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "chartName": self.chart_name,
            "totalDeployments": self.total_deployments,
            "paths": [p.to_dict() for p in self.paths],
        }


@dataclass
class VersionCount:
    version: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "count": self.count}


@dataclass
class TopRepository:
    repo: str
    repo_url: str
    stars: int
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "repo": self.repo,
            "repoUrl": self.repo_url,
            "stars": self.stars,
            "version": self.version,
        }


@dataclass
class ChartStats:
    name: str
    chart_name: str
    key: str
    helm_repo_url: str
    helm_repo_name: str
    total_deployments: int
    min_stars: int
    max_stars: int
    latest_version: str
    icon: str | None = None
    top_repositories: list[TopRepository] = field(default_factory=list)
    version_distribution: list[VersionCount] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "chartName": self.chart_name,
            "key": self.key,
            "helmRepoURL": self.helm_repo_url,
            "helmRepoName": self.helm_repo_name,
        }
        if self.icon:
            data["icon"] = self.icon
        data["statistics"] = {
            "totalDeployments": self.total_deployments,
            "minStars": self.min_stars,
            "maxStars": self.max_stars,
            "latestVersion": self.latest_version,
        }
        data["topRepositories"] = [r.to_dict() for r in self.top_repositories]
        data["versionDistribution"] = [v.to_dict() for v in self.version_distribution]
        return data


@dataclass
class ImageDeployment:
    repo_name: str
    repo_url: str

    def to_dict(self) -> dict[str, Any]:
        return {"repoName": self.repo_name, "repoUrl": self.repo_url}


@dataclass
class ImageTag:
    tag: str
    usage_count: int
    deployments: list[ImageDeployment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "usageCount": self.usage_count,
            "deployments": [d.to_dict() for d in self.deployments],
        }


@dataclass
class ImageSearchResult:
    repository: str
    tags: list[ImageTag] = field(default_factory=list)

    @property
    def usage_count(self) -> int:
        return sum(t.usage_count for t in self.tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "repository": self.repository,
            "tags": [t.to_dict() for t in self.tags],
        }


@dataclass
class GrepExample:
    value: Any
    repo_url: str

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "repoUrl": self.repo_url}


@dataclass
class GrepValueResult:
    value_path: str
    count: int
    examples: list[GrepExample] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valuePath": self.value_path,
            "count": self.count,
            "examples": [e.to_dict() for e in self.examples],
        }
