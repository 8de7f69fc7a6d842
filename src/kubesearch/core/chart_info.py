"""Per-chart details, value index and statistics."""

from __future__ import annotations

import logging

from kubesearch.core.collector import DataCollector
from kubesearch.core.errors import ChartNotFoundError, KubeSearchError, NoMatchError
from kubesearch.core.search import rank_deployments
from kubesearch.core.value_index import aggregate_values, count_paths, path_index, top_paths
from kubesearch.models.deployment import CollectorData, Deployment, RepoEntry
from kubesearch.models.results import (
    ChartDetails,
    ChartIndex,
    ChartStats,
    TopRepository,
    VersionCount,
)
from kubesearch.models.weights import AuthorWeights

logger = logging.getLogger(__name__)

DEFAULT_HELM_REPO_NAME = "helm-repo"
UNKNOWN_VERSION = "unknown"
TOP_N = 10


def _lookup(data: CollectorData, key: str) -> tuple[Deployment, list[RepoEntry]]:
    release = data.find_release(key)
    if release is None:
        raise ChartNotFoundError(key)
    entries = data.repos.get(key)
    if not entries:
        raise ChartNotFoundError(key, f"No repositories found for chart '{key}'")
    return release, entries


def first_version(entries: list[RepoEntry]) -> str:
    """First non-empty chart version in discovery order.

    Versions are not compared semantically.
    """
    for entry in entries:
        if entry.chart_version and entry.chart_version.strip():
            return entry.chart_version
    return UNKNOWN_VERSION


def get_chart_details(
    collector: DataCollector,
    key: str,
    include_values: bool = True,
    values_limit: int = 5,
    paths_limit: int = 10,
    value_path: str | None = None,
    author_weights: AuthorWeights | None = None,
) -> ChartDetails:
    """Describe one chart source and, optionally, its most popular values."""
    data = collector.collect_releases()
    release, entries = _lookup(data, key)
    first = entries[0]

    popular = None
    if include_values:
        values = collector.collect_values(e.url for e in entries)
        aggregate = aggregate_values(entries, values)
        logger.debug("Chart %s: %d value paths across %d trees", key, len(aggregate), len(values))
        popular = top_paths(
            aggregate,
            paths_limit=paths_limit,
            values_limit=values_limit,
            path_prefix=value_path,
            author_weights=author_weights,
        )

    return ChartDetails(
        name=release.name,
        chart_name=release.chart,
        helm_repo_url=first.helm_repo_url,
        helm_repo_name=first.helm_repo_name or DEFAULT_HELM_REPO_NAME,
        total_repos=len(entries),
        latest_version=first_version(entries),
        icon=release.icon,
        popular_values=popular,
    )


def get_chart_index(
    collector: DataCollector,
    key: str,
    search_path: str | None = None,
) -> ChartIndex:
    """List every configuration path used by a chart's deployments."""
    data = collector.collect_releases()
    release, entries = _lookup(data, key)

    values = collector.collect_values(e.url for e in entries)
    counts = count_paths(entries, values)

    return ChartIndex(
        name=release.name,
        chart_name=release.chart,
        total_deployments=len(entries),
        paths=path_index(counts, search_path),
    )


def _version_distribution(entries: list[RepoEntry]) -> list[VersionCount]:
    counts: dict[str, int] = {}
    for entry in entries:
        version = entry.chart_version or UNKNOWN_VERSION
        counts[version] = counts.get(version, 0) + 1
    distribution = [VersionCount(version=v, count=c) for v, c in counts.items()]
    distribution.sort(key=lambda v: v.count, reverse=True)
    return distribution[:TOP_N]


def get_chart_stats(
    collector: DataCollector,
    key: str | None = None,
    query: str | None = None,
    author_weights: AuthorWeights | None = None,
) -> ChartStats:
    """Deployment statistics for a chart source.

    The source is given by ``key``, or found as the best scoring deployment
    for ``query``.
    """
    data = collector.collect_releases()

    if not key:
        if query is None:
            raise KubeSearchError("Either a chart key or a query is required")
        ranked = rank_deployments(data, query, author_weights)
        if not ranked:
            raise NoMatchError(query)
        key = ranked[0][0].key
        logger.debug("Query %r resolved to chart key %s", query, key)

    entries = data.repos.get(key)
    if not entries:
        raise ChartNotFoundError(key, f"No repositories found for chart key: '{key}'")

    first = entries[0]
    release = data.find_release(key)
    stars = [e.stars for e in entries]
    distribution = _version_distribution(entries)
    by_stars = sorted(entries, key=lambda e: e.stars, reverse=True)

    return ChartStats(
        name=first.name,
        chart_name=release.chart if release else first.name,
        key=key,
        helm_repo_url=first.helm_repo_url,
        helm_repo_name=first.helm_repo_name or DEFAULT_HELM_REPO_NAME,
        total_deployments=len(entries),
        min_stars=min(stars),
        max_stars=max(stars),
        latest_version=distribution[0].version if distribution else UNKNOWN_VERSION,
        icon=first.icon or None,
        top_repositories=[
            TopRepository(
                repo=e.repo,
                repo_url=e.repo_url,
                stars=e.stars,
                version=e.chart_version or UNKNOWN_VERSION,
            )
            for e in by_stars[:TOP_N]
        ],
        version_distribution=distribution,
    )
