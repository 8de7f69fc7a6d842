"""Deployment search and chart source listing."""

from __future__ import annotations

import logging

from kubesearch.core.collector import DataCollector
from kubesearch.core.scoring import calculate_score, matches_query, round_score
from kubesearch.models.deployment import CollectorData, Deployment
from kubesearch.models.results import ChartSourceEntry, SearchResult
from kubesearch.models.weights import AuthorWeights

logger = logging.getLogger(__name__)

MAX_SEARCH_LIMIT = 100
DEFAULT_MIN_COUNT = 3


def rank_deployments(
    data: CollectorData,
    query: str,
    author_weights: AuthorWeights | None = None,
) -> list[tuple[Deployment, float]]:
    """Return matching deployments with their scores, best first."""
    weights = author_weights or AuthorWeights()
    scored = [
        (deployment, calculate_score(deployment, query, weights))
        for deployment in data.releases
        if matches_query(deployment, query)
    ]
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored


def _search(
    collector: DataCollector,
    query: str,
    limit: int,
    author_weights: AuthorWeights | None,
) -> list[SearchResult]:
    limit = max(0, min(limit, MAX_SEARCH_LIMIT))
    data = collector.collect_releases()
    ranked = rank_deployments(data, query, author_weights)
    logger.debug("Query %r matched %d deployments", query, len(ranked))
    return [
        SearchResult.from_deployment(deployment, round_score(score))
        for deployment, score in ranked[:limit]
    ]


def search_deployments(
    collector: DataCollector,
    query: str,
    limit: int = 10,
    author_weights: AuthorWeights | None = None,
) -> list[SearchResult]:
    """Search individual deployments by chart, release or chart source."""
    return _search(collector, query, limit, author_weights)


def search_helm_charts(
    collector: DataCollector,
    query: str,
    limit: int = 20,
    author_weights: AuthorWeights | None = None,
) -> list[SearchResult]:
    """Chart-oriented search; same ranking with a larger default page."""
    return _search(collector, query, limit, author_weights)


def list_chart_sources(
    collector: DataCollector,
    query: str,
    min_count: int = DEFAULT_MIN_COUNT,
) -> list[ChartSourceEntry]:
    """List the chart sources of matching deployments with their deployment counts.

    Sources with fewer than ``min_count`` deployments are left out.
    """
    data = collector.collect_releases()

    sources: dict[str, ChartSourceEntry] = {}
    seen: set[str] = set()
    for release in data.releases:
        if release.key in seen or not matches_query(release, query):
            continue
        seen.add(release.key)
        count = data.repos.count(release.key)
        if count < min_count:
            continue
        sources[release.key] = ChartSourceEntry(
            name=release.name,
            chart=release.chart,
            helm_repo_url=release.charts_url,
            key=release.key,
            count=count,
            icon=release.icon,
        )

    results = list(sources.values())
    results.sort(key=lambda s: s.count, reverse=True)
    return results
