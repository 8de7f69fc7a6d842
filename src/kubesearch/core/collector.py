"""Turn raw deployment rows into deployments grouped by chart source."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from kubesearch.core.database import DataProvider
from kubesearch.core.identity import derive_key, merge_source_url
from kubesearch.models.deployment import ChartGroups, CollectorData, Deployment, RepoEntry

logger = logging.getLogger(__name__)

ValueTree = dict[str, Any]

# Value trees are walked recursively; deeper blobs are treated as unusable.
MAX_TREE_DEPTH = 100


def _text(row: dict[str, Any], column: str) -> str:
    value = row.get(column)
    return "" if value is None else str(value)


def _int(row: dict[str, Any], column: str) -> int:
    value = row.get(column)
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug("Non-numeric %s=%r for %s", column, value, row.get("url"))
        return 0


def collect(rows: Iterable[dict[str, Any]]) -> CollectorData:
    """Build deployments and chart source groups from raw rows, in row order."""
    data = CollectorData()

    for row in rows:
        chart_name = _text(row, "chart_name")
        release_name = _text(row, "release_name")
        helm_repo_url = merge_source_url(_text(row, "helm_repo_url"))
        key = derive_key(helm_repo_url, chart_name, release_name)

        version = _text(row, "chart_version")
        icon = _text(row, "hajimari_icon")
        stars = _int(row, "stars")
        timestamp = _int(row, "timestamp")

        data.releases.append(Deployment(
            release=release_name,
            chart=chart_name,
            name=release_name,
            key=key,
            charts_url=helm_repo_url,
            repo=_text(row, "repo_name"),
            repo_url=_text(row, "repo_url"),
            stars=stars,
            version=version,
            deployment_url=_text(row, "url"),
            icon=icon or None,
            timestamp=timestamp,
        ))

        data.repos.add(key, RepoEntry(
            name=release_name,
            repo=_text(row, "repo_name"),
            helm_repo_name=_text(row, "helm_repo_name"),
            helm_repo_url=helm_repo_url,
            url=_text(row, "url"),
            repo_url=_text(row, "repo_url"),
            chart_version=version,
            stars=stars,
            icon=icon,
            group=_text(row, "hajimari_group"),
            timestamp=timestamp,
        ))

    return data


def parse_values(url: str, raw: str | None) -> ValueTree:
    """Parse one value blob, returning an empty tree when it is unusable."""
    if raw is None:
        return {}
    try:
        tree = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        logger.warning("Failed to parse values for %s", url, exc_info=True)
        return {}
    if not isinstance(tree, dict):
        logger.warning("Values for %s are not an object (%s)", url, type(tree).__name__)
        return {}
    if exceeds_depth(tree, MAX_TREE_DEPTH):
        logger.warning("Values for %s are nested deeper than %d levels", url, MAX_TREE_DEPTH)
        return {}
    return tree


def exceeds_depth(tree: Any, limit: int) -> bool:
    """True if objects or arrays in ``tree`` nest more than ``limit`` levels."""
    stack = [(tree, 1)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        if depth > limit:
            return True
        stack.extend((child, depth + 1) for child in children)
    return False


class DataCollector:
    """Queries the data provider and aggregates the results per call."""

    def __init__(self, provider: DataProvider):
        self.provider = provider

    def collect_releases(self) -> CollectorData:
        rows = self.provider.fetch_deployment_rows()
        data = collect(rows)
        logger.debug(
            "Collected %d deployments across %d chart sources",
            len(data.releases), len(data.repos),
        )
        return data

    def collect_values(self, urls: Iterable[str]) -> dict[str, ValueTree]:
        """Fetch and parse the value trees for the given deployment URLs."""
        unique = list(dict.fromkeys(urls))
        if not unique:
            return {}

        values: dict[str, ValueTree] = {}
        for row in self.provider.fetch_value_blobs(unique):
            url = _text(row, "url")
            values[url] = parse_values(url, row.get("val"))
        return values
