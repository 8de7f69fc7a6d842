"""Flatten Helm value trees into dotted paths and aggregate them per chart."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from kubesearch.core.scoring import repo_score, round_score
from kubesearch.models import ValueKind
from kubesearch.models.deployment import RepoEntry
from kubesearch.models.results import PathUsage, PopularValue, ValueExample
from kubesearch.models.values import PathAggregate, ValueOccurrence
from kubesearch.models.weights import AuthorWeights

MAX_PATHS = 20
MAX_VALUES_PER_PATH = 10


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _clamp(limit: int, cap: int) -> int:
    return max(0, min(limit, cap))


def merge_aggregates(target: dict[str, PathAggregate], other: Mapping[str, PathAggregate]) -> None:
    """Merge ``other`` into ``target``, appending new paths in order."""
    for path, agg in other.items():
        existing = target.get(path)
        if existing is None:
            target[path] = agg.copy()
        else:
            existing.merge(agg)


def flatten(
    tree: Any,
    repo: str = "",
    repo_url: str = "",
    stars: int = 0,
    prefix: str = "",
) -> dict[str, PathAggregate]:
    """Walk a value tree depth-first and collect every leaf by dotted path.

    Objects are descended into; scalars, nulls and arrays are leaves.
    Anything that is not an object yields an empty mapping.
    """
    result: dict[str, PathAggregate] = {}
    if ValueKind.of(tree) is not ValueKind.OBJECT:
        return result

    for key, value in tree.items():
        path = _join(prefix, str(key))
        kind = ValueKind.of(value)
        if kind is ValueKind.OBJECT:
            merge_aggregates(result, flatten(value, repo, repo_url, stars, path))
            continue
        agg = result.get(path)
        if agg is None:
            agg = result[path] = PathAggregate()
        agg.add(ValueOccurrence(value=value, repo=repo, repo_url=repo_url, stars=stars), kind)
    return result


def collect_paths(tree: Any, prefix: str = "") -> dict[str, None]:
    """Return the leaf paths of a tree as an ordered set."""
    paths: dict[str, None] = {}
    if ValueKind.of(tree) is not ValueKind.OBJECT:
        return paths
    for key, value in tree.items():
        path = _join(prefix, str(key))
        if ValueKind.of(value) is ValueKind.OBJECT:
            paths.update(collect_paths(value, path))
        else:
            paths.setdefault(path, None)
    return paths


def aggregate_values(
    entries: Iterable[RepoEntry],
    values: Mapping[str, Any],
) -> dict[str, PathAggregate]:
    """Union the flattened trees of every entry that has values, in entry order."""
    aggregate: dict[str, PathAggregate] = {}
    for entry in entries:
        tree = values.get(entry.url)
        if not tree:
            continue
        merge_aggregates(aggregate, flatten(tree, entry.repo, entry.repo_url, entry.stars))
    return aggregate


def _matches_prefix(path: str, prefix: str | None) -> bool:
    return not prefix or path.lower().startswith(prefix.lower())


def top_paths(
    aggregate: Mapping[str, PathAggregate],
    paths_limit: int = 10,
    values_limit: int = 5,
    path_prefix: str | None = None,
    author_weights: AuthorWeights | None = None,
) -> list[PopularValue]:
    """Select the most used paths and their best-ranked values.

    Values are ranked by repository popularity (stars times author
    multiplier), paths by number of occurrences. Both sorts are stable.
    """
    weights = author_weights or AuthorWeights()
    paths_limit = _clamp(paths_limit, MAX_PATHS)
    values_limit = _clamp(values_limit, MAX_VALUES_PER_PATH)

    popular: list[PopularValue] = []
    for path, agg in aggregate.items():
        if not _matches_prefix(path, path_prefix):
            continue
        examples = [
            ValueExample(
                value=occ.value,
                repo=occ.repo,
                repo_url=occ.repo_url,
                stars=occ.stars,
                score=round_score(repo_score(occ.repo, occ.stars, weights)),
            )
            for occ in agg.values
        ]
        examples.sort(key=lambda e: e.score, reverse=True)
        popular.append(PopularValue(
            path=path,
            count=agg.count,
            types=agg.types,
            values=examples[:values_limit],
        ))

    popular.sort(key=lambda p: p.count, reverse=True)
    return popular[:paths_limit]


def count_paths(
    entries: Iterable[RepoEntry],
    values: Mapping[str, Any],
) -> dict[str, int]:
    """Count, per leaf path, how many deployments set it."""
    counts: dict[str, int] = {}
    for entry in entries:
        tree = values.get(entry.url)
        if not tree:
            continue
        for path in collect_paths(tree):
            counts[path] = counts.get(path, 0) + 1
    return counts


def path_index(counts: Mapping[str, int], search_path: str | None = None) -> list[PathUsage]:
    """Alphabetical list of paths with their usage counts."""
    return [
        PathUsage(path=path, usage_count=count)
        for path, count in sorted(counts.items())
        if _matches_prefix(path, search_path)
    ]
