"""Search configuration paths across every deployment's values."""

from __future__ import annotations

from typing import Any

from kubesearch.core.collector import DataCollector
from kubesearch.core.scoring import repo_score
from kubesearch.core.value_index import flatten
from kubesearch.models.results import GrepExample, GrepValueResult
from kubesearch.models.weights import AuthorWeights

DEFAULT_LIMIT = 30
MAX_LIMIT = 100
MAX_EXAMPLES = 5


def grep_helm_values(
    collector: DataCollector,
    pattern: str,
    limit: int = DEFAULT_LIMIT,
    author_weights: AuthorWeights | None = None,
) -> list[GrepValueResult]:
    """Find value paths containing ``pattern`` and show how they are set.

    Paths are ordered by the number of deployments using them; examples
    come from the most popular repositories first.
    """
    weights = author_weights or AuthorWeights()
    limit = max(0, min(limit, MAX_LIMIT))

    data = collector.collect_releases()
    values = collector.collect_values(data.deployment_urls())
    owners = {d.deployment_url: (d.repo, d.stars) for d in data.releases}

    # path -> {url: first value seen in that deployment}
    paths: dict[str, dict[str, Any]] = {}
    for url, tree in values.items():
        for path, agg in flatten(tree).items():
            paths.setdefault(path, {}).setdefault(url, agg.values[0].value)

    needle = pattern.lower()
    matching = [(path, by_url) for path, by_url in paths.items() if needle in path.lower()]
    matching.sort(key=lambda item: len(item[1]), reverse=True)

    def url_rank(url: str) -> tuple[int, float]:
        owner = owners.get(url)
        if owner is None:
            return (1, 0.0)
        return (0, -repo_score(owner[0], owner[1], weights))

    results: list[GrepValueResult] = []
    for path, by_url in matching[:limit]:
        ranked_urls = sorted(by_url, key=url_rank)
        results.append(GrepValueResult(
            value_path=path,
            count=len(by_url),
            examples=[GrepExample(value=by_url[u], repo_url=u) for u in ranked_urls[:MAX_EXAMPLES]],
        ))
    return results
