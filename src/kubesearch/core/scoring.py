"""Search relevance scoring."""

from __future__ import annotations

import math

from kubesearch.core.identity import simplify_url
from kubesearch.models.deployment import Deployment
from kubesearch.models.weights import AuthorWeights

FULL_MATCH_WEIGHT = 10
LENGTH_WEIGHT = 1
STARS_WEIGHT = 0.1  # 10 stars = 1 point

_NO_WEIGHTS = AuthorWeights()


def calculate_score(
    deployment: Deployment,
    query: str,
    author_weights: AuthorWeights = _NO_WEIGHTS,
) -> float:
    """Score a deployment against a query; higher is better.

    An exact release or chart name match dominates, names longer than the
    query are penalised per extra character, and stars add a small
    popularity bonus. The author multiplier scales the whole score,
    including a negative one.
    """
    normalized_query = query.lower()
    is_exact = (
        deployment.name.lower() == normalized_query
        or deployment.chart.lower() == normalized_query
    )
    full_match_score = FULL_MATCH_WEIGHT if is_exact else 0
    length_score = (len(deployment.name) - len(query)) * LENGTH_WEIGHT
    stars_score = deployment.stars * STARS_WEIGHT

    score = full_match_score - length_score + stars_score
    return score * author_weights.multiplier_for(deployment.repo)


def repo_score(repo: str, stars: int, author_weights: AuthorWeights = _NO_WEIGHTS) -> float:
    """Popularity of a repository: stars scaled by its author multiplier."""
    return stars * author_weights.multiplier_for(repo)


def round_score(score: float) -> float:
    """Round to one decimal place, halves rounding up."""
    return math.floor(score * 10 + 0.5) / 10


def matches_query(deployment: Deployment, query: str) -> bool:
    """True if the query is a substring of the chart, release or chart source."""
    normalized_query = query.lower()
    return (
        normalized_query in deployment.chart.lower()
        or normalized_query in deployment.release.lower()
        or normalized_query in simplify_url(deployment.charts_url).lower()
    )
