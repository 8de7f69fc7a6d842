"""Container image discovery across all deployment values."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from kubesearch.core.collector import DataCollector
from kubesearch.models.results import ImageDeployment, ImageSearchResult, ImageTag

logger = logging.getLogger(__name__)

IMAGE_KEYS = frozenset({"repository", "image"})
DEFAULT_TAG = "latest"
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
MAX_EXAMPLE_DEPLOYMENTS = 5

_GITHUB_REPO_RE = re.compile(r"github\.com/([^/]+/[^/]+)")


def _looks_like_image(value: Any) -> bool:
    return isinstance(value, str) and ("/" in value or ":" in value)


def split_image(reference: str) -> tuple[str, str]:
    """Split ``repo:tag`` on the first colon; the tag defaults to latest."""
    # A registry port is not recognised: "registry:5000/img:1.0" gives
    # repository "registry" and tag "5000/img:1.0".
    repository, sep, tag = reference.partition(":")
    return repository, (tag if sep else DEFAULT_TAG)


def extract_images(tree: Any) -> dict[str, dict[str, None]]:
    """Find image references in a value tree.

    Returns {repository: ordered set of tags}.
    """
    images: dict[str, dict[str, None]] = {}

    def walk(node: Any) -> None:
        if isinstance(node, dict):
            items = node.items()
        elif isinstance(node, list):
            items = enumerate(node)
        else:
            return
        for key, value in items:
            if key in IMAGE_KEYS and _looks_like_image(value):
                repository, tag = split_image(value)
                images.setdefault(repository, {}).setdefault(tag, None)
            walk(value)

    walk(tree)
    return images


def repo_name_from_url(url: str) -> str:
    """Extract ``owner/repo`` from a GitHub URL, or return the URL unchanged."""
    match = _GITHUB_REPO_RE.search(url)
    return match.group(1) if match else url


def build_image_map(values: Mapping[str, Any]) -> dict[str, dict[str, list[str]]]:
    """Aggregate {repository: {tag: [deployment urls]}} over all value trees."""
    image_map: dict[str, dict[str, list[str]]] = {}
    for url, tree in values.items():
        for repository, tags in extract_images(tree).items():
            tag_map = image_map.setdefault(repository, {})
            for tag in tags:
                tag_map.setdefault(tag, []).append(url)
    return image_map


def search_container_images(
    collector: DataCollector,
    image: str,
    limit: int = DEFAULT_LIMIT,
) -> list[ImageSearchResult]:
    """Find deployments whose values reference an image repository matching ``image``."""
    limit = max(0, min(limit, MAX_LIMIT))

    data = collector.collect_releases()
    urls = data.deployment_urls()
    values = collector.collect_values(urls)
    repo_names = {d.deployment_url: d.repo for d in data.releases}

    image_map = build_image_map(values)
    logger.debug("Found %d image repositories across %d value trees", len(image_map), len(values))

    needle = image.lower()
    matching = [
        (repository, tag_map)
        for repository, tag_map in image_map.items()
        if needle in repository.lower()
    ]
    matching.sort(key=lambda item: sum(len(u) for u in item[1].values()), reverse=True)

    results: list[ImageSearchResult] = []
    for repository, tag_map in matching[:limit]:
        tags = [
            ImageTag(
                tag=tag,
                usage_count=len(tag_urls),
                deployments=[
                    ImageDeployment(
                        repo_name=repo_names.get(url) or repo_name_from_url(url),
                        repo_url=url,
                    )
                    for url in tag_urls[:MAX_EXAMPLE_DEPLOYMENTS]
                ],
            )
            for tag, tag_urls in tag_map.items()
        ]
        tags.sort(key=lambda t: t.usage_count, reverse=True)
        results.append(ImageSearchResult(repository=repository, tags=tags))
    return results
