"""Named tool surface over the query operations.

Each tool takes a plain argument mapping and returns JSON text. Failures
are reported as a result flagged ``is_error`` instead of an exception.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import sys
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from kubesearch.core.chart_info import get_chart_details, get_chart_index, get_chart_stats
from kubesearch.core.collector import DataCollector
from kubesearch.core.errors import KubeSearchError
from kubesearch.core.grep import grep_helm_values
from kubesearch.core.images import search_container_images
from kubesearch.core.search import list_chart_sources, search_deployments, search_helm_charts
from kubesearch.models.weights import AuthorWeights

logger = logging.getLogger(__name__)

Handler = Callable[[DataCollector, Mapping[str, Any], AuthorWeights], Any]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    handler: Handler
    required: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "required": list(self.required),
        }


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False


def _arg(args: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """Return the first argument present under any of ``names``."""
    for name in names:
        if name in args and args[name] is not None:
            return args[name]
    return default


def _required_str(args: Mapping[str, Any], name: str) -> str:
    value = args.get(name)
    if not isinstance(value, str):
        raise KubeSearchError(f"Missing required argument '{name}'")
    return value


def _int_arg(args: Mapping[str, Any], *names: str, default: int) -> int:
    value = _arg(args, *names, default=default)
    if isinstance(value, bool):
        raise KubeSearchError(f"Argument '{names[0]}' must be a number")
    try:
        return int(value)
    except OverflowError:
        # +/-inf, clamped to the cap by the operation
        return sys.maxsize if value > 0 else -sys.maxsize
    except (TypeError, ValueError):
        raise KubeSearchError(f"Argument '{names[0]}' must be a number") from None


def _bool_arg(args: Mapping[str, Any], *names: str, default: bool) -> bool:
    value = _arg(args, *names, default=default)
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


def _search_deployments(collector: DataCollector, args: Mapping[str, Any], weights: AuthorWeights) -> Any:
    return search_deployments(
        collector,
        _required_str(args, "query"),
        limit=_int_arg(args, "limit", default=10),
        author_weights=weights,
    )


def _search_helm_charts(collector: DataCollector, args: Mapping[str, Any], weights: AuthorWeights) -> Any:
    return search_helm_charts(
        collector,
        _required_str(args, "query"),
        limit=_int_arg(args, "limit", default=20),
        author_weights=weights,
    )


def _list_chart_sources(collector: DataCollector, args: Mapping[str, Any], weights: AuthorWeights) -> Any:
    return list_chart_sources(
        collector,
        _required_str(args, "query"),
        min_count=_int_arg(args, "minCount", "min_count", default=3),
    )


def _get_chart_details(collector: DataCollector, args: Mapping[str, Any], weights: AuthorWeights) -> Any:
    return get_chart_details(
        collector,
        _required_str(args, "key"),
        include_values=_bool_arg(args, "includeValues", "include_values", default=True),
        values_limit=_int_arg(args, "valuesLimit", "values_limit", default=5),
        paths_limit=_int_arg(args, "pathsLimit", "paths_limit", default=10),
        value_path=_arg(args, "valuePath", "value_path"),
        author_weights=weights,
    )


def _get_chart_index(collector: DataCollector, args: Mapping[str, Any], weights: AuthorWeights) -> Any:
    return get_chart_index(
        collector,
        _required_str(args, "key"),
        search_path=_arg(args, "searchPath", "search_path"),
    )


def _get_chart_stats(collector: DataCollector, args: Mapping[str, Any], weights: AuthorWeights) -> Any:
    key = _arg(args, "key")
    query = _arg(args, "query")
    if not key and query is None:
        raise KubeSearchError("Either 'key' or 'query' is required")
    return get_chart_stats(collector, key=key, query=query, author_weights=weights)


def _search_container_images(collector: DataCollector, args: Mapping[str, Any], weights: AuthorWeights) -> Any:
    return search_container_images(
        collector,
        _required_str(args, "image"),
        limit=_int_arg(args, "limit", default=20),
    )


def _grep_helm_values(collector: DataCollector, args: Mapping[str, Any], weights: AuthorWeights) -> Any:
    return grep_helm_values(
        collector,
        _required_str(args, "pattern"),
        limit=_int_arg(args, "limit", default=30),
        author_weights=weights,
    )


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            "search_deployments",
            "Search real-world deployments by chart or release name (limit: default 10, max 100).",
            _search_deployments,
            ("query",),
        ),
        ToolSpec(
            "search_helm_charts",
            "Search Helm charts by name and return deployment examples (limit: default 20, max 100).",
            _search_helm_charts,
            ("query",),
        ),
        ToolSpec(
            "list_chart_sources",
            "List chart sources (helm repositories) for a chart name with deployment counts.",
            _list_chart_sources,
            ("query",),
        ),
        ToolSpec(
            "get_chart_details",
            "Chart details with popular configuration values ranked by repository quality.",
            _get_chart_details,
            ("key",),
        ),
        ToolSpec(
            "get_chart_index",
            "List all configuration paths used across a chart's deployments.",
            _get_chart_index,
            ("key",),
        ),
        ToolSpec(
            "get_chart_stats",
            "Deployment statistics for a chart source, by key or by search query.",
            _get_chart_stats,
        ),
        ToolSpec(
            "search_container_images",
            "Find deployments using a container image (limit: default 20).",
            _search_container_images,
            ("image",),
        ),
        ToolSpec(
            "grep_helm_values",
            "Search configuration paths across all Helm values (limit: default 30).",
            _grep_helm_values,
            ("pattern",),
        ),
    )
}


def list_tools() -> list[ToolSpec]:
    """Tool catalogue in registration order."""
    return list(TOOLS.values())


def to_jsonable(result: Any) -> Any:
    if isinstance(result, list):
        return [to_jsonable(r) for r in result]
    if hasattr(result, "to_dict"):
        return result.to_dict()
    return result


def call_tool(
    name: str,
    arguments: Mapping[str, Any] | None,
    collector: DataCollector,
    author_weights: AuthorWeights | None = None,
) -> ToolResult:
    """Run a named tool and serialize its result as indented JSON."""
    spec = TOOLS.get(name)
    try:
        if spec is None:
            raise KubeSearchError(f"Unknown tool: {name}")
        result = spec.handler(collector, arguments or {}, author_weights or AuthorWeights())
    except KubeSearchError as exc:
        logger.debug("Tool %s failed: %s", name, exc)
        return ToolResult(text=f"Error: {exc}", is_error=True)
    except sqlite3.Error as exc:
        logger.error("Tool %s failed reading the database", name, exc_info=True)
        return ToolResult(text=f"Error: {exc}", is_error=True)
    return ToolResult(text=json.dumps(to_jsonable(result), indent=2, default=str))
