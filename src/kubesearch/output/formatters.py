"""Table / JSON / YAML output dispatch."""

from __future__ import annotations

import json
from typing import Any, Callable

import yaml
from rich.console import Console

from kubesearch.core.tools import ToolSpec, to_jsonable
from kubesearch.models.results import (
    ChartDetails,
    ChartIndex,
    ChartSourceEntry,
    ChartStats,
    GrepValueResult,
    ImageSearchResult,
    SearchResult,
)

console = Console()


def _emit(result: Any, fmt: str, render_table: Callable[[], Any]) -> None:
    if fmt == "json":
        console.print_json(json.dumps(to_jsonable(result), indent=2, default=str))
    elif fmt == "yaml":
        text = yaml.safe_dump(to_jsonable(result), default_flow_style=False, sort_keys=False)
        console.print(text, markup=False, soft_wrap=True)
    else:
        console.print(render_table())


def output_search_results(results: list[SearchResult], fmt: str, title: str = "Deployments") -> None:
    if not results and fmt == "table":
        console.print("[dim]No deployments found.[/dim]")
        return
    from kubesearch.output.tables import search_results_table
    _emit(results, fmt, lambda: search_results_table(results, title=title))


def output_chart_sources(sources: list[ChartSourceEntry], fmt: str) -> None:
    if not sources and fmt == "table":
        console.print("[dim]No chart sources found.[/dim]")
        return
    from kubesearch.output.tables import chart_sources_table
    _emit(sources, fmt, lambda: chart_sources_table(sources))


def output_chart_details(details: ChartDetails, fmt: str) -> None:
    if fmt != "table":
        _emit(details, fmt, lambda: None)
        return
    from kubesearch.output.tables import chart_details_panel, popular_values_table
    console.print(chart_details_panel(details))
    if details.popular_values:
        console.print(popular_values_table(details))


def output_chart_index(index: ChartIndex, fmt: str) -> None:
    from kubesearch.output.tables import chart_index_table
    _emit(index, fmt, lambda: chart_index_table(index))


def output_chart_stats(stats: ChartStats, fmt: str) -> None:
    from kubesearch.output.tables import chart_stats_renderable
    _emit(stats, fmt, lambda: chart_stats_renderable(stats))


def output_images(results: list[ImageSearchResult], fmt: str) -> None:
    if not results and fmt == "table":
        console.print("[dim]No matching images found.[/dim]")
        return
    from kubesearch.output.tables import image_results_table
    _emit(results, fmt, lambda: image_results_table(results))


def output_grep(results: list[GrepValueResult], fmt: str) -> None:
    if not results and fmt == "table":
        console.print("[dim]No matching value paths found.[/dim]")
        return
    from kubesearch.output.tables import grep_results_table
    _emit(results, fmt, lambda: grep_results_table(results))


def output_tools(tools: list[ToolSpec], fmt: str) -> None:
    from kubesearch.output.tables import tools_table
    _emit(tools, fmt, lambda: tools_table(tools))
