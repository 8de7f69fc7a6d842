"""Rich table builders for each command."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from kubesearch.models.results import (
    ChartDetails,
    ChartIndex,
    ChartSourceEntry,
    ChartStats,
    GrepValueResult,
    ImageSearchResult,
    SearchResult,
)
from kubesearch.core.tools import ToolSpec
from kubesearch.output.themes import styled_score, styled_stars


def _short_value(value: Any, width: int = 60) -> str:
    text = value if isinstance(value, str) else json.dumps(value, default=str)
    if len(text) > width:
        text = text[: width - 1] + "…"
    return escape(text)


def search_results_table(results: list[SearchResult], title: str = "Deployments") -> Table:
    table = Table(title=title, expand=True)
    table.add_column("Score", justify="right", no_wrap=True)
    table.add_column("Release", style="bold white", no_wrap=True)
    table.add_column("Chart", style="magenta", no_wrap=True)
    table.add_column("Version", style="magenta")
    table.add_column("Repository", style="cyan", no_wrap=True)
    table.add_column("Stars", justify="right", no_wrap=True)
    table.add_column("Key", style="dim", overflow="fold")

    for r in results:
        table.add_row(
            styled_score(r.score),
            escape(r.name),
            escape(r.chart),
            r.version or "-",
            escape(r.repo),
            styled_stars(r.stars),
            r.key,
        )
    return table


def chart_sources_table(sources: list[ChartSourceEntry]) -> Table:
    table = Table(title="Chart Sources", expand=True)
    table.add_column("Deployments", justify="right", style="bold")
    table.add_column("Chart", style="magenta", no_wrap=True)
    table.add_column("Chart Source", style="cyan", overflow="fold")
    table.add_column("Key", style="dim", overflow="fold")

    for s in sources:
        table.add_row(str(s.count), escape(s.chart), escape(s.helm_repo_url), s.key)
    return table


def chart_details_panel(details: ChartDetails) -> Panel:
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")

    table.add_row("Name", escape(details.name))
    table.add_row("Chart", escape(details.chart_name))
    table.add_row("Helm Repo", escape(details.helm_repo_name))
    table.add_row("Chart Source", escape(details.helm_repo_url))
    table.add_row("Deployments", str(details.total_repos))
    table.add_row("Latest Version", details.latest_version)
    if details.icon:
        table.add_row("Icon", escape(details.icon))

    return Panel(table, title=f"[bold]Chart: {escape(details.chart_name)}[/bold]", border_style="blue")


def popular_values_table(details: ChartDetails) -> Table:
    table = Table(title="Popular Values", expand=True, show_lines=True)
    table.add_column("Path", style="cyan", overflow="fold")
    table.add_column("Count", justify="right", style="bold")
    table.add_column("Types", style="dim")
    table.add_column("Values (best repositories first)")

    for p in details.popular_values or []:
        lines = [
            f"{_short_value(v.value)} [dim]({escape(v.repo)}, {v.score:.1f})[/dim]"
            for v in p.values
        ]
        table.add_row(escape(p.path), str(p.count), ", ".join(p.types), "\n".join(lines))
    return table


def chart_index_table(index: ChartIndex) -> Table:
    table = Table(
        title=f"{escape(index.chart_name)} values ({index.total_deployments} deployments)",
        expand=False,
    )
    table.add_column("Path", style="cyan")
    table.add_column("Used By", justify="right", style="bold")
    for p in index.paths:
        table.add_row(escape(p.path), str(p.usage_count))
    return table


def chart_stats_renderable(stats: ChartStats) -> Group:
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("Key", style="bold cyan", no_wrap=True)
    summary.add_column("Value")
    summary.add_row("Chart", escape(stats.chart_name))
    summary.add_row("Key", stats.key)
    summary.add_row("Helm Repo", escape(stats.helm_repo_name))
    summary.add_row("Chart Source", escape(stats.helm_repo_url))
    summary.add_row("Deployments", str(stats.total_deployments))
    summary.add_row("Stars", f"{stats.min_stars} – {stats.max_stars}")
    summary.add_row("Most Used Version", stats.latest_version)

    versions = Table(title="Version Distribution", expand=False)
    versions.add_column("Version", style="magenta")
    versions.add_column("Count", justify="right", style="bold")
    for v in stats.version_distribution:
        versions.add_row(v.version, str(v.count))

    repos = Table(title="Top Repositories", expand=True)
    repos.add_column("Repository", style="cyan", no_wrap=True)
    repos.add_column("Stars", justify="right")
    repos.add_column("Version", style="magenta")
    repos.add_column("URL", style="dim", overflow="fold")
    for r in stats.top_repositories:
        repos.add_row(escape(r.repo), styled_stars(r.stars), r.version, escape(r.repo_url))

    panel = Panel(summary, title=f"[bold]Chart Stats: {escape(stats.name)}[/bold]", border_style="green")
    return Group(panel, versions, repos)


def image_results_table(results: list[ImageSearchResult]) -> Table:
    table = Table(title="Container Images", expand=True, show_lines=True)
    table.add_column("Image", style="bold cyan", overflow="fold")
    table.add_column("Uses", justify="right", style="bold")
    table.add_column("Tags (most used first)")

    for r in results:
        tags = [
            f"[magenta]{escape(t.tag)}[/magenta] x{t.usage_count} "
            f"[dim]{escape(', '.join(d.repo_name for d in t.deployments))}[/dim]"
            for t in r.tags
        ]
        table.add_row(escape(r.repository), str(r.usage_count), "\n".join(tags))
    return table


def grep_results_table(results: list[GrepValueResult]) -> Table:
    table = Table(title="Value Paths", expand=True, show_lines=True)
    table.add_column("Path", style="cyan", overflow="fold")
    table.add_column("Deployments", justify="right", style="bold")
    table.add_column("Examples")
    for r in results:
        examples = [_short_value(e.value) for e in r.examples]
        table.add_row(escape(r.value_path), str(r.count), "\n".join(examples))
    return table


def tools_table(tools: list[ToolSpec]) -> Table:
    table = Table(title="Tools", expand=True)
    table.add_column("Name", style="bold cyan", no_wrap=True)
    table.add_column("Required", style="magenta")
    table.add_column("Description")
    for t in tools:
        table.add_row(t.name, ", ".join(t.required) or "-", escape(t.description))
    return table
