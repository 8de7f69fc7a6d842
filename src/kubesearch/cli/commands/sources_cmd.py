"""kubesearch sources <query> - List chart sources."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.core.search import list_chart_sources
from kubesearch.output.formatters import output_chart_sources

app = typer.Typer()


@app.callback(invoke_without_command=True)
def sources(
    query: str = typer.Argument(help="Chart or release name, e.g. openebs"),
    min_count: int = typer.Option(3, "--min-count", "-m", help="Minimum deployments per source"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """Compare the chart sources (official, mirrors, forks) used for a chart."""
    with open_collector(db, db_extended) as collector:
        results = list_chart_sources(collector, query, min_count=min_count)
    output_chart_sources(results, output)
