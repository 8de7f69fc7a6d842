"""kubesearch charts <query> - Search Helm charts."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.config.settings import settings
from kubesearch.core.search import search_helm_charts
from kubesearch.output.formatters import output_search_results

app = typer.Typer()


@app.callback(invoke_without_command=True)
def charts(
    query: str = typer.Argument(help="Chart or release name"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum results (max 100)"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """Search Helm charts by name and list deployment examples."""
    with open_collector(db, db_extended) as collector:
        results = search_helm_charts(collector, query, limit=limit, author_weights=settings.author_weights)
    output_search_results(results, output, title="Helm Charts")
