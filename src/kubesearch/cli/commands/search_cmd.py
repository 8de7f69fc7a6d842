"""kubesearch search <query> - Search deployments."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.config.settings import settings
from kubesearch.core.search import search_deployments
from kubesearch.output.formatters import output_search_results

app = typer.Typer()


@app.callback(invoke_without_command=True)
def search(
    query: str = typer.Argument(help="Chart or release name, e.g. plex, traefik"),
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum results (max 100)"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """Search real-world deployments, best matches first."""
    with open_collector(db, db_extended) as collector:
        results = search_deployments(collector, query, limit=limit, author_weights=settings.author_weights)
    output_search_results(results, output)
