"""kubesearch stats [key] - Show chart statistics."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.config.settings import settings
from kubesearch.core.chart_info import get_chart_stats
from kubesearch.output.formatters import output_chart_stats

app = typer.Typer()


@app.callback(invoke_without_command=True)
def stats(
    key: Optional[str] = typer.Argument(None, help="Chart key"),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Use the best match for this name instead of a key"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """Show deployment statistics for a chart source."""
    if not key and query is None:
        typer.echo("Either a chart key or --query is required.", err=True)
        raise typer.Exit(code=1)
    with open_collector(db, db_extended) as collector:
        result = get_chart_stats(collector, key=key, query=query, author_weights=settings.author_weights)
    output_chart_stats(result, output)
