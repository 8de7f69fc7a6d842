"""kubesearch details <key> - Show chart details."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.config.settings import settings
from kubesearch.core.chart_info import get_chart_details
from kubesearch.output.formatters import output_chart_details

app = typer.Typer()


@app.callback(invoke_without_command=True)
def details(
    key: str = typer.Argument(help="Chart key, e.g. ghcr.io-bjw-s-helm-plex"),
    values: bool = typer.Option(True, "--values/--no-values", help="Include popular values"),
    values_limit: int = typer.Option(5, "--values-limit", help="Values per path (max 10)"),
    paths_limit: int = typer.Option(10, "--paths-limit", help="Paths to show (max 20)"),
    path: Optional[str] = typer.Option(None, "--path", "-p", help="Only paths starting with this prefix"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """Show details and popular configuration values for a chart."""
    with open_collector(db, db_extended) as collector:
        result = get_chart_details(
            collector,
            key,
            include_values=values,
            values_limit=values_limit,
            paths_limit=paths_limit,
            value_path=path,
            author_weights=settings.author_weights,
        )
    output_chart_details(result, output)
