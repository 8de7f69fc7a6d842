"""kubesearch index <key> - List configuration paths."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.core.chart_info import get_chart_index
from kubesearch.output.formatters import output_chart_index

app = typer.Typer()


@app.callback(invoke_without_command=True)
def index(
    key: str = typer.Argument(help="Chart key"),
    path: Optional[str] = typer.Option(None, "--path", "-p", help="Only paths starting with this prefix"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """List every configuration path set by a chart's deployments."""
    with open_collector(db, db_extended) as collector:
        result = get_chart_index(collector, key, search_path=path)
    output_chart_index(result, output)
