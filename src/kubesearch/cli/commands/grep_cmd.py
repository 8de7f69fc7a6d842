"""kubesearch grep <pattern> - Search value paths."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.config.settings import settings
from kubesearch.core.grep import grep_helm_values
from kubesearch.output.formatters import output_grep

app = typer.Typer()


@app.callback(invoke_without_command=True)
def grep(
    pattern: str = typer.Argument(help="Path fragment, e.g. ingress.enabled"),
    limit: int = typer.Option(30, "--limit", "-l", help="Maximum paths"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """Search configuration paths across every deployment."""
    with open_collector(db, db_extended) as collector:
        results = grep_helm_values(collector, pattern, limit=limit, author_weights=settings.author_weights)
    output_grep(results, output)
