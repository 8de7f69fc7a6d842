"""kubesearch tool <name> - Call a named tool."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.config.settings import settings
from kubesearch.core.tools import TOOLS, call_tool, list_tools
from kubesearch.output.formatters import output_tools

app = typer.Typer()


@app.callback(invoke_without_command=True)
def tool(
    name: Optional[str] = typer.Argument(None, help="Tool name, e.g. get_chart_details"),
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object"),
    list_: bool = typer.Option(False, "--list", help="List available tools and their required arguments"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """Run a tool and print its JSON result, as a tool client would see it."""
    if list_:
        output_tools(list_tools(), output)
        return
    if not name:
        typer.echo("A tool name or --list is required.", err=True)
        raise typer.Exit(code=1)
    if name not in TOOLS:
        typer.echo(f"Unknown tool '{name}'. Available: {', '.join(sorted(TOOLS))}", err=True)
        raise typer.Exit(code=1)
    try:
        arguments = json.loads(args)
    except ValueError as exc:
        typer.echo(f"Invalid --args JSON: {exc}", err=True)
        raise typer.Exit(code=1)
    if not isinstance(arguments, dict):
        typer.echo("--args must be a JSON object.", err=True)
        raise typer.Exit(code=1)

    with open_collector(db, db_extended) as collector:
        result = call_tool(name, arguments, collector, settings.author_weights)
    typer.echo(result.text, err=result.is_error)
    if result.is_error:
        raise typer.Exit(code=1)
