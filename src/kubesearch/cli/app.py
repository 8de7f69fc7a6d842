"""Root Typer application, mounts sub-commands."""

from __future__ import annotations

import logging

import typer

from kubesearch.config.settings import settings
from kubesearch.logging import configure_logging

app = typer.Typer(
    name="kubesearch",
    help="KubeSearch - Explore how the community deploys Helm charts.",
    no_args_is_help=True,
)


@app.callback()
def root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any sub-command runs."""
    configure_logging(logging.DEBUG if verbose else settings.logging_level)


def _register_commands() -> None:
    from kubesearch.cli.commands.search_cmd import app as search_app
    from kubesearch.cli.commands.charts_cmd import app as charts_app
    from kubesearch.cli.commands.sources_cmd import app as sources_app
    from kubesearch.cli.commands.details_cmd import app as details_app
    from kubesearch.cli.commands.index_cmd import app as index_app
    from kubesearch.cli.commands.stats_cmd import app as stats_app
    from kubesearch.cli.commands.images_cmd import app as images_app
    from kubesearch.cli.commands.grep_cmd import app as grep_app
    from kubesearch.cli.commands.tool_cmd import app as tool_app

    app.add_typer(search_app, name="search", help="Search deployments by chart or release name")
    app.add_typer(charts_app, name="charts", help="Search Helm charts and show deployment examples")
    app.add_typer(sources_app, name="sources", help="List chart sources for a chart name")
    app.add_typer(details_app, name="details", help="Show chart details and popular values")
    app.add_typer(index_app, name="index", help="List configuration paths used by a chart")
    app.add_typer(stats_app, name="stats", help="Show deployment statistics for a chart")
    app.add_typer(images_app, name="images", help="Find deployments using a container image")
    app.add_typer(grep_app, name="grep", help="Search configuration paths across all values")
    app.add_typer(tool_app, name="tool", help="Call a named tool with JSON arguments")


_register_commands()


def main() -> None:
    app()
