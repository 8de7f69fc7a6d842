"""Shared CLI options and database session handling."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

from kubesearch.config.settings import settings
from kubesearch.core.collector import DataCollector
from kubesearch.core.database import SqliteProvider
from kubesearch.core.errors import KubeSearchError

OutputOption = typer.Option(
    settings.default_output, "--output", "-o", help="Output format: table, json, yaml (default: $KUBESEARCH_OUTPUT)",
)
DbOption = typer.Option(None, "--db", help="Path to repos.db (default: $KUBESEARCH_DB_PATH)")
DbExtendedOption = typer.Option(
    None, "--db-extended", help="Path to repos-extended.db (default: $KUBESEARCH_DB_EXTENDED_PATH)",
)


@contextmanager
def open_collector(
    db: Optional[Path] = None,
    db_extended: Optional[Path] = None,
) -> Iterator[DataCollector]:
    """Yield a collector over the configured databases.

    Query failures are printed to stderr and end the command with exit code 1.
    """
    provider = SqliteProvider(db or settings.db_path, db_extended or settings.db_extended_path)
    try:
        yield DataCollector(provider)
    except KubeSearchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    finally:
        provider.close()
