"""kubesearch images <image> - Find container image usage."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from kubesearch.cli.options import DbExtendedOption, DbOption, OutputOption, open_collector
from kubesearch.core.images import search_container_images
from kubesearch.output.formatters import output_images

app = typer.Typer()


@app.callback(invoke_without_command=True)
def images(
    image: str = typer.Argument(help="Image repository, e.g. ghcr.io/linuxserver/plex"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum image repositories"),
    output: str = OutputOption,
    db: Optional[Path] = DbOption,
    db_extended: Optional[Path] = DbExtendedOption,
) -> None:
    """Find deployments that configure a container image."""
    with open_collector(db, db_extended) as collector:
        results = search_container_images(collector, image, limit=limit)
    output_images(results, output)
