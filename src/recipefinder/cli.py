"""Command line interface for Recipe Finder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from recipefinder.config import AppConfig
from recipefinder.errors import RecipeFinderError
from recipefinder.extraction import AVAILABLE_FORMATS, build_extractors
from recipefinder.index.indexer import Indexer
from recipefinder.index.storage import count_documents


console = Console()
app = typer.Typer(help="Recipe Finder - full-text index for a document folder")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def index(
    docs_dir: Path = typer.Argument(..., help="Directory with documents to index.", resolve_path=True),
    index_dir: Path = typer.Option(None, "--index-dir", help="Directory holding the index"),
    formats: List[str] = typer.Option(
        list(AppConfig().formats),
        "--format",
        "-f",
        help=f"Document formats to index ({', '.join(AVAILABLE_FORMATS)})",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rebuild the index from every supported document under DOCS_DIR."""
    _setup_logging(verbose)
    config = AppConfig(docs_dir=docs_dir, index_dir=index_dir, formats=tuple(formats))
    resolved_index = config.resolve_index_dir(Path.cwd())

    try:
        extractors = build_extractors(config.formats)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--format") from exc

    console.print(f"Indexing [bold]{docs_dir}[/bold] into [bold]{resolved_index}[/bold]...")
    try:
        indexer = Indexer(config.docs_dir, resolved_index, extractors)
        stats = indexer.create_index()
    except RecipeFinderError as exc:
        console.print(f"[red]Indexing failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(
        f"Indexed: {stats.indexed}, skipped: {stats.skipped}, "
        f"failed: {stats.failed}, files: {stats.files_seen}"
    )
    if stats.failures:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("File")
        table.add_column("Extractor")
        for path, extractor in stats.failures:
            table.add_row(str(path), extractor)
        console.print(table)


@app.command()
def count(
    index_dir: Path = typer.Option(None, "--index-dir", help="Directory holding the index"),
) -> None:
    """Print the number of documents in the index."""
    config = AppConfig(index_dir=index_dir)
    resolved_index = config.resolve_index_dir(Path.cwd())
    try:
        total = count_documents(resolved_index)
    except RecipeFinderError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        raise typer.Exit(code=1) from exc
    console.print(f"{total} documents in {resolved_index}")
