"""Typer-based CLI for taggo."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config_manager import load_settings
from .indexer import TagIndexer

err_console = Console(stderr=True)

app = typer.Typer(
    help="Create Exuberant-Ctags compatible tags files for Go source.",
    add_completion=False,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"taggo v{__version__}")
        raise typer.Exit()


@app.command()
def main(
    paths: Optional[List[str]] = typer.Argument(None, help="Go source files (or directories with --recurse)."),
    recurse: Optional[bool] = typer.Option(
        None,
        "--recurse/--no-recurse",
        "-R",
        help=r"Recurse into given subdirectories. Only VCS metadata is pruned; set skip_dirs under \[tags] in config.toml to prune more.",
    ),
    output: str = typer.Option("-", "--output", "-o", help="Tag file to write, '-' for stdout."),
    escape_patterns: Optional[bool] = typer.Option(
        None,
        "--escape-patterns/--no-escape-patterns",
        help="Escape '/' and '\\' inside search patterns.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Log progress to stderr."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Write a sorted tags file for the given Go sources."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    settings = load_settings().with_overrides(recurse=recurse, escape_patterns=escape_patterns)
    result = TagIndexer(settings).index_paths(paths or [])
    data = result.tags.render()

    if output == "-":
        typer.echo(data, nl=False)
    else:
        try:
            Path(output).write_bytes(data)
        except OSError as exc:
            err_console.print(f"[red]Cannot write tags to {escape(output)}: {escape(str(exc.strerror or exc))}[/red]")
            raise typer.Exit(code=1)

    if result.first_error is not None:
        err_console.print(
            f"[yellow]warning:[/yellow] {result.failed} file(s) could not be parsed; "
            f"first error: {escape(str(result.first_error))}",
            markup=True,
            highlight=False,
        )


if __name__ == "__main__":
    app()
