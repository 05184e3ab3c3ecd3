"""Console output helpers: progress to stdout, diagnostics to stderr."""

from __future__ import annotations

import typer


def progress(message: str) -> None:
    typer.echo(typer.style("=>", fg=typer.colors.BRIGHT_GREEN) + " " + message)


def error(message: str) -> None:
    typer.secho(f"ERROR! {message}", err=True, fg=typer.colors.RED)
