"""aurmaint CLI entrypoint.

Progress lines go to stdout, diagnostics to stderr. Library code logs through
the `aurmaint` logger, which is only wired to a handler when asked for
(`--verbose` or `AURMAINT_LOG_LEVEL`).
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import typer

app = typer.Typer(
    name="aurmaint",
    add_completion=False,
    no_args_is_help=True,
    help="Automatically maintain a versioned AUR package repository.",
)

LOGGER_ROOT = "aurmaint"


def configure_logging(level_name: Optional[str]) -> None:
    if not level_name:
        return
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logger = logging.getLogger(LOGGER_ROOT)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()  # stderr
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
) -> None:
    """aurmaint CLI."""
    configure_logging("DEBUG" if verbose else os.environ.get("AURMAINT_LOG_LEVEL"))


@app.command("version")
def version() -> None:
    """Print the installed aurmaint version."""
    from aurmaint import __version__

    typer.echo(__version__)


def _register_commands() -> None:
    """Register CLI subcommands.

    Importing these modules must remain lightweight so `aurmaint --help` is fast.
    """
    from aurmaint.cli.commands import check as check_cmd
    from aurmaint.cli.commands import update as update_cmd

    update_cmd.register(app)
    check_cmd.register(app)


_register_commands()


def main() -> None:
    app()
