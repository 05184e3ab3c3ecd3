"""`aurmaint check` command.

Offline validation of a package repository: name vs directory, pkgver literal
vs routine, and no pinned checksums on version-controlled packages. No network,
build or git access.
"""

from __future__ import annotations

from pathlib import Path

import typer

from aurmaint.cli.console import error
from aurmaint.core.errors import MaintenanceError
from aurmaint.settings import MaintSettings
from aurmaint.workflow import check_package


def register(app: typer.Typer) -> None:
    @app.command("check")
    def check(
        repo_path: Path = typer.Argument(..., help="Path to the local AUR package repository."),
        vcs_marker: str = typer.Option(
            "-git",
            "--vcs-marker",
            envvar="AURMAINT_VCS_MARKER",
            help="Directory-name substring marking a version-controlled package.",
        ),
    ) -> None:
        """Validate a PKGBUILD without touching the network."""
        try:
            settings = MaintSettings(vcs_marker=vcs_marker)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

        try:
            report = check_package(repo_path, settings)
        except MaintenanceError as e:
            error(str(e))
            raise typer.Exit(code=1) from e

        typer.echo(f"OK {report.package} {report.kind.value} pkgver={report.current_version}")
