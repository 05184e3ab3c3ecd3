"""`aurmaint update` command.

Updates the PKGBUILD in a local AUR repository to the latest upstream release:
- validates name/kind/checksums offline
- resolves the latest published GitHub release
- rewrites pkgver/pkgrel/provides, builds, refreshes checksums and `.SRCINFO`
- commits (unless `--update-only`) and pushes (with `--push`)

Exit codes: 0 on success or when already up to date, 1 on any failure.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from aurmaint.cli.console import error, progress
from aurmaint.core.errors import MaintenanceError
from aurmaint.io import Git, GitHubReleases, Makepkg
from aurmaint.settings import MaintSettings, RunOptions
from aurmaint.workflow import maintain


def build_collaborators(repo_path: Path, settings: MaintSettings, *, token: Optional[str]):
    """Return (feed, build, vcs) for a real run."""
    feed = GitHubReleases(
        retries=settings.fetch_retries,
        retry_delay=settings.fetch_retry_delay,
        token=token,
    )
    return feed, Makepkg(repo_path), Git(repo_path)


def register(app: typer.Typer) -> None:
    @app.command("update")
    def update(
        repo_path: Path = typer.Argument(..., help="Path to the local AUR package repository."),
        push: bool = typer.Option(False, "--push", "-p", help="Push changes to remote repository."),
        skip: bool = typer.Option(False, "--skip", "-s", help="Skip test building locally."),
        update_only: bool = typer.Option(False, "--update-only", "-u", help="Update PKGBUILD only. Do not commit."),
        force: bool = typer.Option(False, "--force", "-f", help="Skip version check."),
        vcs_marker: str = typer.Option(
            "-git",
            "--vcs-marker",
            envvar="AURMAINT_VCS_MARKER",
            help="Directory-name substring marking a version-controlled package.",
        ),
        remote: str = typer.Option("origin", "--remote", envvar="AURMAINT_REMOTE", help="Remote to push to."),
        branch: str = typer.Option("master", "--branch", envvar="AURMAINT_BRANCH", help="Branch to push."),
        retries: int = typer.Option(5, "--retries", envvar="AURMAINT_RETRIES", help="Release feed retry count."),
        retry_delay: float = typer.Option(
            7.0,
            "--retry-delay",
            envvar="AURMAINT_RETRY_DELAY",
            help="Seconds to wait between release feed retries.",
        ),
        token: Optional[str] = typer.Option(
            None,
            "--token",
            envvar="GITHUB_TOKEN",
            show_default=False,
            help="GitHub token for the releases API (optional).",
        ),
    ) -> None:
        """Update a PKGBUILD to the latest upstream release."""
        try:
            settings = MaintSettings(
                vcs_marker=vcs_marker,
                remote=remote,
                branch=branch,
                fetch_retries=retries,
                fetch_retry_delay=retry_delay,
            )
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e

        options = RunOptions(push=push, skip_build=skip, update_only=update_only, force=force)
        feed, build, vcs = build_collaborators(repo_path, settings, token=token)

        try:
            maintain(
                repo_path,
                feed=feed,
                build=build,
                vcs=vcs,
                options=options,
                settings=settings,
                notify=progress,
            )
        except MaintenanceError as e:
            error(str(e))
            raise typer.Exit(code=1) from e
