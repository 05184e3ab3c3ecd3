"""Build collaborator backed by `makepkg` and `updpkgsums`."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from aurmaint.core.errors import MetadataFailure
from aurmaint.io._process import run_command

log = logging.getLogger(__name__)

# Build products makepkg leaves in the package directory.
_BUILD_DIRS = ("src", "pkg")


class Makepkg:
    def __init__(self, package_dir: Path) -> None:
        self.package_dir = Path(package_dir)

    def clean(self) -> None:
        for name in _BUILD_DIRS:
            p = self.package_dir / name
            if p.is_dir():
                log.debug("removing %s", p)
                shutil.rmtree(p)

    def build(self, clean: bool = True) -> bool:
        """Build the package, skipping checksum verification (sources just changed)."""
        if clean:
            self.clean()
        return run_command(["makepkg", "-fs", "--skipchecksums"], cwd=self.package_dir).ok

    def regenerate_checksums(self) -> bool:
        return run_command(["updpkgsums"], cwd=self.package_dir).ok

    def render_metadata(self) -> str:
        """Return `.SRCINFO` text for the current PKGBUILD.

        Raises:
            MetadataFailure: if `makepkg --printsrcinfo` fails.
        """
        res = run_command(["makepkg", "--printsrcinfo"], cwd=self.package_dir, capture=True)
        if not res.ok:
            detail = res.stderr.strip()
            raise MetadataFailure(
                f"makepkg --printsrcinfo failed ({res.returncode})" + (f": {detail}" if detail else "")
            )
        return res.stdout
