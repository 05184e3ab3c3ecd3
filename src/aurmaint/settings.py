"""Run configuration.

All tunables live in one frozen value object. The CLI fills it from options
(each option also reads an `AURMAINT_*` environment variable); library callers
construct it directly.
"""

from __future__ import annotations

from dataclasses import dataclass

from aurmaint.core.resolve import DEFAULT_FORGE_HOST
from aurmaint.core.validate import DEFAULT_VCS_MARKER


@dataclass(frozen=True)
class MaintSettings:
    vcs_marker: str = DEFAULT_VCS_MARKER
    forge_host: str = DEFAULT_FORGE_HOST
    descriptor_name: str = "PKGBUILD"
    metadata_name: str = ".SRCINFO"
    remote: str = "origin"
    branch: str = "master"
    fetch_retries: int = 5
    fetch_retry_delay: float = 7.0
    commit_template: str = "Update PKGBUILD to version {version}"

    def __post_init__(self) -> None:
        if not self.vcs_marker:
            raise ValueError("settings: vcs_marker must be a non-empty string")
        if self.fetch_retries < 0:
            raise ValueError("settings: fetch_retries must be >= 0")
        if self.fetch_retry_delay < 0:
            raise ValueError("settings: fetch_retry_delay must be >= 0")
        if "{version}" not in self.commit_template:
            raise ValueError("settings: commit_template must contain '{version}'")

    def commit_message(self, version: str) -> str:
        return self.commit_template.format(version=version)


@dataclass(frozen=True)
class RunOptions:
    """Per-invocation switches (the CLI flags)."""

    push: bool = False
    skip_build: bool = False
    update_only: bool = False
    force: bool = False
