"""Maintenance run: validate -> resolve -> rewrite -> build -> publish.

State machine, linear with early exits:

    START -> VALIDATED -> REWRITE_APPLIED -> [BUILD_VERIFIED] -> [HASHES_REGENERATED]
          -> METADATA_REGENERATED -> [COMMITTED -> [PUSHED]] -> DONE

- Validation (naming, pkgver type, checksum invariant) happens before any
  network access.
- "Already up to date" goes straight to DONE and is a success.
- Any failure raises and stops the run. Completed steps are not rolled back:
  a failed push leaves the commit in place.

Collaborators are passed in, so tests can drive every branch with fakes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

from aurmaint.codecs._pkgbuild_writer import write_text_atomic
from aurmaint.codecs.pkgbuild import parse_pkgbuild_text, read_pkgbuild, update_pkgbuild
from aurmaint.core.errors import BuildFailure, CommitFailure, DescriptorNotFound, PushFailure
from aurmaint.core.hashes import check_hash_invariant, decide_hash_policy
from aurmaint.core.model import PKGVER, URL, PackageKind
from aurmaint.core.resolve import needs_update, releases_api_url, resolve_release
from aurmaint.core.validate import validate_descriptor
from aurmaint.settings import MaintSettings, RunOptions

log = logging.getLogger(__name__)


class ReleaseFeed(Protocol):
    def fetch_releases(self, api_url: str) -> Sequence[Mapping[str, Any]]: ...


class BuildTool(Protocol):
    def build(self, clean: bool = True) -> bool: ...

    def regenerate_checksums(self) -> bool: ...

    def render_metadata(self) -> str: ...


class VersionControl(Protocol):
    def stage(self, names: Sequence[str]) -> None: ...

    def commit(self, message: str) -> bool: ...

    def push(self, remote: str, branch: str) -> bool: ...


class RunState(str, Enum):
    START = "start"
    VALIDATED = "validated"
    REWRITE_APPLIED = "rewrite_applied"
    BUILD_VERIFIED = "build_verified"
    HASHES_REGENERATED = "hashes_regenerated"
    METADATA_REGENERATED = "metadata_regenerated"
    COMMITTED = "committed"
    PUSHED = "pushed"
    DONE = "done"


@dataclass
class RunReport:
    package: str = ""
    kind: Optional[PackageKind] = None
    current_version: Optional[str] = None
    upstream_version: Optional[str] = None
    updated: bool = False
    changed: frozenset[str] = frozenset()
    states: list[RunState] = field(default_factory=lambda: [RunState.START])

    @property
    def state(self) -> RunState:
        return self.states[-1]

    def advance(self, state: RunState) -> None:
        log.debug("state %s -> %s", self.state.value, state.value)
        self.states.append(state)


def _noop(_: str) -> None:
    return None


def locate_descriptor(repo_path: Path, settings: MaintSettings) -> Path:
    if not repo_path.is_dir():
        raise DescriptorNotFound(f"cannot access path '{repo_path}' as a directory")
    path = repo_path / settings.descriptor_name
    if not path.is_file():
        raise DescriptorNotFound(f"cannot access '{path}' as a file")
    return path


def check_package(repo_path: Path, settings: MaintSettings = MaintSettings()) -> RunReport:
    """Offline validation only: naming, pkgver type and checksum invariant."""
    repo_path = Path(repo_path)
    desc = read_pkgbuild(locate_descriptor(repo_path, settings))
    dirname = repo_path.resolve().name
    kind = validate_descriptor(desc, dirname, marker=settings.vcs_marker)
    check_hash_invariant(desc, kind)
    report = RunReport(package=dirname, kind=kind, current_version=desc.scalar(PKGVER))
    report.advance(RunState.VALIDATED)
    return report


def maintain(
    repo_path: Path,
    *,
    feed: ReleaseFeed,
    build: BuildTool,
    vcs: VersionControl,
    options: RunOptions = RunOptions(),
    settings: MaintSettings = MaintSettings(),
    notify: Callable[[str], None] = _noop,
) -> RunReport:
    """Bring the package at `repo_path` up to date with its latest upstream release.

    Raises:
        MaintenanceError subclasses; see `aurmaint.core.errors`.
    """
    repo_path = Path(repo_path)
    pkgbuild_path = locate_descriptor(repo_path, settings)
    desc = read_pkgbuild(pkgbuild_path)

    notify("Checking PKGBUILD name correctness")
    dirname = repo_path.resolve().name
    kind = validate_descriptor(desc, dirname, marker=settings.vcs_marker)
    check_hash_invariant(desc, kind)

    report = RunReport(package=dirname, kind=kind, current_version=desc.scalar(PKGVER))
    report.advance(RunState.VALIDATED)

    api_url = releases_api_url(desc.scalar(URL) or "", host=settings.forge_host)
    release = resolve_release(feed.fetch_releases(api_url))
    report.upstream_version = release.value

    if not needs_update(report.current_version, release, force=options.force):
        notify("AUR package version is in sync with repo release. Nothing to do")
        report.advance(RunState.DONE)
        return report

    notify(
        f"Current package version is {report.current_version}. "
        f"Repo has version {release.value}. Updating"
    )
    notify("Updating existing PKGBUILD..")
    result = update_pkgbuild(pkgbuild_path, desc, version=release.value, kind=kind)
    report.updated = True
    report.changed = result.changed
    report.advance(RunState.REWRITE_APPLIED)

    if not options.skip_build:
        if not build.build(clean=True):
            raise BuildFailure(
                f"FAILED TO BUILD UPDATED PACKAGE LOCALLY ({report.package} {release.value}). "
                "Manual intervention needed"
            )
        report.advance(RunState.BUILD_VERIFIED)

        policy = decide_hash_policy(parse_pkgbuild_text(result.text), kind)
        if policy.regenerate:
            notify("Updating hash")
            if not build.regenerate_checksums():
                raise BuildFailure(f"checksum regeneration failed for {', '.join(policy.pinned_fields)}")
            report.advance(RunState.HASHES_REGENERATED)

    notify(f"Generating {settings.metadata_name}")
    write_text_atomic(repo_path / settings.metadata_name, build.render_metadata())
    report.advance(RunState.METADATA_REGENERATED)

    if options.update_only:
        report.advance(RunState.DONE)
        return report

    vcs.stage([settings.descriptor_name, settings.metadata_name])
    notify("Committing changes")
    message = settings.commit_message(release.value)
    if not vcs.commit(message):
        raise CommitFailure(f"git commit failed for message {message!r}")
    report.advance(RunState.COMMITTED)

    if options.push:
        notify("Pushing changes")
        if not vcs.push(settings.remote, settings.branch):
            raise PushFailure(
                f"git push {settings.remote} {settings.branch} failed; "
                "the commit is in place and can be pushed manually"
            )
        report.advance(RunState.PUSHED)

    report.advance(RunState.DONE)
    return report
