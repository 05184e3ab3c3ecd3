from __future__ import annotations

from pathlib import Path

import pytest

from aurmaint.core.errors import (
    BuildFailure,
    CommitFailure,
    DescriptorNotFound,
    InvalidUpstreamURL,
    InvariantViolation,
    NamingMismatch,
    PushFailure,
    UnparseableVersion,
    VersionFieldTypeError,
)
from aurmaint.core.model import PackageKind
from aurmaint.settings import MaintSettings, RunOptions
from aurmaint.workflow import RunState, check_package, maintain
from conftest import FIXED_PKGBUILD, VCS_PKGBUILD, FakeBuild, FakeFeed, FakeVCS, make_repo, release


def _run(repo: Path, feed: FakeFeed, build: FakeBuild, vcs: FakeVCS, **options: bool):
    messages: list[str] = []
    report = maintain(
        repo,
        feed=feed,
        build=build,
        vcs=vcs,
        options=RunOptions(**options),
        notify=messages.append,
    )
    return report, messages


def test_full_run_for_fixed_package(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    feed = FakeFeed([release("v1.1.0-rc1", prerelease=True), release("v1.1.0")])
    build = FakeBuild(srcinfo="pkgbase = foo\n\tpkgver = 1.1.0\n")
    vcs = FakeVCS()

    report, messages = _run(repo, feed, build, vcs, push=True)

    assert feed.urls == ["https://api.github.com/repos/example/foo/releases"]
    assert report.kind is PackageKind.FIXED
    assert report.current_version == "1.0"
    assert report.upstream_version == "1.1.0"
    assert report.updated is True
    assert report.states == [
        RunState.START,
        RunState.VALIDATED,
        RunState.REWRITE_APPLIED,
        RunState.BUILD_VERIFIED,
        RunState.HASHES_REGENERATED,
        RunState.METADATA_REGENERATED,
        RunState.COMMITTED,
        RunState.PUSHED,
        RunState.DONE,
    ]
    assert build.calls == ["build(clean=True)", "regenerate_checksums", "render_metadata"]
    assert vcs.staged == ["PKGBUILD", ".SRCINFO"]
    assert vcs.messages == ["Update PKGBUILD to version 1.1.0"]
    assert vcs.pushes == [("origin", "master")]

    text = (repo / "PKGBUILD").read_text(encoding="utf-8")
    assert "pkgver=1.1.0\npkgrel=1\n" in text
    assert "provides=('libfoo=1.0')\n" in text
    assert (repo / ".SRCINFO").read_text(encoding="utf-8") == "pkgbase = foo\n\tpkgver = 1.1.0\n"
    assert "Current package version is 1.0. Repo has version 1.1.0. Updating" in messages


def test_up_to_date_is_a_successful_noop(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    build, vcs = FakeBuild(), FakeVCS()

    report, messages = _run(repo, FakeFeed([release("v1.0")]), build, vcs)

    assert report.states == [RunState.START, RunState.VALIDATED, RunState.DONE]
    assert report.updated is False
    assert build.calls == []
    assert vcs.messages == []
    assert (repo / "PKGBUILD").read_text(encoding="utf-8") == FIXED_PKGBUILD
    assert not (repo / ".SRCINFO").exists()
    assert any("Nothing to do" in m for m in messages)


def test_force_with_same_version_still_resets_pkgrel(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)

    report, _ = _run(repo, FakeFeed([release("v1.0")]), FakeBuild(), FakeVCS(), force=True)

    assert report.updated is True
    assert "pkgrel" in report.changed
    assert "pkgver" not in report.changed
    assert "pkgver=1.0\npkgrel=1\n" in (repo / "PKGBUILD").read_text(encoding="utf-8")


def test_skip_build_skips_build_and_checksums_but_renders_metadata(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    build, vcs = FakeBuild(), FakeVCS()

    report, _ = _run(repo, FakeFeed([release("v2.0")]), build, vcs, skip_build=True)

    assert build.calls == ["render_metadata"]
    assert RunState.BUILD_VERIFIED not in report.states
    assert RunState.HASHES_REGENERATED not in report.states
    assert report.state is RunState.DONE
    assert vcs.messages == ["Update PKGBUILD to version 2.0"]
    assert vcs.pushes == []


def test_update_only_stops_before_commit(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    vcs = FakeVCS()

    report, _ = _run(repo, FakeFeed([release("v2.0")]), FakeBuild(), vcs, update_only=True, push=True)

    assert report.states[-2:] == [RunState.METADATA_REGENERATED, RunState.DONE]
    assert vcs.staged == []
    assert vcs.messages == []
    assert vcs.pushes == []
    assert (repo / ".SRCINFO").exists()


def test_vcs_package_builds_without_checksum_regeneration(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo-git", VCS_PKGBUILD)
    build = FakeBuild()

    report, _ = _run(repo, FakeFeed([release("r11")]), build, FakeVCS())

    assert report.kind is PackageKind.VCS
    assert build.calls == ["build(clean=True)", "render_metadata"]
    text = (repo / "PKGBUILD").read_text(encoding="utf-8")
    assert "pkgver=11\n" in text
    assert 'provides=("${pkgname%-git}")\n' in text


def test_build_failure_aborts_before_commit(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    build, vcs = FakeBuild(build_ok=False), FakeVCS()

    with pytest.raises(BuildFailure, match=r"FAILED TO BUILD"):
        _run(repo, FakeFeed([release("v2.0")]), build, vcs)

    assert build.calls == ["build(clean=True)"]
    assert vcs.staged == []
    assert not (repo / ".SRCINFO").exists()


def test_checksum_failure_aborts(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    vcs = FakeVCS()

    with pytest.raises(BuildFailure, match=r"sha256sums"):
        _run(repo, FakeFeed([release("v2.0")]), FakeBuild(hashes_ok=False), vcs)

    assert vcs.messages == []


def test_commit_failure_aborts_before_push(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    vcs = FakeVCS(commit_ok=False)

    with pytest.raises(CommitFailure, match=r"Update PKGBUILD to version 2.0"):
        _run(repo, FakeFeed([release("v2.0")]), FakeBuild(), vcs, push=True)

    assert vcs.pushes == []


def test_push_failure_leaves_commit_in_place(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    vcs = FakeVCS(push_ok=False)

    with pytest.raises(PushFailure, match=r"git push origin master failed"):
        _run(repo, FakeFeed([release("v2.0")]), FakeBuild(), vcs, push=True)

    assert vcs.messages == ["Update PKGBUILD to version 2.0"]


def test_naming_mismatch_fails_before_network(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "bar", FIXED_PKGBUILD)
    feed = FakeFeed([release("v2.0")])

    with pytest.raises(NamingMismatch):
        _run(repo, feed, FakeBuild(), FakeVCS())

    assert feed.urls == []
    assert (repo / "PKGBUILD").read_text(encoding="utf-8") == FIXED_PKGBUILD


def test_wrong_pkgver_type_fails_before_network(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo-git", FIXED_PKGBUILD.replace("pkgname=foo\n", "pkgname=foo-git\n"))
    feed = FakeFeed([release("v2.0")])

    with pytest.raises(VersionFieldTypeError):
        _run(repo, feed, FakeBuild(), FakeVCS())

    assert feed.urls == []


def test_vcs_package_with_pinned_checksums_fails_before_network(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo-git", VCS_PKGBUILD.replace("sha256sums=('SKIP')", "sha256sums=('abc123')"))
    feed = FakeFeed([release("v2.0")])

    with pytest.raises(InvariantViolation):
        _run(repo, feed, FakeBuild(), FakeVCS())

    assert feed.urls == []


def test_no_published_release_fails_and_leaves_file(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD)
    feed = FakeFeed([release("v2.0", draft=True), release("v2.1-rc", prerelease=True)])

    with pytest.raises(UnparseableVersion):
        _run(repo, feed, FakeBuild(), FakeVCS())

    assert (repo / "PKGBUILD").read_text(encoding="utf-8") == FIXED_PKGBUILD


def test_non_github_url_is_rejected(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo", FIXED_PKGBUILD.replace("https://github.com/", "https://gitlab.com/"))

    with pytest.raises(InvalidUpstreamURL, match=r"gitlab"):
        _run(repo, FakeFeed([]), FakeBuild(), FakeVCS())


def test_missing_directory_and_descriptor(tmp_path: Path) -> None:
    with pytest.raises(DescriptorNotFound, match=r"as a directory"):
        _run(tmp_path / "nope", FakeFeed([]), FakeBuild(), FakeVCS())

    empty = tmp_path / "foo"
    empty.mkdir()
    with pytest.raises(DescriptorNotFound, match=r"PKGBUILD' as a file"):
        _run(empty, FakeFeed([]), FakeBuild(), FakeVCS())


def test_custom_settings_flow_through(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo-hg", VCS_PKGBUILD.replace("pkgname=foo-git", "pkgname=foo-hg"))
    vcs = FakeVCS()
    settings = MaintSettings(vcs_marker="-hg", remote="aur", branch="main", commit_template="bump to {version}")

    report = maintain(
        repo,
        feed=FakeFeed([release("v3")]),
        build=FakeBuild(),
        vcs=vcs,
        options=RunOptions(push=True, skip_build=True),
        settings=settings,
    )

    assert report.kind is PackageKind.VCS
    assert vcs.messages == ["bump to 3"]
    assert vcs.pushes == [("aur", "main")]


def test_check_package_is_offline(tmp_path: Path) -> None:
    repo = make_repo(tmp_path, "foo-git", VCS_PKGBUILD)

    report = check_package(repo)

    assert report.kind is PackageKind.VCS
    assert report.current_version == "r10.abc123"
    assert report.state is RunState.VALIDATED
