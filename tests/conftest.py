"""Pytest configuration.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import aurmaint` to fail.

To keep the suite robust, we ensure `src/` is on `sys.path` during tests.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


# =============================================================================
# Shared PKGBUILD fixtures
# =============================================================================


FIXED_PKGBUILD = """\
# Maintainer: Jane Doe <jane at example dot org>
pkgname=foo
pkgver=1.0
pkgrel=3
pkgdesc="A demo package"
arch=('x86_64')
url="https://github.com/example/foo"
license=('MIT')
provides=('libfoo=0.9')
source=("$pkgname-$pkgver.tar.gz::$url/archive/v$pkgver.tar.gz")
sha256sums=('0123456789abcdef')

build() {
  cd "$pkgname-$pkgver"
  make
}

package() {
  cd "$pkgname-$pkgver"
  make DESTDIR="$pkgdir" install
}
"""


VCS_PKGBUILD = """\
_pkgname=foo
pkgname=foo-git
pkgver=r10.abc123
pkgrel=2
pkgdesc="A demo package (git version)"
arch=('any')
url="https://github.com/example/${_pkgname}"
provides=("${pkgname%-git}")
conflicts=("${pkgname%-git}")
source=("git+$url.git")
sha256sums=('SKIP')

pkgver() {
  cd "$_pkgname"
  printf "r%s.%s" "$(git rev-list --count HEAD)" "$(git rev-parse --short HEAD)"
}

package() {
  cd "$_pkgname"
  install -Dm644 LICENSE "$pkgdir/usr/share/licenses/$pkgname/LICENSE"
}
"""


def make_repo(root: Path, dirname: str, text: str) -> Path:
    """Create `<root>/<dirname>/PKGBUILD` and return the package directory."""
    repo = root / dirname
    repo.mkdir(parents=True, exist_ok=True)
    (repo / "PKGBUILD").write_text(text, encoding="utf-8", newline="")
    return repo


def release(tag: str, *, draft: bool = False, prerelease: bool = False) -> dict[str, Any]:
    return {"tag_name": tag, "draft": draft, "prerelease": prerelease, "name": f"Release {tag}"}


# =============================================================================
# In-memory collaborators
# =============================================================================


class FakeFeed:
    def __init__(self, entries: list[dict[str, Any]]) -> None:
        self.entries = entries
        self.urls: list[str] = []

    def fetch_releases(self, api_url: str) -> list[dict[str, Any]]:
        self.urls.append(api_url)
        return list(self.entries)


class FakeBuild:
    def __init__(self, *, build_ok: bool = True, hashes_ok: bool = True, srcinfo: str = "pkgbase = foo\n") -> None:
        self.build_ok = build_ok
        self.hashes_ok = hashes_ok
        self.srcinfo = srcinfo
        self.calls: list[str] = []

    def build(self, clean: bool = True) -> bool:
        self.calls.append(f"build(clean={clean})")
        return self.build_ok

    def regenerate_checksums(self) -> bool:
        self.calls.append("regenerate_checksums")
        return self.hashes_ok

    def render_metadata(self) -> str:
        self.calls.append("render_metadata")
        return self.srcinfo


class FakeVCS:
    def __init__(self, *, commit_ok: bool = True, push_ok: bool = True) -> None:
        self.commit_ok = commit_ok
        self.push_ok = push_ok
        self.staged: list[str] = []
        self.messages: list[str] = []
        self.pushes: list[tuple[str, str]] = []

    def stage(self, names: list[str]) -> None:
        self.staged.extend(names)

    def commit(self, message: str) -> bool:
        self.messages.append(message)
        return self.commit_ok

    def push(self, remote: str, branch: str) -> bool:
        self.pushes.append((remote, branch))
        return self.push_ok
