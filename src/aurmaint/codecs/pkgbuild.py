"""PKGBUILD codec: parse + surgical rewrite.

Parsing produces a read-only `Descriptor` (see `aurmaint.core.model`).

Rewriting never re-renders the file. It runs one top-to-bottom scan over
immutable line records and replaces only:

- the first `pkgver=` line (later matches, eg. inside a routine body, pass through)
- every `pkgrel=` line (reset to `1`)
- `provides=` for fixed-version packages, pinned to the *current* pkgver

Every other line is emitted byte-for-byte, including its line ending. If no
`pkgver=` line is found the rewrite fails with `NoVersionFieldFound` and nothing
is written.
"""

from __future__ import annotations

import logging
from pathlib import Path

from aurmaint.codecs._pkgbuild_parser import scan_pkgbuild
from aurmaint.codecs._pkgbuild_writer import Rewriter, split_lines, write_text_atomic
from aurmaint.core.errors import NoVersionFieldFound
from aurmaint.core.model import PKGVER, PROVIDES, Descriptor, PackageKind, RewriteResult

log = logging.getLogger(__name__)


# ----------------------------
# Public API
# ----------------------------


def parse_pkgbuild_text(text: str) -> Descriptor:
    """Parse PKGBUILD text into a `Descriptor`.

    Raises:
        ParseError: on an unterminated quote or array.
    """
    if not isinstance(text, str):
        raise TypeError(f"parse_pkgbuild_text: expected str, got {type(text).__name__}")
    scalars, arrays, functions = scan_pkgbuild(text)
    return Descriptor(text=text, scalars=scalars, arrays=arrays, functions=frozenset(functions))


def read_pkgbuild(path: str | Path) -> Descriptor:
    p = Path(path)
    # newline="" keeps \r\n intact so rewrites stay byte-exact.
    with p.open("r", encoding="utf-8", newline="") as f:
        return parse_pkgbuild_text(f.read())


def scan_rewrite(
    text: str,
    *,
    version: str,
    kind: PackageKind,
    current_version: str | None,
    provide: str | None = None,
) -> RewriteResult:
    """Run the rewrite scan without raising; check `result.ok`."""
    rewriter = Rewriter(version=version, kind=kind, current_version=current_version, provide=provide)
    for line in split_lines(text):
        rewriter.feed(line)
    return rewriter.result()


def rewrite_pkgbuild_text(
    text: str,
    *,
    version: str,
    kind: PackageKind,
    current_version: str | None,
    provide: str | None = None,
) -> RewriteResult:
    """Rewrite PKGBUILD text for a new upstream version.

    Args:
        text: original PKGBUILD text.
        version: target upstream version.
        kind: package kind; `provides` is only rewritten for fixed-version packages.
        current_version: pkgver before the update, used to pin `provides`.
        provide: first item of the `provides` array, if any.

    Raises:
        NoVersionFieldFound: when no `pkgver=` line exists.
    """
    result = scan_rewrite(
        text,
        version=version,
        kind=kind,
        current_version=current_version,
        provide=provide,
    )
    if not result.ok:
        raise NoVersionFieldFound()
    return result


def update_pkgbuild(path: str | Path, desc: Descriptor, *, version: str, kind: PackageKind) -> RewriteResult:
    """Rewrite the PKGBUILD at `path` in place (atomically) and return the result.

    `desc` must be the descriptor parsed from the current file content.
    """
    provides = desc.array(PROVIDES)
    result = rewrite_pkgbuild_text(
        desc.text,
        version=version,
        kind=kind,
        current_version=desc.scalar(PKGVER),
        provide=provides[0] if provides else None,
    )
    write_text_atomic(Path(path), result.text)
    log.debug("rewrote %s (changed: %s)", path, ", ".join(sorted(result.changed)) or "nothing")
    return result


__all__ = [
    "parse_pkgbuild_text",
    "read_pkgbuild",
    "scan_rewrite",
    "rewrite_pkgbuild_text",
    "update_pkgbuild",
    "write_text_atomic",
]
