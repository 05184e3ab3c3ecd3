"""Core value types for aurmaint.

- Standalone frozen dataclasses with no I/O.
- A `Descriptor` is produced once per run by `aurmaint.codecs.pkgbuild` and
  passed explicitly to each component; nothing here holds global state.

This module must not import codecs/io/cli/workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

# Field names the core reads or rewrites.
PKGNAME = "pkgname"
PKGBASE = "pkgbase"
PKGVER = "pkgver"
PKGREL = "pkgrel"
PROVIDES = "provides"
URL = "url"

# Checksum families in the order makepkg prefers them.
HASH_ALGORITHMS: tuple[str, ...] = ("b2", "sha512", "sha384", "sha256", "sha224", "sha1", "md5", "ck")

# Entry makepkg accepts in a checksum array to mean "do not verify".
HASH_PLACEHOLDER = "SKIP"


class PackageKind(str, Enum):
    """Whether a package tracks a live upstream branch or a tagged release."""

    VCS = "vcs"
    FIXED = "fixed"

    @property
    def is_vcs(self) -> bool:
        return self is PackageKind.VCS


@dataclass(frozen=True)
class Descriptor:
    """Parsed view of a PKGBUILD.

    `scalars` and `arrays` hold top-level assignments only (function bodies are
    skipped). `functions` holds the names of every routine defined at top level.
    Absent fields are reported as "not set" (`None` / empty tuple), never as errors.
    """

    text: str
    scalars: Mapping[str, str] = field(default_factory=dict)
    arrays: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    functions: frozenset[str] = frozenset()

    def has_field(self, name: str) -> bool:
        return name in self.scalars or name in self.arrays

    def scalar(self, name: str) -> str | None:
        """Return a scalar value; for an array this is its first item (shell semantics)."""
        if name in self.scalars:
            return self.scalars[name]
        items = self.arrays.get(name)
        if items:
            return items[0]
        return None

    def array(self, name: str) -> tuple[str, ...]:
        """Return array items; a scalar reads as a one-item array (shell semantics)."""
        if name in self.arrays:
            return self.arrays[name]
        if name in self.scalars:
            return (self.scalars[name],)
        return ()

    def is_computed(self, name: str) -> bool:
        return name in self.functions

    @property
    def canonical_name(self) -> str | None:
        """`pkgbase` if set, else `pkgname`."""
        if self.has_field(PKGBASE):
            return self.scalar(PKGBASE)
        return self.scalar(PKGNAME)

    @property
    def hash_fields(self) -> dict[str, tuple[str, ...]]:
        """All checksum arrays, including architecture-suffixed ones (`sha256sums_x86_64`)."""
        out: dict[str, tuple[str, ...]] = {}
        names = list(self.arrays) + [n for n in self.scalars if n not in self.arrays]
        for name in names:
            if is_hash_field(name):
                out[name] = self.array(name)
        return out


def is_hash_field(name: str) -> bool:
    for algo in HASH_ALGORITHMS:
        base = f"{algo}sums"
        if name == base or name.startswith(base + "_"):
            return True
    return False


@dataclass(frozen=True)
class ReleaseVersion:
    """A normalized upstream version plus the tag it came from."""

    value: str
    tag: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RewriteResult:
    """Outcome of a single rewrite scan.

    `changed` lists the fields whose emitted line differs from the input
    (subset of `pkgver`, `pkgrel`, `provides`).
    """

    text: str
    version_found: bool
    changed: frozenset[str] = frozenset()

    @property
    def ok(self) -> bool:
        return self.version_found


@dataclass(frozen=True)
class HashPolicy:
    pinned_fields: tuple[str, ...]
    regenerate: bool

    @property
    def has_pinned(self) -> bool:
        return bool(self.pinned_fields)
