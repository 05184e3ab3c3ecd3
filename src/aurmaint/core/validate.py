"""Structural validation of a parsed PKGBUILD.

Runs before any network access or rewrite so a misconfigured package fails
fast:

- required fields (`url`, `pkgver`) are present
- canonical name (`pkgbase` or `pkgname`) matches the containing directory
- `pkgver` is a routine for version-controlled packages and a literal otherwise

Package kind is decided by `classify_package()` from the directory name alone.
"""

from __future__ import annotations

from aurmaint.core.errors import MissingField, NamingMismatch, VersionFieldTypeError
from aurmaint.core.model import PKGVER, URL, Descriptor, PackageKind

DEFAULT_VCS_MARKER = "-git"


def classify_package(dirname: str, *, marker: str = DEFAULT_VCS_MARKER) -> PackageKind:
    """Classify a package by its directory name.

    Any directory name containing `marker` is a version-controlled package.
    """
    if not marker:
        raise ValueError("classify_package: marker must be a non-empty string")
    return PackageKind.VCS if marker in dirname else PackageKind.FIXED


def require_fields(desc: Descriptor) -> None:
    """Hard errors for fields every run needs.

    `pkgver` counts as present when it is either assigned or defined as a routine.
    """
    if not desc.has_field(URL):
        raise MissingField(URL, "PKGBUILD does not contain repository URL")
    if not desc.has_field(PKGVER) and not desc.is_computed(PKGVER):
        raise MissingField(PKGVER)


def check_naming(desc: Descriptor, dirname: str) -> str:
    """Return the canonical package name, or raise `NamingMismatch`."""
    name = desc.canonical_name
    if name != dirname:
        raise NamingMismatch(package_name=name, dirname=dirname)
    return name


def check_version_field(desc: Descriptor, kind: PackageKind) -> None:
    computed = desc.is_computed(PKGVER)
    if kind.is_vcs and not computed:
        raise VersionFieldTypeError("pkgver should be a function in a git package")
    if not kind.is_vcs and computed:
        raise VersionFieldTypeError(
            f"pkgver should NOT be a function in a non git package (pkgver={desc.scalar(PKGVER)!r})"
        )


def validate_descriptor(
    desc: Descriptor,
    dirname: str,
    *,
    marker: str = DEFAULT_VCS_MARKER,
) -> PackageKind:
    """Run every structural check and return the package kind.

    Raises:
        MissingField, NamingMismatch, VersionFieldTypeError
    """
    require_fields(desc)
    check_naming(desc, dirname)
    kind = classify_package(dirname, marker=marker)
    check_version_field(desc, kind)
    return kind
