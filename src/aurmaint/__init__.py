"""aurmaint: keep a versioned AUR package in sync with its upstream releases.

Reads a PKGBUILD, checks it against its directory and package kind, resolves
the latest upstream release, rewrites `pkgver`/`pkgrel`/`provides` in place,
then builds, regenerates `.SRCINFO`, commits and pushes as requested.
"""

from __future__ import annotations

from aurmaint.codecs import parse_pkgbuild_text, read_pkgbuild
from aurmaint.core import Descriptor, MaintenanceError, PackageKind

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Descriptor",
    "MaintenanceError",
    "PackageKind",
    "parse_pkgbuild_text",
    "read_pkgbuild",
]
