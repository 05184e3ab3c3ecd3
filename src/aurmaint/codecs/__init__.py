"""Codecs for reading and rewriting package-build descriptors.

Only the PKGBUILD key=value/array format is supported.
"""

from __future__ import annotations

from .pkgbuild import parse_pkgbuild_text, read_pkgbuild, rewrite_pkgbuild_text, update_pkgbuild

__all__ = [
    "parse_pkgbuild_text",
    "read_pkgbuild",
    "rewrite_pkgbuild_text",
    "update_pkgbuild",
]
